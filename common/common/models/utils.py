from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def normalize_id_fields_to_str(data: Any, *, fields: list[str]) -> Any:
    """지정한 필드의 ObjectId 등 비문자열 ID 값을 문자열로 바꾼다.

    바뀐 필드가 없으면 입력 객체를 그대로 돌려준다.
    """

    if not isinstance(data, Mapping):
        return data

    changed = False
    result: dict[str, Any] = dict(data)
    for field in fields:
        value = result.get(field)
        if value is None or isinstance(value, str):
            continue
        result[field] = str(value)
        changed = True

    if not changed:
        return data

    return result
