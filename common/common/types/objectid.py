from __future__ import annotations

from typing import Annotated, Any

from pydantic.functional_validators import BeforeValidator


def _to_object_id_str(value: Any) -> Any:
    """Mongo ObjectId 등을 API 로 내보낼 문자열 ID로 변환한다. None 과 str 은 그대로 둔다."""

    if value is None or isinstance(value, str):
        return value
    return str(value)


ObjectIdStr = Annotated[str, BeforeValidator(_to_object_id_str)]
