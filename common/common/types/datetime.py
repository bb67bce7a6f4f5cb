from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic.functional_serializers import PlainSerializer
from pydantic.functional_validators import AfterValidator


def as_utc(value: datetime) -> datetime:
    """tz 없는 값은 UTC 로 간주하고, 다른 오프셋은 UTC 로 옮긴다."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# 입력 시점에 UTC 로 맞춰 두므로 저장소와 API 응답이 항상 같은 시각 표현을 쓴다.
UtcDateTime = Annotated[
    datetime,
    AfterValidator(as_utc),
    PlainSerializer(
        lambda value: as_utc(value).isoformat(),
        return_type=str,
        when_used="json",
    ),
]
