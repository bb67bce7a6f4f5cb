from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from common.types.datetime import UtcDateTime
from common.types.objectid import ObjectIdStr


class Transaction(BaseModel):
    """판매 트랜잭션 레코드.

    - user_id 는 클라이언트가 보낸 값과 무관하게 세션의 사용자로 채워진다.
    - 알려지지 않은 필드는 그대로 저장소까지 전달된다.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: ObjectIdStr | None = None
    product_id: ObjectIdStr
    quantity: int = Field(gt=0)
    price: float | None = Field(default=None, ge=0)
    transaction_date: UtcDateTime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    user_id: str | None = None
