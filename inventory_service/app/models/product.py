from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from common.types.objectid import ObjectIdStr


class Product(BaseModel):
    """상품 레코드.

    스키마는 저장소가 소유하므로 알려진 필드 외의 값도 그대로 통과시킨다.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: ObjectIdStr | None = None
    name: str
    price: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=0, ge=0)
