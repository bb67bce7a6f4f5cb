from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, model_validator

from common.models.utils import normalize_id_fields_to_str
from common.mongo.types import BaseDocument, MongoDateTime

from ...models.transaction import Transaction


class TransactionDocument(BaseDocument):
    """MongoDB transactions 컬렉션 도큐먼트 모델. 추가 필드는 그대로 보존한다."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True, populate_by_name=True, extra="allow"
    )

    product_id: str
    quantity: int
    price: float | None = None
    transaction_date: MongoDateTime
    user_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_reference_ids(cls, data: Any) -> Any:
        # 과거 데이터에는 참조 id 가 ObjectId 로 저장된 경우가 있다.
        return normalize_id_fields_to_str(data, fields=["product_id", "user_id"])

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionDocument":
        # extra 로 들어온 _id 가 alias 를 통해 도큐먼트 id 가 되지 않도록 버린다.
        data = transaction.model_dump(exclude={"id"})
        data.pop("_id", None)
        return cls.model_validate(data)

    def to_domain(self) -> Transaction:
        data = self.model_dump()
        data["id"] = str(self.id) if self.id is not None else None
        return Transaction.model_validate(data)
