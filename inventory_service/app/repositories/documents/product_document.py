from __future__ import annotations

from pydantic import ConfigDict

from common.mongo.types import BaseDocument

from ...models.product import Product


class ProductDocument(BaseDocument):
    """MongoDB products 컬렉션 도큐먼트 모델. 추가 필드는 그대로 보존한다."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True, populate_by_name=True, extra="allow"
    )

    name: str
    price: float = 0.0
    quantity: int = 0

    @classmethod
    def from_domain(cls, product: Product) -> "ProductDocument":
        # 새 상품의 _id 는 Mongo 가 생성하므로 클라이언트가 보낸 id / _id 는 버린다.
        data = product.model_dump(exclude={"id"})
        data.pop("_id", None)
        return cls.model_validate(data)

    def to_domain(self) -> Product:
        data = self.model_dump()
        data["id"] = str(self.id) if self.id is not None else None
        return Product.model_validate(data)
