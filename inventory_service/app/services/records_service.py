from __future__ import annotations

import logging

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..models.product import Product
from ..models.transaction import Transaction
from ..repositories.interfaces import InventoryRepositoryInterface
from ..repositories.inventory_repository import InventoryRepository


logger = logging.getLogger(__name__)


class RecordsService:
    """상품/트랜잭션 CRUD 비즈니스 로직.

    - Repository(InventoryRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    """

    def __init__(self, repo: InventoryRepositoryInterface) -> None:
        self._repo = repo

    def list_products(self) -> list[Product]:
        return self._repo.get_products_table()

    def list_transactions(self) -> list[Transaction]:
        return self._repo.get_transactions_table()

    def add_product(self, product: Product) -> str:
        inserted_id = self._repo.add_product(product)
        logger.info("product %s added (name=%s)", inserted_id, product.name)
        return inserted_id

    def delete_product(self, product_id: str) -> int:
        deleted = self._repo.delete_product(product_id)
        logger.info("delete product %s removed %d documents", product_id, deleted)
        return deleted

    def add_transaction(self, transaction: Transaction, user_id: str) -> str:
        """세션 사용자로 user_id 를 덮어쓴 뒤 저장한다."""

        stamped = transaction.model_copy(update={"user_id": user_id})
        inserted_id = self._repo.add_transaction(stamped)
        logger.info(
            "transaction %s added (product_id=%s, user_id=%s)",
            inserted_id,
            stamped.product_id,
            user_id,
        )
        return inserted_id


def get_inventory_repository(
    db: Database = Depends(get_database),
) -> InventoryRepositoryInterface:
    """FastAPI DI용 InventoryRepository 팩토리."""

    return InventoryRepository(db)


def get_records_service(
    repo: InventoryRepositoryInterface = Depends(get_inventory_repository),
) -> RecordsService:
    return RecordsService(repo)
