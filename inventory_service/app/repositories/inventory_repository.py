from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError
from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from common.mongo.types import parse_object_id

from ..exceptions import ProductNotFoundError, StoreError
from ..models.credentials import Credentials
from ..models.product import Product
from ..models.transaction import Transaction
from .documents.credentials_document import CredentialsDocument
from .documents.product_document import ProductDocument
from .documents.transaction_document import TransactionDocument
from .interfaces import InventoryRepositoryInterface


logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """pymongo/도큐먼트 검증 오류를 StoreError 로 변환한다."""

    try:
        yield
    except (PyMongoError, ValidationError) as exc:
        raise StoreError(f"{operation} failed: {exc}") from exc


class InventoryRepository(InventoryRepositoryInterface):
    """products / transactions / users 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._products = database["products"]
        self._transactions = database["transactions"]
        self._users = database["users"]

    def get_products_table(self) -> list[Product]:
        with _store_errors("get_products_table"):
            cursor = self._products.find({}).sort("_id", ASCENDING)
            return [ProductDocument.model_validate(doc).to_domain() for doc in cursor]

    def get_transactions_table(self) -> list[Transaction]:
        with _store_errors("get_transactions_table"):
            cursor = self._transactions.find({}).sort(
                [("transaction_date", ASCENDING), ("_id", ASCENDING)]
            )
            return [
                TransactionDocument.model_validate(doc).to_domain() for doc in cursor
            ]

    def find_stored_hash(self, username: str) -> Credentials | None:
        with _store_errors("find_stored_hash"):
            doc = self._users.find_one({"username": username})
            if not doc:
                return None
            return CredentialsDocument.model_validate(doc).to_domain()

    def add_product(self, product: Product) -> str:
        with _store_errors("add_product"):
            payload = ProductDocument.from_domain(product).to_mongo_record()
            result = self._products.insert_one(payload)
            return str(result.inserted_id)

    def add_transaction(self, transaction: Transaction) -> str:
        with _store_errors("add_transaction"):
            payload = TransactionDocument.from_domain(transaction).to_mongo_record()
            result = self._transactions.insert_one(payload)
            return str(result.inserted_id)

    def delete_product(self, product_id: str) -> int:
        object_id = parse_object_id(product_id)
        if object_id is None:
            raise ProductNotFoundError(f"invalid product id: {product_id!r}")

        with _store_errors("delete_product"):
            result = self._products.delete_one({"_id": object_id})
            return result.deleted_count

    def prepare_forecast_data(self) -> list[dict[str, Any]]:
        """일자별 판매 수량 시계열을 만든다.

        예측 모델은 ``[{"ds": "YYYY-MM-DD", "y": <수량>}, ...]`` 형태(날짜 오름차순)를 입력으로 받는다.
        """

        pipeline: list[dict[str, Any]] = [
            {
                "$group": {
                    "_id": {
                        "$dateToString": {
                            "format": "%Y-%m-%d",
                            "date": "$transaction_date",
                        }
                    },
                    "y": {"$sum": "$quantity"},
                }
            },
            {"$sort": {"_id": 1}},
        ]

        with _store_errors("prepare_forecast_data"):
            rows = list(self._transactions.aggregate(pipeline))

        logger.info("prepared forecast input with %d daily rows", len(rows))
        return [{"ds": row["_id"], "y": row["y"]} for row in rows if row["_id"]]
