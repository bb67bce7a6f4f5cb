from __future__ import annotations

from datetime import datetime, timedelta, timezone

from bson import ObjectId

from inventory_service.app.models.login_session import LoginSession
from inventory_service.app.models.product import Product
from inventory_service.app.models.transaction import Transaction
from inventory_service.app.repositories.documents.credentials_document import (
    CredentialsDocument,
)
from inventory_service.app.repositories.documents.login_session_document import (
    LoginSessionDocument,
)
from inventory_service.app.repositories.documents.product_document import (
    ProductDocument,
)
from inventory_service.app.repositories.documents.transaction_document import (
    TransactionDocument,
)


def test_product_document_drops_client_id_and_keeps_extra_fields() -> None:
    product = Product(id="client-chosen", name="Oat milk", price=2.2, supplier="Oatly")

    record = ProductDocument.from_domain(product).to_mongo_record()

    assert "_id" not in record
    assert "id" not in record
    assert record == {"name": "Oat milk", "price": 2.2, "quantity": 0, "supplier": "Oatly"}


def test_product_document_ignores_client_supplied_mongo_id() -> None:
    client_id = "65f000000000000000000001"
    product = Product.model_validate({"name": "Oat milk", "_id": client_id})

    record = ProductDocument.from_domain(product).to_mongo_record()

    assert "_id" not in record
    assert record["name"] == "Oat milk"


def test_product_document_exposes_object_id_as_string() -> None:
    object_id = ObjectId()
    raw = {"_id": object_id, "name": "Oat milk", "price": 2.2, "quantity": 3}

    product = ProductDocument.model_validate(raw).to_domain()

    assert product.id == str(object_id)
    assert product.quantity == 3


def test_transaction_document_normalizes_reference_ids() -> None:
    product_id = ObjectId()
    raw = {
        "_id": ObjectId(),
        "product_id": product_id,
        "quantity": 2,
        # tz 없는 datetime 은 UTC 로 간주한다.
        "transaction_date": datetime(2024, 3, 1, 9, 0),
        "user_id": "user-alice",
    }

    transaction = TransactionDocument.model_validate(raw).to_domain()

    assert transaction.product_id == str(product_id)
    assert transaction.transaction_date == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert transaction.user_id == "user-alice"


def test_transaction_document_round_trip_keeps_user_id() -> None:
    transaction = Transaction(product_id="p-1", quantity=4, user_id="user-alice")

    record = TransactionDocument.from_domain(transaction).to_mongo_record()

    assert record["user_id"] == "user-alice"
    assert record["product_id"] == "p-1"
    assert isinstance(record["transaction_date"], datetime)


def test_transaction_document_ignores_client_supplied_mongo_id() -> None:
    transaction = Transaction.model_validate(
        {"_id": "65f000000000000000000002", "product_id": "p-1", "quantity": 1}
    )

    record = TransactionDocument.from_domain(transaction).to_mongo_record()

    assert "_id" not in record
    assert record["product_id"] == "p-1"


def test_credentials_document_falls_back_to_object_id() -> None:
    object_id = ObjectId()
    raw = {"_id": object_id, "username": "alice", "password_hash": "$2b$12$hash"}

    credentials = CredentialsDocument.model_validate(raw).to_domain()

    assert credentials.user_id == str(object_id)
    assert credentials.username == "alice"


def test_login_session_document_round_trip() -> None:
    now = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    session = LoginSession(
        session_id="token",
        user_id="user-alice",
        created_at=now,
        expires_at=now + timedelta(hours=24),
    )

    record = LoginSessionDocument.from_domain(session).to_mongo_record()
    restored = LoginSessionDocument.model_validate(record).to_domain()

    assert restored == session


def test_transaction_date_with_offset_is_stored_in_utc() -> None:
    transaction = Transaction.model_validate(
        {
            "product_id": "p-1",
            "quantity": 1,
            "transaction_date": "2024-03-01T18:00:00+09:00",
        }
    )

    assert transaction.transaction_date == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert transaction.transaction_date.utcoffset() == timedelta(0)
    assert (
        transaction.model_dump(mode="json")["transaction_date"]
        == "2024-03-01T09:00:00+00:00"
    )
