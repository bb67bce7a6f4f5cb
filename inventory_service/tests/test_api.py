from __future__ import annotations

import sys
import textwrap
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from inventory_service.app.config import AppConfig, ForecastConfig, SessionConfig
from inventory_service.app.exceptions import ProductNotFoundError, StoreError
from inventory_service.app.main import create_app
from inventory_service.app.models.credentials import Credentials
from inventory_service.app.models.login_session import LoginSession
from inventory_service.app.models.product import Product
from inventory_service.app.models.transaction import Transaction
from inventory_service.app.repositories.memory_session_repository import (
    InMemoryLoginSessionRepository,
)
from inventory_service.app.services.credentials_service import hash_password
from inventory_service.app.services.records_service import get_inventory_repository


T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
ALICE_HASH = hash_password("correct")
COOKIE_NAME = "userID"

ECHO_MODEL = """
import json
import sys

history = json.load(sys.stdin)
json.dump({"history": history, "forecast": [{"ds": "2024-01-03", "yhat": 4.0}]}, sys.stdout)
"""

SILENT_FAILURE_MODEL = """
import sys

sys.stdin.read()
sys.exit(1)
"""


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeInventoryRepository:
    """InventoryRepositoryInterface 를 메모리로 흉내 내는 가짜 저장소."""

    def __init__(self) -> None:
        self.products: list[Product] = [
            Product(id="product-1", name="Espresso beans", price=12.5, quantity=40),
        ]
        self.transactions: list[Transaction] = []
        self.users: dict[str, Credentials] = {
            "alice": Credentials(
                user_id="user-alice", username="alice", password_hash=ALICE_HASH
            ),
        }
        self.forecast_input: Any = [{"ds": "2024-01-01", "y": 3}]
        self.raise_error: Exception | None = None

    def _maybe_raise(self) -> None:
        if self.raise_error is not None:
            raise self.raise_error

    def get_products_table(self) -> list[Product]:
        self._maybe_raise()
        return list(self.products)

    def get_transactions_table(self) -> list[Transaction]:
        self._maybe_raise()
        return list(self.transactions)

    def find_stored_hash(self, username: str) -> Credentials | None:
        self._maybe_raise()
        return self.users.get(username)

    def add_product(self, product: Product) -> str:
        self._maybe_raise()
        product_id = f"product-{len(self.products) + 1}"
        self.products.append(product.model_copy(update={"id": product_id}))
        return product_id

    def add_transaction(self, transaction: Transaction) -> str:
        self._maybe_raise()
        transaction_id = f"transaction-{len(self.transactions) + 1}"
        self.transactions.append(transaction.model_copy(update={"id": transaction_id}))
        return transaction_id

    def delete_product(self, product_id: str) -> int:
        self._maybe_raise()
        if not product_id.startswith("product-"):
            raise ProductNotFoundError(f"invalid product id: {product_id!r}")
        before = len(self.products)
        self.products = [p for p in self.products if p.id != product_id]
        return before - len(self.products)

    def prepare_forecast_data(self) -> Any:
        self._maybe_raise()
        return self.forecast_input


class BrokenDeleteSessionRepository(InMemoryLoginSessionRepository):
    def delete_by_session_id(self, session_id: str) -> bool:
        raise StoreError("session store unavailable")


@dataclass
class ApiFixture:
    client: TestClient
    repo: FakeInventoryRepository
    sessions: InMemoryLoginSessionRepository
    clock: FakeClock


def _build_fixture(
    tmp_path: Path,
    model_source: str = ECHO_MODEL,
    sessions: InMemoryLoginSessionRepository | None = None,
    static_dir: Path | None = None,
) -> ApiFixture:
    script = tmp_path / "forecastmodel.py"
    script.write_text(textwrap.dedent(model_source), encoding="utf-8")

    config = AppConfig(
        port=0,
        session=SessionConfig(),
        forecast=ForecastConfig(
            python=sys.executable,
            script_path=str(script),
            timeout_seconds=30.0,
        ),
        static_dir=static_dir,
    )
    repo = FakeInventoryRepository()
    session_repo = sessions if sessions is not None else InMemoryLoginSessionRepository()
    clock = FakeClock(T0)

    app = create_app(config, session_repository=session_repo, clock=clock)
    app.dependency_overrides[get_inventory_repository] = lambda: repo

    return ApiFixture(
        client=TestClient(app),
        repo=repo,
        sessions=session_repo,
        clock=clock,
    )


@pytest.fixture
def api(tmp_path: Path) -> ApiFixture:
    return _build_fixture(tmp_path)


def _login(client: TestClient, username: str = "alice", password: str = "correct"):
    return client.post("/login", json={"username": username, "password": password})


def test_login_logout_scenario(api: ApiFixture) -> None:
    response = _login(api.client)
    assert response.status_code == 200
    assert response.json() is True

    status = api.client.get("/login")
    assert status.json() == {"loggedIn": True, "user_id": "user-alice"}

    logout = api.client.post("/logout")
    assert logout.status_code == 200
    assert logout.json() == {"message": "Successfully Logged Out"}

    after = api.client.get("/login")
    assert after.json() == {"loggedIn": False}
    assert len(api.sessions) == 0


def test_login_sets_http_only_cookie_for_one_day(api: ApiFixture) -> None:
    response = _login(api.client)

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{COOKIE_NAME}=")
    assert "HttpOnly" in set_cookie
    assert "Max-Age=86400" in set_cookie
    assert "Secure" not in set_cookie


@pytest.mark.parametrize(
    ("username", "password"),
    [("alice", "wrong"), ("nobody", "correct")],
)
def test_invalid_credentials_return_false_without_cookie(
    api: ApiFixture, username: str, password: str
) -> None:
    response = _login(api.client, username, password)

    assert response.status_code == 200
    assert response.json() is False
    assert "set-cookie" not in response.headers
    assert len(api.sessions) == 0
    assert api.client.get("/login").json() == {"loggedIn": False}


def test_new_login_replaces_previous_session(api: ApiFixture) -> None:
    _login(api.client)
    first_token = api.client.cookies.get(COOKIE_NAME)

    _login(api.client)
    second_token = api.client.cookies.get(COOKIE_NAME)

    assert first_token != second_token
    assert api.sessions.find_by_session_id(first_token) is None
    assert len(api.sessions) == 1


def test_session_expires_after_one_day(api: ApiFixture) -> None:
    _login(api.client)

    api.clock.now = T0 + timedelta(hours=24) - timedelta(seconds=1)
    assert api.client.get("/login").json()["loggedIn"] is True

    api.clock.now = T0 + timedelta(hours=24)
    assert api.client.get("/login").json() == {"loggedIn": False}


def test_logout_without_session_is_idempotent(api: ApiFixture) -> None:
    first = api.client.post("/logout")
    second = api.client.post("/logout")

    assert first.status_code == second.status_code == 200
    assert second.json() == {"message": "Successfully Logged Out"}


def test_logout_reports_store_failure(tmp_path: Path) -> None:
    api = _build_fixture(tmp_path, sessions=BrokenDeleteSessionRepository())
    api.sessions.create(
        LoginSession(
            session_id="live-token",
            user_id="user-alice",
            created_at=T0,
            expires_at=T0 + timedelta(hours=24),
        )
    )
    api.client.cookies.set(COOKIE_NAME, "live-token")

    response = api.client.post("/logout")

    assert response.status_code == 500
    assert response.json() == {"message": "There was an error logging out, try again"}


def test_add_transaction_stamps_session_user(api: ApiFixture) -> None:
    _login(api.client)

    response = api.client.post(
        "/addNewTransaction",
        json={"product_id": "product-1", "quantity": 2, "user_id": "user-mallory"},
    )

    assert response.status_code == 200
    assert response.json() == {"acknowledged": True, "inserted_id": "transaction-1"}
    assert len(api.repo.transactions) == 1
    assert api.repo.transactions[0].user_id == "user-alice"


def test_add_transaction_requires_session(api: ApiFixture) -> None:
    response = api.client.post(
        "/addNewTransaction",
        json={"product_id": "product-1", "quantity": 2},
    )

    assert response.status_code == 401
    assert response.json() == {"loggedIn": False}
    assert api.repo.transactions == []


def test_product_crud(api: ApiFixture) -> None:
    created = api.client.post(
        "/addNewProduct",
        json={"name": "Oat milk", "price": 2.2, "quantity": 10, "supplier": "Oatly"},
    )
    assert created.json() == {"acknowledged": True, "inserted_id": "product-2"}

    products = api.client.get("/getProducts").json()
    assert [p["name"] for p in products] == ["Espresso beans", "Oat milk"]
    assert products[1]["supplier"] == "Oatly"

    deleted = api.client.post("/deleteProduct", json={"id": "product-1"})
    assert deleted.json() == {"acknowledged": True, "deleted_count": 1}
    assert [p["id"] for p in api.client.get("/getProducts").json()] == ["product-2"]


def test_delete_unknown_product_id_format_is_not_found(api: ApiFixture) -> None:
    response = api.client.post("/deleteProduct", json={"id": "garbage"})

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_get_transactions_lists_records(api: ApiFixture) -> None:
    api.repo.transactions.append(
        Transaction(
            id="transaction-1",
            product_id="product-1",
            quantity=3,
            transaction_date=T0,
            user_id="user-alice",
        )
    )

    response = api.client.get("/getTransactions")

    assert response.status_code == 200
    body = response.json()
    assert body[0]["quantity"] == 3
    assert body[0]["transaction_date"] == "2024-03-01T09:00:00+00:00"


def test_store_error_is_reported_as_generic_server_error(api: ApiFixture) -> None:
    api.repo.raise_error = StoreError("connection refused by mongo-0:27017")

    response = api.client.get("/getProducts")

    assert response.status_code == 500
    assert response.json() == {"error": "Server Error"}
    assert "mongo" not in response.text


def test_unexpected_error_is_contained(api: ApiFixture) -> None:
    api.repo.raise_error = RuntimeError("something broke")

    response = api.client.post(
        "/addNewProduct", json={"name": "Oat milk", "price": 2.2}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Server Error"}


def test_login_store_error_is_server_error(api: ApiFixture) -> None:
    api.repo.raise_error = StoreError("users unavailable")

    response = _login(api.client)

    assert response.status_code == 500
    assert response.json() == {"error": "Server Error"}


def test_invalid_body_is_rejected_by_validation(api: ApiFixture) -> None:
    response = api.client.post("/login", json={"username": "alice"})

    assert response.status_code == 422


def test_create_forecast_round_trip(api: ApiFixture) -> None:
    response = api.client.get("/createForecast")

    assert response.status_code == 200
    assert response.json() == {
        "history": [{"ds": "2024-01-01", "y": 3}],
        "forecast": [{"ds": "2024-01-03", "yhat": 4.0}],
    }


def test_create_forecast_failure_still_answers(tmp_path: Path) -> None:
    api = _build_fixture(tmp_path, model_source=SILENT_FAILURE_MODEL)

    response = api.client.get("/createForecast")

    assert response.status_code == 502
    assert response.json() == {
        "error": "Forecast model returned invalid output",
        "exit_code": 1,
    }


def test_health(api: ApiFixture) -> None:
    assert api.client.get("/health").json() == {"status": "ok"}


def test_responses_carry_request_id(api: ApiFixture) -> None:
    response = api.client.get("/getProducts", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"


def test_static_client_is_served_without_shadowing_api_routes(tmp_path: Path) -> None:
    client_dir = tmp_path / "client"
    client_dir.mkdir()
    (client_dir / "index.html").write_text("<h1>inventory</h1>", encoding="utf-8")
    (client_dir / "forecast.html").write_text("<h1>forecast</h1>", encoding="utf-8")
    api = _build_fixture(tmp_path, static_dir=client_dir)

    index = api.client.get("/")
    assert index.status_code == 200
    assert "inventory" in index.text

    # 확장자 없는 경로는 같은 이름의 .html 파일로 응답한다.
    page = api.client.get("/forecast")
    assert page.status_code == 200
    assert "forecast" in page.text

    products = api.client.get("/getProducts")
    assert products.status_code == 200
    assert products.json()[0]["name"] == "Espresso beans"

    assert api.client.get("/missing").status_code == 404
