from __future__ import annotations

from typing import Any, Protocol

from ..models.credentials import Credentials
from ..models.login_session import LoginSession
from ..models.product import Product
from ..models.transaction import Transaction


class InventoryRepositoryInterface(Protocol):
    """상품/트랜잭션/자격 증명 저장소가 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    저장소 장애는 StoreError 로 올려 보낸다.
    """

    def get_products_table(self) -> list[Product]:  # pragma: no cover - Protocol
        ...

    def get_transactions_table(
        self,
    ) -> list[Transaction]:  # pragma: no cover - Protocol
        ...

    def find_stored_hash(
        self, username: str
    ) -> Credentials | None:  # pragma: no cover - Protocol
        ...

    def add_product(self, product: Product) -> str:  # pragma: no cover - Protocol
        """새 상품을 저장하고 생성된 id 를 반환한다."""
        ...

    def add_transaction(
        self, transaction: Transaction
    ) -> str:  # pragma: no cover - Protocol
        """새 트랜잭션을 저장하고 생성된 id 를 반환한다."""
        ...

    def delete_product(self, product_id: str) -> int:  # pragma: no cover - Protocol
        """삭제된 도큐먼트 개수를 반환한다. id 형식이 틀리면 ProductNotFoundError."""
        ...

    def prepare_forecast_data(self) -> Any:  # pragma: no cover - Protocol
        """예측 모델 입력으로 그대로 직렬화될 구조를 반환한다."""
        ...


class LoginSessionRepositoryInterface(Protocol):
    """세션 저장소 계약.

    - session_id 단위의 연산은 원자적이어야 하지만, 서로 다른 키끼리는 독립적이다.
    - 만료 여부 판단은 SessionService 가 담당한다.
    """

    def create(
        self, session: LoginSession
    ) -> LoginSession:  # pragma: no cover - Protocol
        ...

    def find_by_session_id(
        self, session_id: str
    ) -> LoginSession | None:  # pragma: no cover - Protocol
        ...

    def delete_by_session_id(
        self, session_id: str
    ) -> bool:  # pragma: no cover - Protocol
        """삭제했으면 True, 원래 없었으면 False."""
        ...
