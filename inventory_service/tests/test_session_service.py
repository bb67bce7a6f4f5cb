from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from inventory_service.app.exceptions import SessionDestroyError, StoreError
from inventory_service.app.models.login_session import LoginSession
from inventory_service.app.repositories.memory_session_repository import (
    InMemoryLoginSessionRepository,
)
from inventory_service.app.services.session_service import SessionService


T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
DAY = timedelta(hours=24)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FailingSessionRepository:
    """모든 연산이 저장소 장애로 실패하는 세션 저장소."""

    def __init__(self) -> None:
        self.delete_calls: list[str] = []

    def create(self, session: LoginSession) -> LoginSession:
        raise StoreError("session store unavailable")

    def find_by_session_id(self, session_id: str) -> LoginSession | None:
        raise StoreError("session store unavailable")

    def delete_by_session_id(self, session_id: str) -> bool:
        self.delete_calls.append(session_id)
        raise StoreError("session store unavailable")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def repo() -> InMemoryLoginSessionRepository:
    return InMemoryLoginSessionRepository()


@pytest.fixture
def service(repo: InMemoryLoginSessionRepository, clock: FakeClock) -> SessionService:
    return SessionService(repo, max_age=DAY, clock=clock)


def test_login_creates_session_bound_to_user(
    service: SessionService, repo: InMemoryLoginSessionRepository
) -> None:
    session = service.login("user-alice")

    assert session.user_id == "user-alice"
    assert session.created_at == T0
    assert session.expires_at == T0 + DAY
    assert len(session.session_id) >= 32
    assert repo.find_by_session_id(session.session_id) == session


def test_login_issues_unique_tokens(service: SessionService) -> None:
    tokens = {service.login("user-alice").session_id for _ in range(20)}

    assert len(tokens) == 20


def test_login_replaces_previous_session_of_the_client(
    service: SessionService, repo: InMemoryLoginSessionRepository
) -> None:
    first = service.login("user-alice")

    second = service.login("user-bob", previous_token=first.session_id)

    assert repo.find_by_session_id(first.session_id) is None
    assert service.check(first.session_id).logged_in is False
    assert service.check(second.session_id).user_id == "user-bob"
    assert len(repo) == 1


def test_check_reports_logged_in_until_expiry(
    service: SessionService, clock: FakeClock
) -> None:
    session = service.login("user-alice")

    clock.now = T0 + DAY - timedelta(microseconds=1)
    status = service.check(session.session_id)

    assert status.logged_in is True
    assert status.user_id == "user-alice"


def test_check_reports_logged_out_at_expiry_and_purges(
    service: SessionService,
    repo: InMemoryLoginSessionRepository,
    clock: FakeClock,
) -> None:
    session = service.login("user-alice")

    clock.now = T0 + DAY
    status = service.check(session.session_id)

    assert status.logged_in is False
    assert status.user_id is None
    assert repo.find_by_session_id(session.session_id) is None


@pytest.mark.parametrize("token", [None, "", "unknown-token"])
def test_check_without_valid_token_is_anonymous(
    service: SessionService, token: str | None
) -> None:
    assert service.check(token).logged_in is False


def test_check_degrades_to_anonymous_when_store_fails(clock: FakeClock) -> None:
    service = SessionService(FailingSessionRepository(), max_age=DAY, clock=clock)

    status = service.check("some-token")

    assert status.logged_in is False


def test_destroy_invalidates_session(service: SessionService) -> None:
    session = service.login("user-alice")

    service.destroy(session.session_id)

    assert service.check(session.session_id).logged_in is False


@pytest.mark.parametrize("token", [None, "", "already-gone"])
def test_destroy_without_live_session_is_noop(
    service: SessionService, token: str | None
) -> None:
    service.destroy(token)


def test_destroy_raises_when_store_cannot_invalidate(clock: FakeClock) -> None:
    repo = FailingSessionRepository()
    service = SessionService(repo, max_age=DAY, clock=clock)

    with pytest.raises(SessionDestroyError):
        service.destroy("some-token")

    assert repo.delete_calls == ["some-token"]


def test_login_propagates_store_failure(clock: FakeClock) -> None:
    service = SessionService(FailingSessionRepository(), max_age=DAY, clock=clock)

    with pytest.raises(StoreError):
        service.login("user-alice")


def test_login_session_rejects_non_increasing_expiry() -> None:
    with pytest.raises(ValueError):
        LoginSession(
            session_id="token",
            user_id="user-alice",
            created_at=T0,
            expires_at=T0,
        )
