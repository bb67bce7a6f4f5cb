from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

import bcrypt
from fastapi import Depends

from ..repositories.interfaces import InventoryRepositoryInterface
from .records_service import get_inventory_repository


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VerificationResult:
    matched: bool
    user_id: str | None = None


def hash_password(password: str) -> str:
    """bcrypt 로 비밀번호를 해시한다. 사용자 등록 스크립트와 테스트에서 사용한다."""

    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def check_password(password: str, stored_hash: str) -> bool:
    """평문 비밀번호를 bcrypt 해시와 비교한다.

    해시 형식이 잘못됐거나 비밀번호가 bcrypt 입력 한도를 넘으면 불일치로 처리한다.
    """

    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError as exc:
        logger.warning("bcrypt comparison rejected input: %s", exc)
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # 없는 사용자도 실제 해시와 같은 비용으로 비교해 응답 시간 차이를 줄인다.
    return hash_password("inventory-forecast-dummy-password")


class CredentialsService:
    """username/password 를 저장된 bcrypt 해시로 검증한다.

    - 없는 사용자와 틀린 비밀번호를 구분하지 않는다.
    - 세션 생성 같은 부수 효과는 호출자가 담당한다.
    """

    def __init__(self, repo: InventoryRepositoryInterface) -> None:
        self._repo = repo

    def verify(self, username: str, password: str) -> VerificationResult:
        credentials = self._repo.find_stored_hash(username)
        if credentials is None:
            check_password(password, _dummy_hash())
            return VerificationResult(matched=False)

        if not check_password(password, credentials.password_hash):
            return VerificationResult(matched=False)

        return VerificationResult(matched=True, user_id=credentials.user_id)


def get_credentials_service(
    repo: InventoryRepositoryInterface = Depends(get_inventory_repository),
) -> CredentialsService:
    return CredentialsService(repo)
