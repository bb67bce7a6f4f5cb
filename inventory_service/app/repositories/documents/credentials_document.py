from __future__ import annotations

from typing import Optional

from common.mongo.types import BaseDocument

from ...models.credentials import Credentials


class CredentialsDocument(BaseDocument):
    """MongoDB users 컬렉션 도큐먼트 모델.

    user_id 필드가 없는 도큐먼트는 _id 를 사용자 식별자로 사용한다.
    """

    username: str
    password_hash: str
    user_id: Optional[str] = None

    def to_domain(self) -> Credentials:
        user_id = self.user_id or (str(self.id) if self.id is not None else None)
        if user_id is None:
            raise ValueError(f"user document without identifier (username={self.username})")
        return Credentials(
            user_id=user_id,
            username=self.username,
            password_hash=self.password_hash,
        )
