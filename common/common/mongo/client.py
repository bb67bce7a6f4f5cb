from __future__ import annotations

import logging
import threading
from typing import Optional, cast

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from .config import get_mongo_db_name, get_mongo_uri


logger = logging.getLogger(__name__)


_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """전역 MongoClient 싱글톤을 반환한다.

    - MONGO_URI 에서 URI 를 읽어온다.
    - ping 으로 연결을 검증한다.
    - MONGO_DB_NAME 또는 URI 의 기본 데이터베이스를 사용한다.
    - 필요한 인덱스를 한 번만 생성한다.

    MongoClient 는 스레드 안전하므로 threadpool 에서 실행되는 핸들러들이 공유해도 된다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        client = MongoClient(get_mongo_uri())

        try:
            client.admin.command("ping")
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(f"failed to connect to MongoDB: {exc}") from exc

        db_name = get_mongo_db_name()
        try:
            if db_name:
                db = client[db_name]
            else:
                db = client.get_default_database()
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(
                "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
            ) from exc

        try:
            _ensure_indexes(db)
        except Exception as exc:  # noqa: BLE001
            logger.error("failed to ensure MongoDB indexes: %s", exc)
            client.close()
            raise

        _client = client
        _db = db

        safe_db = cast(Database, _db)
        logger.info("MongoDB connected and indexes ensured (db=%s)", safe_db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다."""

    if _db is None:
        get_client()
    assert _db is not None  # get_client 가 실패했다면 예외가 이미 발생했어야 한다.
    return _db


def close_client() -> None:
    """앱 종료 시 싱글톤 연결을 닫는다."""

    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        _db = None


def _ensure_indexes(db: Database) -> None:
    """필수 인덱스를 생성한다. 중복 생성은 MongoDB 가 무시하므로 idempotent 하다."""

    users = db["users"]
    users.create_index(
        [("username", ASCENDING)],
        name="uniq_username",
        unique=True,
    )

    transactions = db["transactions"]
    transactions.create_index(
        [("transaction_date", ASCENDING)],
        name="idx_transaction_date",
    )
    transactions.create_index(
        [("user_id", ASCENDING), ("transaction_date", DESCENDING)],
        name="idx_user_transaction_date",
    )

    sessions = db["login_sessions"]
    sessions.create_index(
        [("session_id", ASCENDING)],
        name="uniq_session_id",
        unique=True,
    )
    # expires_at 이 지나면 Mongo 가 도큐먼트를 지운다. 삭제는 지연될 수 있어
    # 애플리케이션에서도 만료를 한 번 더 확인한다.
    sessions.create_index(
        [("expires_at", ASCENDING)],
        name="ttl_expires_at",
        expireAfterSeconds=0,
    )
