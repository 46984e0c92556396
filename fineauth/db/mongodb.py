"""
MongoDB Storage
===============

Document storage backend. Works with any pymongo-compatible ``Database``
object: only ``db[name]`` plus insert_one / find_one / delete_one /
delete_many / create_index are used.

prepare() creates a unique index on users.email and a TTL index on
sessions.expiresAt, so the server also reaps expired sessions on its own
schedule. Lazy expiry in the core still applies in between.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pymongo.errors import DuplicateKeyError

from fineauth.core.auth.models import Session, User
from fineauth.core.errors import UserAlreadyExistsError
from fineauth.db.base import StorageAdapter, ensure_utc
from fineauth.utils.identifiers import generate_user_id


class MongoStorage(StorageAdapter):
    """
    MongoDB-backed storage.

    Usage:
        client = pymongo.MongoClient(MONGO_URL)
        storage = MongoStorage(client["myapp"])
        storage.prepare()
    """

    def __init__(self, database: Any, users_collection: str = "users",
                 sessions_collection: str = "sessions") -> None:
        self._users = database[users_collection]
        self._sessions = database[sessions_collection]
        self._log = logging.getLogger("fineauth.db")

    def prepare(self) -> None:
        self._users.create_index("email", unique=True)
        self._sessions.create_index("userId")
        self._sessions.create_index("expiresAt", expireAfterSeconds=0)
        self._log.debug("MongoDB indexes ready")

    def create_user(self, email: str, password_hash: str) -> User:
        user = User(
            id=generate_user_id(),
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self._users.insert_one({
                "_id": user.id,
                "email": user.email,
                "passwordHash": user.password_hash,
                "createdAt": user.created_at,
            })
        except DuplicateKeyError as e:
            raise UserAlreadyExistsError() from e

        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        doc = self._users.find_one({"email": email})
        return self._doc_to_user(doc) if doc else None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        doc = self._users.find_one({"_id": user_id})
        return self._doc_to_user(doc) if doc else None

    def create_session(self, session_id: str, user_id: str, expires_at: datetime) -> Session:
        session = Session(
            id=session_id,
            user_id=user_id,
            expires_at=ensure_utc(expires_at),
            created_at=datetime.now(timezone.utc),
        )
        self._sessions.insert_one({
            "_id": session.id,
            "userId": session.user_id,
            "expiresAt": session.expires_at,
            "createdAt": session.created_at,
        })
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        doc = self._sessions.find_one({"_id": session_id})
        return self._doc_to_session(doc) if doc else None

    def delete_session(self, session_id: str) -> None:
        self._sessions.delete_one({"_id": session_id})

    def delete_user_sessions(self, user_id: str) -> None:
        self._sessions.delete_many({"userId": user_id})

    @staticmethod
    def _doc_to_user(doc: dict) -> User:
        return User(
            id=doc["_id"],
            email=doc["email"],
            password_hash=doc["passwordHash"],
            created_at=ensure_utc(doc["createdAt"]),
        )

    @staticmethod
    def _doc_to_session(doc: dict) -> Session:
        # pymongo returns naive UTC datetimes unless tz_aware=True
        return Session(
            id=doc["_id"],
            user_id=doc["userId"],
            expires_at=ensure_utc(doc["expiresAt"]),
            created_at=ensure_utc(doc["createdAt"]),
        )
