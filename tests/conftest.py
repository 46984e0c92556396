"""
fineauth - Pytest Configuration
Shared fixtures for all tests.
"""

import pytest
from pymongo.errors import DuplicateKeyError

from fineauth.core.auth.argon2_auth import Argon2Hasher
from fineauth.core.auth.auth_manager import AuthManager
from fineauth.core.config import AuthConfig, HasherConfig, MethodConfig, SessionConfig
from fineauth.db.memory import MemoryStorage

TEST_SECRET = "test-secret-key-that-is-long-enough-0123456789"

# OWASP minimum profile keeps the suite fast
FAST_HASHER = HasherConfig(memory_cost=19456, time_cost=2, parallelism=1, hash_length=32)


@pytest.fixture
def secret() -> str:
    return TEST_SECRET


@pytest.fixture
def hasher() -> Argon2Hasher:
    """Argon2Hasher with fast test parameters."""
    return FAST_HASHER.build_hasher()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def make_auth(storage):
    """Factory for AuthManager instances sharing the same storage."""
    def _make(expires_in="7d", secret=TEST_SECRET, backend=None) -> AuthManager:
        config = AuthConfig(
            secret=secret,
            storage=backend or storage,
            methods=MethodConfig(email=True),
            session=SessionConfig(expires_in=expires_in),
            hasher=FAST_HASHER,
        )
        auth = AuthManager(config)
        auth.prepare()
        return auth
    return _make


@pytest.fixture
def auth(make_auth) -> AuthManager:
    return make_auth()


# ══════════════════════════════════════════════════════════════════════════════
# FAKE MONGO (pymongo Database/Collection surface used by MongoStorage)
# ══════════════════════════════════════════════════════════════════════════════


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: dict = {}
        self.indexes: list = []
        self._unique_fields: set = set()

    @staticmethod
    def _matches(doc: dict, query: dict) -> bool:
        return all(doc.get(key) == value for key, value in query.items())

    def create_index(self, keys, unique=False, **kwargs):
        self.indexes.append((keys, unique, kwargs))
        if unique:
            self._unique_fields.add(keys)
        return f"{keys}_1"

    def insert_one(self, doc: dict):
        if doc["_id"] in self.docs:
            raise DuplicateKeyError("E11000 duplicate key error: _id", code=11000)
        for field in self._unique_fields:
            if any(existing.get(field) == doc.get(field) for existing in self.docs.values()):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}", code=11000)
        self.docs[doc["_id"]] = dict(doc)

    def find_one(self, query: dict):
        for doc in self.docs.values():
            if self._matches(doc, query):
                return dict(doc)
        return None

    def delete_one(self, query: dict):
        for key, doc in list(self.docs.items()):
            if self._matches(doc, query):
                del self.docs[key]
                return

    def delete_many(self, query: dict):
        for key, doc in list(self.docs.items()):
            if self._matches(doc, query):
                del self.docs[key]


class FakeMongoDatabase:
    def __init__(self) -> None:
        self.collections: dict = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()
