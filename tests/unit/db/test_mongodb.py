"""
MongoStorage-specific tests.
"""

from datetime import datetime

import pytest
from pymongo.errors import DuplicateKeyError

from fineauth.core.errors import UserAlreadyExistsError
from fineauth.db.mongodb import MongoStorage


class TestMongoStorage:

    def test_prepare_creates_indexes(self, mongo_database):
        MongoStorage(mongo_database).prepare()

        users, sessions = mongo_database["users"], mongo_database["sessions"]
        assert ("email", True, {}) in users.indexes
        assert ("expiresAt", False, {"expireAfterSeconds": 0}) in sessions.indexes
        assert ("userId", False, {}) in sessions.indexes

    def test_custom_collection_names(self, mongo_database):
        store = MongoStorage(mongo_database, users_collection="accounts", sessions_collection="logins")
        store.create_user("m@example.com", "salt:key")

        assert len(mongo_database["accounts"].docs) == 1
        assert "users" not in mongo_database.collections

    def test_document_layout(self, mongo_database):
        store = MongoStorage(mongo_database)
        user = store.create_user("m@example.com", "salt:key")

        doc = mongo_database["users"].docs[user.id]
        assert doc["passwordHash"] == "salt:key"
        assert isinstance(doc["createdAt"], datetime)

    def test_naive_datetimes_come_back_as_utc(self, mongo_database):
        store = MongoStorage(mongo_database)
        mongo_database["sessions"].docs["s1"] = {
            "_id": "s1",
            "userId": "u1",
            "expiresAt": datetime(2030, 1, 1),
            "createdAt": datetime(2029, 12, 25),
        }

        session = store.get_session("s1")

        assert session.expires_at.tzinfo is not None
        assert session.expires_at.year == 2030

    def test_duplicate_key_maps_to_user_exists(self, mongo_database):
        def insert_one(doc):
            raise DuplicateKeyError("E11000 duplicate key error", code=11000)

        store = MongoStorage(mongo_database)
        mongo_database["users"].insert_one = insert_one

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            store.create_user("m@example.com", "salt:key")
        assert isinstance(exc_info.value.__cause__, DuplicateKeyError)

    def test_other_driver_errors_propagate(self, mongo_database):
        class Boom(Exception):
            code = 13

        def insert_one(doc):
            raise Boom("unauthorized")

        store = MongoStorage(mongo_database)
        mongo_database["users"].insert_one = insert_one

        with pytest.raises(Boom):
            store.create_user("m@example.com", "salt:key")
