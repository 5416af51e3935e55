"""
Shared test fixtures for authcore.

This module provides:
- An in-memory users store (mongomock) behind the DatabaseAdapter interface
- Mock motor clients for testing the adapter's driver calls
- AuthService wired to the in-memory store
- Test user factories
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import mongomock
import pytest
import pytest_asyncio

from authcore.config import AuthOptions, DatabaseOptions, JWTOptions
from authcore.database.connections import DatabaseAdapter
from authcore.database.databases import auth_db
from authcore.services.auth_service import AuthService

TEST_SECRET = "test-secret-do-not-use-in-production"
TEST_DOMAIN = "example.com"


class MongomockDatabaseAdapter(DatabaseAdapter):
    """
    DatabaseAdapter running its queries synchronously against mongomock.

    The readiness gate and upsert logic are inherited unchanged.
    """

    def __init__(self, options: DatabaseOptions):
        super().__init__(options, client=mongomock.MongoClient())

    async def connect(self) -> None:
        users = self.db[auth_db.Collections.USERS]
        for field in auth_db.UNIQUE_USER_FIELDS:
            users.create_index(field, unique=True)
        self._ready.set()

    async def find(self, collection, query=None, projection=None, sort=None):
        await self.wait_until_ready()
        kwargs: dict[str, Any] = {}
        if projection:
            kwargs["projection"] = projection
        if sort:
            kwargs["sort"] = sort
        return list(self.db[collection].find(query or {}, **kwargs))

    async def insert_one(self, collection, doc):
        await self.wait_until_ready()
        return self.db[collection].insert_one(dict(doc)).inserted_id

    async def update_one(self, collection, query, update):
        await self.wait_until_ready()
        return self.db[collection].update_one(query, update).acknowledged

    async def delete_one(self, collection, query):
        await self.wait_until_ready()
        return self.db[collection].delete_one(query).deleted_count == 1


# =============================================================================
# Options Fixtures
# =============================================================================

@pytest.fixture
def database_options() -> DatabaseOptions:
    return DatabaseOptions(uri="mongodb://test:27017", name="auth_test", ready_timeout_seconds=1.0)


@pytest.fixture
def auth_options(database_options) -> AuthOptions:
    return AuthOptions(
        domain=TEST_DOMAIN,
        database=database_options,
        jwt=JWTOptions(secret=TEST_SECRET),
    )


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def mock_motor_collection():
    """A motor collection whose driver calls are AsyncMocks."""
    collection = MagicMock()
    collection.create_index = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()

    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    return collection


@pytest.fixture
def mock_motor_client(mock_motor_collection):
    """A motor client where every database/collection lookup yields mock_motor_collection."""
    db = MagicMock()
    db.__getitem__.return_value = mock_motor_collection
    client = MagicMock()
    client.__getitem__.return_value = db
    return client


@pytest_asyncio.fixture
async def db_adapter(database_options):
    """Connected in-memory store adapter."""
    adapter = MongomockDatabaseAdapter(database_options)
    await adapter.connect()
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def auth_service(auth_options, db_adapter) -> AuthService:
    return AuthService(auth_options, db=db_adapter)


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Registration payload for a basic user."""
    return {
        "email": "a@x.com",
        "username": "a",
        "password": "secret123",
        "name": "A",
        "pfp": "",
    }


@pytest.fixture
def other_user_data() -> dict:
    return {
        "email": "bob@example.com",
        "username": "bob",
        "password": "hunter2hunter2",
        "name": "Bob",
        "pfp": "https://cdn.example.com/bob.png",
    }


@pytest_asyncio.fixture
async def registered_user(auth_service, test_user_data):
    """AuthResponse for a user already registered through AuthService."""
    return await auth_service.register(test_user_data)
