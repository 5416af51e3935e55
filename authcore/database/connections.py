"""
MongoDB connection management and the users store adapter.
"""
import asyncio
import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from authcore.config import DatabaseOptions
from authcore.database.databases import auth_db
from authcore.exceptions import StoreNotReady

logger = logging.getLogger(__name__)


class DatabaseAdapter:
    """
    Thin async adapter over a MongoDB database.

    The adapter is created once per process and shared. ``connect()`` must be
    called once (usually from the application lifespan); data operations
    issued before it finishes wait for the connection instead of failing.
    """

    def __init__(
        self,
        options: Optional[DatabaseOptions] = None,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        """
        Args:
            options: Connection options
            client: Pre-built motor client; created from ``options.uri`` when None
        """
        if isinstance(options, dict):
            options = DatabaseOptions(**options)
        self.options = options or DatabaseOptions()
        self.client = client
        self._ready = asyncio.Event()
        self._connecting: Optional[asyncio.Lock] = None

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self.client is None:
            raise StoreNotReady()
        return self.client[self.options.name]

    async def connect(self) -> None:
        """Open the client, create indexes and mark the adapter ready."""
        if self._connecting is None:
            self._connecting = asyncio.Lock()

        async with self._connecting:
            if self._ready.is_set():
                return

            if self.client is None:
                self.client = AsyncIOMotorClient(self.options.uri)

            await auth_db.create_indexes(self.db)
            self._ready.set()
            logger.info(f"Connected to MongoDB database '{self.options.name}'")

    async def close(self) -> None:
        """Close the client and mark the adapter not ready."""
        self._ready.clear()
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")

    async def wait_until_ready(self) -> None:
        """
        Block until ``connect()`` has completed.

        Raises:
            StoreNotReady: If the connection is not ready within
                ``options.ready_timeout_seconds``
        """
        if self._ready.is_set():
            return
        try:
            await asyncio.wait_for(
                self._ready.wait(), timeout=self.options.ready_timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            raise StoreNotReady() from exc

    async def find(
        self,
        collection: str,
        query: Optional[dict[str, Any]] = None,
        projection: Optional[dict[str, Any]] = None,
        sort: Optional[list[tuple[str, int]]] = None,
    ) -> list[dict[str, Any]]:
        """Return every document matching ``query`` (empty list when none)."""
        await self.wait_until_ready()
        kwargs: dict[str, Any] = {}
        if projection:
            kwargs["projection"] = projection
        if sort:
            kwargs["sort"] = sort
        cursor = self.db[collection].find(query or {}, **kwargs)
        return await cursor.to_list(length=None)

    async def insert_one(self, collection: str, doc: dict[str, Any]) -> Any:
        """Insert a document and return the id assigned by the store."""
        await self.wait_until_ready()
        result = await self.db[collection].insert_one(dict(doc))
        return result.inserted_id

    async def update_one(
        self, collection: str, query: dict[str, Any], update: dict[str, Any]
    ) -> bool:
        """Apply an update document to the first match."""
        await self.wait_until_ready()
        result = await self.db[collection].update_one(query, update)
        return result.acknowledged

    async def delete_one(self, collection: str, query: dict[str, Any]) -> bool:
        """Delete the first match. Returns True if a document was removed."""
        await self.wait_until_ready()
        result = await self.db[collection].delete_one(query)
        return result.deleted_count == 1

    async def upsert(
        self, collection: str, query: dict[str, Any], fields: dict[str, Any]
    ) -> Any:
        """
        Update the matching document with ``fields``, or insert ``fields``
        as a new document when nothing matches.

        Two round trips; concurrent callers can both take the insert branch.
        """
        existing = await self.find(collection, query)
        if existing:
            return await self.update_one(collection, query, {"$set": dict(fields)})
        return await self.insert_one(collection, fields)

    @staticmethod
    def transform_id(doc: dict[str, Any]) -> dict[str, Any]:
        """Copy of ``doc`` with the ObjectId ``_id`` replaced by a string ``id``."""
        data = {k: v for k, v in doc.items() if k != "_id"}
        data["id"] = str(doc["_id"])
        return data
