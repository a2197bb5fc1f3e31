"""MongoDB implementation of document database."""

import time
from collections.abc import Mapping
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from videomania.commons.infrastructure.blob.base import HealthStatus
from videomania.commons.infrastructure.documentdb.base import (
    DocumentConflictError,
    DocumentDBBase,
    DocumentNotFoundError,
    UnknownCollectionError,
)
from videomania.commons.telemetry import get_logger


def _to_mongo(document: dict[str, Any]) -> dict[str, Any]:
    doc = document.copy()
    # Use the domain model 'id' as MongoDB's '_id'
    if "id" in doc:
        doc["_id"] = doc.pop("id")
    return doc


def _from_mongo(document: Mapping[str, Any]) -> dict[str, Any]:
    doc = dict(document)
    doc["id"] = str(doc.pop("_id"))
    return doc


def _translate_filters(filters: dict[str, Any]) -> dict[str, Any]:
    if "id" not in filters:
        return filters
    translated = filters.copy()
    translated["_id"] = translated.pop("id")
    return translated


class MongoDBDocumentDB(DocumentDBBase):
    """MongoDB implementation of document database.

    Uses Motor for async operations. MongoDB has no partitions of its own,
    so the partition key is enforced by adding ``{path: value}`` to every
    point filter. A key that does not match the stored value finds nothing.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str,
        partition_keys: Mapping[str, str],
    ) -> None:
        """Initialize MongoDB client.

        Args:
            connection_string: MongoDB connection URI.
            database_name: Name of the database to use.
            partition_keys: Collection name to partition key path,
                e.g. ``{"Videos": "userId"}``.
        """
        self._client: AsyncIOMotorClient[dict[str, Any]] = AsyncIOMotorClient(
            connection_string
        )
        self._db: AsyncIOMotorDatabase[dict[str, Any]] = self._client[database_name]
        self._database_name = database_name
        self._partition_keys = dict(partition_keys)
        self._logger = get_logger(__name__)

    def partition_key_path(self, collection: str) -> str:
        try:
            return self._partition_keys[collection]
        except KeyError:
            raise UnknownCollectionError(collection) from None

    def _point_filter(
        self, collection: str, document_id: str, partition_key: str
    ) -> dict[str, Any] | None:
        """Filter addressing one document, or None when no document can match."""
        path = self.partition_key_path(collection)
        if path == "id":
            # The id is its own partition key
            return {"_id": document_id} if document_id == partition_key else None
        return {"_id": document_id, path: partition_key}

    async def insert(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> str:
        """Insert a document.

        The domain model 'id' is stored as MongoDB's '_id'.
        """
        path = self.partition_key_path(collection)
        if not document.get(path):
            raise ValueError(
                f"Document for {collection} is missing partition key '{path}'"
            )

        doc = _to_mongo(document)
        try:
            result = await self._db[collection].insert_one(doc)
        except DuplicateKeyError as e:
            raise DocumentConflictError(collection, str(doc.get("_id"))) from e
        return str(result.inserted_id)

    async def find_by_id(
        self,
        collection: str,
        document_id: str,
        partition_key: str,
    ) -> dict[str, Any] | None:
        """Point read by id within a partition.

        Returns the document with 'id' field restored from '_id'.
        """
        point = self._point_filter(collection, document_id, partition_key)
        if point is None:
            return None

        doc = await self._db[collection].find_one(point)
        if doc:
            return _from_mongo(doc)
        return None

    async def find(
        self,
        collection: str,
        filters: dict[str, Any],
        skip: int = 0,
        limit: int = 0,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[dict[str, Any]]:
        """Find documents matching filters.

        Returns documents with 'id' field restored from '_id'.
        """
        self.partition_key_path(collection)
        cursor = self._db[collection].find(_translate_filters(filters))

        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)

        results: list[dict[str, Any]] = []
        async for doc in cursor:
            results.append(_from_mongo(doc))

        return results

    async def find_one(
        self,
        collection: str,
        filters: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Find a single document matching filters."""
        self.partition_key_path(collection)
        doc = await self._db[collection].find_one(_translate_filters(filters))
        if doc:
            return _from_mongo(doc)
        return None

    async def replace(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> None:
        """Replace a whole document keyed by (id, partition key)."""
        path = self.partition_key_path(collection)
        document_id = str(document.get("id", ""))
        partition_key = str(document.get(path, ""))

        point = self._point_filter(collection, document_id, partition_key)
        if point is None:
            raise DocumentNotFoundError(collection, document_id, partition_key)

        result = await self._db[collection].replace_one(point, _to_mongo(document))
        if result.matched_count == 0:
            raise DocumentNotFoundError(collection, document_id, partition_key)

    async def delete(
        self,
        collection: str,
        document_id: str,
        partition_key: str,
    ) -> None:
        """Delete a document by (id, partition key)."""
        point = self._point_filter(collection, document_id, partition_key)
        if point is None:
            raise DocumentNotFoundError(collection, document_id, partition_key)

        result = await self._db[collection].delete_one(point)
        if result.deleted_count == 0:
            raise DocumentNotFoundError(collection, document_id, partition_key)

    async def create_index(
        self,
        collection: str,
        fields: list[tuple[str, int]],
        unique: bool = False,
        name: str | None = None,
    ) -> str:
        """Create an index on the collection."""
        index_name = await self._db[collection].create_index(
            fields,
            unique=unique,
            name=name,
        )
        return str(index_name)

    async def health_check(self) -> HealthStatus:
        """Check service health."""
        start = time.perf_counter()
        try:
            await self._client.admin.command("ping")
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=True,
                latency_ms=latency_ms,
                message="MongoDB is healthy",
                details={"database": self._database_name},
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=False,
                latency_ms=latency_ms,
                message=f"MongoDB health check failed: {e}",
                details={"database": self._database_name, "error": str(e)},
            )

    async def close(self) -> None:
        """Close the client connection."""
        self._client.close()
