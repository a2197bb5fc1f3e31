"""Abstract base class for document database operations."""

from abc import ABC, abstractmethod
from typing import Any

from videomania.commons.infrastructure.blob.base import HealthStatus


class DocumentNotFoundError(Exception):
    """Raised when no document matches an (id, partition key) pair."""

    def __init__(self, collection: str, document_id: str, partition_key: str) -> None:
        self.collection = collection
        self.document_id = document_id
        self.partition_key = partition_key
        super().__init__(
            f"Document not found: {collection}/{document_id} "
            f"(partition key '{partition_key}')"
        )


class DocumentConflictError(Exception):
    """Raised when inserting a document whose id already exists."""

    def __init__(self, collection: str, document_id: str) -> None:
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"Document already exists: {collection}/{document_id}")


class UnknownCollectionError(Exception):
    """Raised when a collection has no registered partition key path."""

    def __init__(self, collection: str) -> None:
        self.collection = collection
        super().__init__(f"Unknown collection: {collection}")


class DocumentDBBase(ABC):
    """Partitioned document store.

    Every collection has a partition key path. Point reads, replaces and
    deletes address a document by ``(id, partition key value)``; a key that
    does not match the stored value behaves exactly like an unknown id.
    """

    @abstractmethod
    def partition_key_path(self, collection: str) -> str:
        """Return the partition key path of a collection.

        Raises:
            UnknownCollectionError: If the collection is not registered.
        """

    @abstractmethod
    async def insert(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> str:
        """Insert a document.

        Args:
            collection: Collection name.
            document: Document carrying ``id`` and its partition key value.

        Returns:
            The document id.

        Raises:
            DocumentConflictError: If the id already exists.
            ValueError: If the partition key value is missing.
        """

    @abstractmethod
    async def find_by_id(
        self,
        collection: str,
        document_id: str,
        partition_key: str,
    ) -> dict[str, Any] | None:
        """Point read by id within a partition.

        Returns:
            Document if found, None otherwise.
        """

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: dict[str, Any],
        skip: int = 0,
        limit: int = 0,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[dict[str, Any]]:
        """Find documents matching filters across partitions.

        Args:
            collection: Collection name.
            filters: Query filters.
            skip: Number of documents to skip.
            limit: Maximum documents to return, 0 for no limit.
            sort: Sort specification [(field, direction)].
                  Direction: 1 for ascending, -1 for descending.

        Returns:
            List of matching documents.
        """

    @abstractmethod
    async def find_one(
        self,
        collection: str,
        filters: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Find a single document matching filters."""

    @abstractmethod
    async def replace(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> None:
        """Replace a whole document keyed by its id and partition key value.

        Raises:
            DocumentNotFoundError: If nothing matched.
        """

    @abstractmethod
    async def delete(
        self,
        collection: str,
        document_id: str,
        partition_key: str,
    ) -> None:
        """Delete a document by id within a partition.

        Raises:
            DocumentNotFoundError: If nothing matched, including a
                partition key mismatch.
        """

    @abstractmethod
    async def create_index(
        self,
        collection: str,
        fields: list[tuple[str, int]],
        unique: bool = False,
        name: str | None = None,
    ) -> str:
        """Create an index on the collection.

        Returns:
            Index name.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
