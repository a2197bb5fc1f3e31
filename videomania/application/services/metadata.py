"""Typed access to the Users, Videos and Comments collections."""

from typing import Any, TypeVar

from videomania.commons.infrastructure.documentdb.base import (
    DocumentDBBase,
    DocumentNotFoundError,
)
from videomania.commons.settings.models import DocumentDBSettings
from videomania.commons.telemetry import get_logger
from videomania.domain.models import (
    Comment,
    DocumentModel,
    OperationResult,
    ProcessingUpdate,
    Video,
)

M = TypeVar("M", bound=DocumentModel)


class MetadataStore:
    """Metadata persistence for videos and comments.

    Wraps a partitioned document store. Videos are partitioned by
    ``userId`` and comments by ``videoId``; every point read, replace and
    delete must pass the matching partition key value.
    """

    def __init__(
        self,
        document_db: DocumentDBBase,
        doc_settings: DocumentDBSettings,
    ) -> None:
        """Initialize the store.

        Args:
            document_db: Document database provider.
            doc_settings: Collection names.
        """
        self._doc_db = document_db
        self._logger = get_logger(__name__)

        self.users_collection = doc_settings.collections.users
        self.videos_collection = doc_settings.collections.videos
        self.comments_collection = doc_settings.collections.comments

    # =========================================================================
    # Generic operations
    # =========================================================================

    async def add(self, item: DocumentModel, collection: str) -> str:
        """Insert a new record."""
        return await self._doc_db.insert(collection, item.to_document())

    async def get(
        self,
        item_id: str,
        partition_key: str,
        collection: str,
        model: type[M],
    ) -> M | None:
        """Point read; None when the id is unknown within that partition."""
        doc = await self._doc_db.find_by_id(collection, item_id, partition_key)
        return model.from_document(doc) if doc else None

    async def query(
        self,
        filters: dict[str, Any],
        collection: str,
        model: type[M],
        sort: list[tuple[str, int]] | None = None,
    ) -> list[M]:
        """Cross-partition query using store filter expressions."""
        docs = await self._doc_db.find(collection, filters, sort=sort)
        return [model.from_document(doc) for doc in docs]

    async def delete(self, item_id: str, partition_key: str, collection: str) -> None:
        """Delete a record.

        Raises:
            DocumentNotFoundError: If nothing matched the id and partition key.
        """
        await self._doc_db.delete(collection, item_id, partition_key)

    # =========================================================================
    # Videos
    # =========================================================================

    async def list_videos(self) -> list[Video]:
        """All videos, newest first."""
        return await self.query(
            {}, self.videos_collection, Video, sort=[("uploadedAt", -1)]
        )

    async def find_video_by_id(self, video_id: str) -> Video | None:
        """Look a video up by id alone.

        The owning user is unknown to callers that only hold the id, so this
        queries across partitions instead of doing a point read.
        """
        matches = await self.query({"id": video_id}, self.videos_collection, Video)
        return matches[0] if matches else None

    async def find_video_id_by_blob_name(self, blob_name: str) -> str | None:
        """Id of the video whose ``url`` is this blob name."""
        doc = await self._doc_db.find_one(self.videos_collection, {"url": blob_name})
        return str(doc["id"]) if doc else None

    async def add_video(self, video: Video) -> str:
        video_id = await self.add(video, self.videos_collection)
        self._logger.info(
            "Video recorded",
            extra={"video_id": video_id, "blob_name": video.url},
        )
        return video_id

    async def delete_video(self, video: Video) -> None:
        """Delete a video record using its owner as partition key.

        Raises:
            DocumentNotFoundError: If the record is already gone.
        """
        await self.delete(video.id, video.user_id, self.videos_collection)
        self._logger.info("Video record deleted", extra={"video_id": video.id})

    async def save_processing(
        self,
        video_id: str,
        update: ProcessingUpdate,
    ) -> OperationResult[Video]:
        """Attach an ingest run's results to a video.

        Read-modify-write of the whole typed record; concurrent writers are
        last-write-wins.
        """
        video = await self.find_video_by_id(video_id)
        if video is None:
            return OperationResult.not_found(f"Video {video_id} not found")

        updated = video.with_processing(update)
        try:
            await self._doc_db.replace(self.videos_collection, updated.to_document())
        except DocumentNotFoundError as e:
            # Deleted between the read and the write
            return OperationResult.not_found(str(e))

        self._logger.info(
            "Processing results saved",
            extra={"video_id": video_id, "status": update.status.value},
        )
        return OperationResult.ok(updated)

    # =========================================================================
    # Comments
    # =========================================================================

    async def list_comments(self, video_id: str) -> list[Comment]:
        """Comments on one video, oldest first."""
        return await self.query(
            {"videoId": video_id},
            self.comments_collection,
            Comment,
            sort=[("createdAt", 1)],
        )

    async def add_comment(self, comment: Comment) -> str:
        return await self.add(comment, self.comments_collection)

    async def delete_comment(
        self, comment_id: str, video_id: str
    ) -> OperationResult[str]:
        """Delete a comment, always partitioned by its owning video id.

        A missing comment, or one stored under another video, is reported
        as ``NOT_FOUND`` rather than raised.
        """
        try:
            await self.delete(comment_id, video_id, self.comments_collection)
        except DocumentNotFoundError:
            self._logger.info(
                "Comment not found for deletion",
                extra={"comment_id": comment_id, "video_id": video_id},
            )
            return OperationResult.not_found(
                f"Comment {comment_id} not found for video {video_id}"
            )
        return OperationResult.ok(comment_id)

    # =========================================================================
    # Setup
    # =========================================================================

    async def ensure_indexes(self) -> None:
        """Create the lookup indexes the queries above rely on."""
        await self._doc_db.create_index(self.videos_collection, [("url", 1)])
        await self._doc_db.create_index(self.videos_collection, [("userId", 1)])
        await self._doc_db.create_index(self.videos_collection, [("uploadedAt", -1)])
        await self._doc_db.create_index(self.comments_collection, [("videoId", 1)])
        self._logger.debug("Document indexes ensured")
