"""Per-blob ingest workflow run by the background worker."""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack
from pathlib import Path

from videomania.application.dtos.ingest import IngestReport, IngestState
from videomania.application.services.metadata import MetadataStore
from videomania.commons.infrastructure.blob.base import BlobStorageBase
from videomania.commons.settings.models import Settings
from videomania.commons.telemetry import LogContext, get_logger
from videomania.domain.exceptions import IngestionException
from videomania.domain.models import MediaMetadata, ProcessingUpdate
from videomania.domain.value_objects import BlobName
from videomania.infrastructure.video.base import MediaProcessorBase

THUMBNAIL_SUFFIX = "_thumbnail.jpg"
RESIZED_SUFFIX = "_resized.mp4"


class IngestWorkflow:
    """Derive a thumbnail, a resized copy and metadata for one new blob.

    States, in order: TRIGGERED, RESOLVED, STAGED, THUMBNAIL_DONE (optional),
    RESIZE_DONE (optional), METADATA_EXTRACTED, PERSISTED, CLEANED_UP.
    Blobs with a foreign extension or no matching video end in SKIPPED.

    Thumbnail, resize and probe failures are soft: the run persists
    whatever succeeded. Errors while staging, uploading or persisting are
    re-raised as ``IngestionException`` once temp files are released, so
    the trigger can deliver the blob again.
    """

    def __init__(
        self,
        metadata: MetadataStore,
        blob_storage: BlobStorageBase,
        media_processor: MediaProcessorBase,
        settings: Settings,
    ) -> None:
        """Initialize the workflow.

        Args:
            metadata: Typed metadata store.
            blob_storage: Blob storage for derived artifacts.
            media_processor: Local media operations.
            settings: Application settings.
        """
        self._metadata = metadata
        self._blob = blob_storage
        self._media = media_processor
        self._processing = settings.processing
        self._thumbnails_bucket = settings.blob_storage.containers.thumbnails
        self._processed_bucket = settings.blob_storage.containers.processed_videos
        self._allowed_extensions = {
            ext.lower() for ext in settings.processing.ingest_extensions
        }
        self._logger = get_logger(__name__)

    async def run(self, blob_name: str, stream: AsyncIterator[bytes]) -> IngestReport:
        """Process one newly created blob.

        Args:
            blob_name: Name of the blob in the watched container.
            stream: The blob's content.

        Returns:
            Report of the states visited and artifacts produced.

        Raises:
            IngestionException: After cleanup, when a hard step failed.
        """
        report = IngestReport(blob_name=blob_name)
        report.advance(IngestState.TRIGGERED)

        name = BlobName.from_url(blob_name)
        with LogContext(blob_name=name.value):
            if name.extension not in self._allowed_extensions:
                self._logger.info(
                    "Skipping blob with unsupported extension",
                    extra={"extension": name.extension},
                )
                report.skip_reason = f"extension {name.extension or '(none)'}"
                report.advance(IngestState.SKIPPED)
                return report

            video_id = await self._metadata.find_video_id_by_blob_name(name.value)
            if video_id is None:
                self._logger.info("No video record for blob, skipping")
                report.skip_reason = "no matching video"
                report.advance(IngestState.SKIPPED)
                return report

            report.video_id = video_id
            report.advance(IngestState.RESOLVED)

            with LogContext(video_id=video_id):
                await self._process(name, video_id, stream, report)

        return report

    async def _process(
        self,
        name: BlobName,
        video_id: str,
        stream: AsyncIterator[bytes],
        report: IngestReport,
    ) -> None:
        stage = IngestState.RESOLVED.value
        async with AsyncExitStack() as cleanup:
            cleanup.callback(report.advance, IngestState.CLEANED_UP)
            try:
                stage = "staging"
                source = await self._media.persist_stream_to_temp_file(
                    stream, name.value
                )
                cleanup.callback(self._media.delete_temp_file, source)
                report.advance(IngestState.STAGED)

                stage = "thumbnail"
                thumbnail_blob = await self._thumbnail(name, source, cleanup)
                if thumbnail_blob:
                    report.thumbnail_blob = thumbnail_blob
                    report.advance(IngestState.THUMBNAIL_DONE)

                stage = "resize"
                resized_blob = await self._resize(name, source, cleanup)
                if resized_blob:
                    report.resized_blob = resized_blob
                    report.advance(IngestState.RESIZE_DONE)

                stage = "probe"
                metadata = await self._probe(source)
                report.metadata_extracted = metadata is not None
                report.advance(IngestState.METADATA_EXTRACTED)

                stage = "persist"
                update = ProcessingUpdate(
                    thumbnail_url=thumbnail_blob,
                    resized_video_url=resized_blob,
                    metadata=metadata,
                )
                result = await self._metadata.save_processing(video_id, update)
                if result.is_not_found:
                    self._logger.warning(
                        "Video disappeared before results were saved",
                        extra={"error": result.error},
                    )
                else:
                    report.status = update.status
                    report.advance(IngestState.PERSISTED)
                    self._logger.info(
                        "Ingest completed",
                        extra={
                            "status": update.status.value,
                            "thumbnail": thumbnail_blob,
                            "resized": resized_blob,
                        },
                    )
            except Exception as e:
                self._logger.error(
                    "Ingest failed",
                    extra={"stage": stage, "error": str(e)},
                    exc_info=True,
                )
                raise IngestionException(name.value, stage, str(e)) from e

    async def _thumbnail(
        self, name: BlobName, source: Path, cleanup: AsyncExitStack
    ) -> str | None:
        """Extract and upload the thumbnail; None when no frame could be taken."""
        target = name.derived(THUMBNAIL_SUFFIX)
        cleanup.callback(self._media.delete_temp_file, self._media.temp_dir / target)

        result = await self._media.extract_thumbnail(
            source, target, at_seconds=self._processing.thumbnail_at_seconds
        )
        if not result.is_success or result.value is None:
            self._logger.warning(
                "Thumbnail not produced",
                extra={"status": result.status.value, "error": result.error},
            )
            return None

        await self._blob.ensure_container(self._thumbnails_bucket)
        await self._blob.upload_file(
            self._thumbnails_bucket, target, result.value, content_type="image/jpeg"
        )
        return target

    async def _resize(
        self, name: BlobName, source: Path, cleanup: AsyncExitStack
    ) -> str | None:
        """Transcode and upload the resized copy; None when it failed."""
        target = name.derived(RESIZED_SUFFIX)
        cleanup.callback(self._media.delete_temp_file, self._media.temp_dir / target)

        result = await self._media.transcode_resize(
            source,
            target,
            width=self._processing.resize_width,
            height=self._processing.resize_height,
        )
        if not result.is_success or result.value is None:
            self._logger.warning(
                "Resized copy not produced",
                extra={"status": result.status.value, "error": result.error},
            )
            return None

        await self._blob.ensure_container(self._processed_bucket)
        await self._blob.upload_file(
            self._processed_bucket, target, result.value, content_type="video/mp4"
        )
        return target

    async def _probe(self, source: Path) -> MediaMetadata | None:
        result = await self._media.probe(source)
        if not result.is_success:
            self._logger.warning(
                "Metadata probe failed",
                extra={"status": result.status.value, "error": result.error},
            )
            return None
        return result.value
