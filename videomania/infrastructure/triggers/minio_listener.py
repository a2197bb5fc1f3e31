"""Blob-created trigger built on MinIO bucket notifications."""

import asyncio
from collections.abc import Awaitable, Callable, Iterator

from videomania.commons.infrastructure.blob import BlobCreatedEvent, BlobStorageBase
from videomania.commons.telemetry import LogContext, get_logger, set_correlation_id

BlobCreatedHandler = Callable[[BlobCreatedEvent], Awaitable[object]]


class BlobCreatedListener:
    """Invoke a handler once per object-created notification.

    A handler that raises is retried up to ``max_attempts`` times for the
    same event, then the event is logged as abandoned and listening goes on.
    """

    def __init__(
        self,
        blob_storage: BlobStorageBase,
        bucket: str,
        handler: BlobCreatedHandler,
        suffixes: list[str] | None = None,
        max_attempts: int = 5,
    ) -> None:
        self._blob_storage = blob_storage
        self._bucket = bucket
        self._handler = handler
        self._suffixes = suffixes
        self._max_attempts = max(1, max_attempts)
        self._logger = get_logger(__name__)

    async def dispatch(self, event: BlobCreatedEvent) -> bool:
        """Deliver one event, retrying on failure.

        Returns:
            True if the handler eventually succeeded.
        """
        for attempt in range(1, self._max_attempts + 1):
            set_correlation_id()
            with LogContext(blob_name=event.path, attempt=attempt):
                try:
                    await self._handler(event)
                    return True
                except Exception as e:
                    self._logger.error(
                        "Blob trigger handler failed",
                        extra={
                            "bucket": event.bucket,
                            "error": str(e),
                            "max_attempts": self._max_attempts,
                        },
                        exc_info=attempt == self._max_attempts,
                    )

        self._logger.error(
            "Giving up on blob after repeated failures",
            extra={"bucket": event.bucket, "blob_name": event.path},
        )
        return False

    async def run(self, max_events: int | None = None) -> int:
        """Listen until the notification stream ends or ``max_events`` arrive.

        Returns:
            Number of events dispatched.
        """
        loop = asyncio.get_event_loop()
        events: Iterator[BlobCreatedEvent] = iter(
            self._blob_storage.listen_created(self._bucket, self._suffixes)
        )
        self._logger.info(
            "Listening for new blobs",
            extra={"bucket": self._bucket, "suffixes": self._suffixes},
        )

        dispatched = 0
        while max_events is None or dispatched < max_events:
            # The notification iterator blocks, so pull from a worker thread
            event = await loop.run_in_executor(None, next, events, None)
            if event is None:
                break
            await self.dispatch(event)
            dispatched += 1

        return dispatched
