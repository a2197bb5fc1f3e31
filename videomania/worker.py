"""
Ingest worker: derive thumbnails, resized copies and metadata for new uploads.

Listens for object-created notifications on the videos bucket and runs the
ingest workflow once per delivered blob.

Usage:
    python -m videomania.worker [--config-dir DIR] [--environment ENV]
                                [--max-events N] [--blob NAME]

Options:
    --config-dir    Directory holding appsettings*.json (default: config)
    --environment   Settings overlay to apply, e.g. dev or prod
    --max-events    Stop after this many notifications
    --blob          Process one existing blob and exit
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path

from videomania.application.services import IngestWorkflow, MetadataStore
from videomania.commons.infrastructure.blob import BlobCreatedEvent
from videomania.commons.settings import Settings, get_settings
from videomania.commons.telemetry import (
    apply_format_to_loggers,
    configure_logging,
    get_logger,
)
from videomania.domain.exceptions import ConfigurationException
from videomania.infrastructure.factory import InfrastructureFactory
from videomania.infrastructure.triggers import BlobCreatedListener

logger = get_logger("videomania.worker")


@dataclass
class WorkerArgs:
    """Parsed command line arguments."""

    config_dir: Path
    environment: str | None
    max_events: int | None
    blob: str | None


def parse_args(argv: list[str] | None = None) -> WorkerArgs:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Process newly uploaded videos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config-dir", default="config", help="Settings directory")
    parser.add_argument("--environment", default=None, help="Settings overlay name")
    parser.add_argument(
        "--max-events",
        type=int,
        default=None,
        help="Stop after handling this many notifications",
    )
    parser.add_argument("--blob", default=None, help="Process one blob and exit")

    args = parser.parse_args(argv)
    return WorkerArgs(
        config_dir=Path(args.config_dir),
        environment=args.environment,
        max_events=args.max_events,
        blob=args.blob,
    )


def build_workflow(factory: InfrastructureFactory, settings: Settings) -> IngestWorkflow:
    """Wire the ingest workflow from the factory's providers."""
    return IngestWorkflow(
        metadata=MetadataStore(factory.get_document_db(), settings.document_db),
        blob_storage=factory.get_blob_storage(),
        media_processor=factory.get_media_processor(),
        settings=settings,
    )


async def run_worker(args: WorkerArgs, settings: Settings) -> int:
    """Run the worker until the notification stream ends.

    Returns:
        Process exit code.
    """
    factory = InfrastructureFactory(settings)
    try:
        # Resolve ffmpeg before the first event arrives
        workflow = build_workflow(factory, settings)
    except ConfigurationException as e:
        logger.error("Worker cannot start", extra={"error": str(e)})
        return 2

    blob_storage = factory.get_blob_storage()
    bucket = settings.blob_storage.containers.videos

    async def handle(event: BlobCreatedEvent) -> None:
        stream = blob_storage.download_stream(event.bucket, event.path)
        await workflow.run(event.path, stream)

    try:
        if args.blob:
            report = await workflow.run(
                args.blob, blob_storage.download_stream(bucket, args.blob)
            )
            logger.info(
                "Blob processed",
                extra={"states": [s.value for s in report.states]},
            )
            return 0

        await blob_storage.ensure_container(bucket)
        listener = BlobCreatedListener(
            blob_storage=blob_storage,
            bucket=bucket,
            handler=handle,
            suffixes=settings.processing.ingest_extensions,
        )
        handled = await listener.run(max_events=args.max_events)
        logger.info("Worker stopped", extra={"events": handled})
        return 0
    finally:
        await factory.close_all()


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    settings = get_settings(
        config_dir=args.config_dir, environment=args.environment, reload=True
    )

    log_level = settings.telemetry.log_level or settings.app.log_level
    configure_logging(
        level=log_level,
        format_type=settings.telemetry.log_format,
        logger_name="videomania",
    )
    apply_format_to_loggers(
        ["motor", "urllib3"], level="WARNING", format_type=settings.telemetry.log_format
    )

    try:
        exit_code = asyncio.run(run_worker(args, settings))
    except KeyboardInterrupt:
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
