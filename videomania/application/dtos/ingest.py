"""DTOs describing one ingest run."""

from enum import Enum

from pydantic import BaseModel, Field

from videomania.domain.models import ProcessingStatus


class IngestState(str, Enum):
    """States an ingest run passes through, in order."""

    TRIGGERED = "triggered"
    RESOLVED = "resolved"
    STAGED = "staged"
    THUMBNAIL_DONE = "thumbnail_done"
    RESIZE_DONE = "resize_done"
    METADATA_EXTRACTED = "metadata_extracted"
    PERSISTED = "persisted"
    CLEANED_UP = "cleaned_up"
    SKIPPED = "skipped"


class IngestReport(BaseModel):
    """What an ingest run did for one blob."""

    blob_name: str
    video_id: str | None = None
    states: list[IngestState] = Field(default_factory=list)
    skip_reason: str | None = None
    thumbnail_blob: str | None = None
    resized_blob: str | None = None
    metadata_extracted: bool = False
    status: ProcessingStatus | None = None

    @property
    def final_state(self) -> IngestState | None:
        return self.states[-1] if self.states else None

    @property
    def skipped(self) -> bool:
        return IngestState.SKIPPED in self.states

    def advance(self, state: IngestState) -> None:
        self.states.append(state)
