"""Base class for models persisted in the document store."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Pydantic model stored with lowerCamelCase field names.

    Python code uses snake_case attributes; the document store, the partition
    key paths and the HTTP payloads all use the camelCase aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize for storage, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        """Build the model from a stored document, ignoring store-only keys."""
        return cls.model_validate(document)
