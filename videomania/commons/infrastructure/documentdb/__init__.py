"""Document database abstractions and implementations."""

from videomania.commons.infrastructure.documentdb.base import (
    DocumentConflictError,
    DocumentDBBase,
    DocumentNotFoundError,
    UnknownCollectionError,
)
from videomania.commons.infrastructure.documentdb.mongodb_provider import (
    MongoDBDocumentDB,
)

__all__ = [
    "DocumentDBBase",
    "MongoDBDocumentDB",
    "DocumentNotFoundError",
    "DocumentConflictError",
    "UnknownCollectionError",
]
