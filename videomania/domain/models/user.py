"""User domain model."""

from uuid import uuid4

from pydantic import Field

from videomania.domain.models.base import DocumentModel


class User(DocumentModel):
    """A registered user. Partitioned by its own id.

    Only the collection is provisioned; nothing creates users yet.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: str
