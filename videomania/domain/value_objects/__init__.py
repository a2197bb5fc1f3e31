"""Domain value objects."""

from videomania.domain.value_objects.blob_name import BlobName, blob_name_from_url

__all__ = [
    "BlobName",
    "blob_name_from_url",
]
