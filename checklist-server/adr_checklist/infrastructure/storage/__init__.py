"""Blob storage backends."""

from .blob_storage import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    BlobStorage,
    BlobStorageError,
    LocalBlobStorage,
)

__all__ = [
    "BlobStorage",
    "LocalBlobStorage",
    "BlobStorageError",
    "BlobAlreadyExistsError",
    "BlobNotFoundError",
]
