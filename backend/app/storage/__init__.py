"""Blob storage backends for avatars and record attachments."""
from app.storage.blob_store import (
    BlobStore, BlobStoreError, BlobNotFoundError,
    LocalBlobStore, InMemoryBlobStore, get_blob_store,
)

__all__ = [
    "BlobStore",
    "BlobStoreError",
    "BlobNotFoundError",
    "LocalBlobStore",
    "InMemoryBlobStore",
    "get_blob_store",
]
