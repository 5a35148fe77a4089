"""
Blob store interface and backends.

Blobs are addressed by opaque names generated by the server; client supplied
filenames are never used as keys.
"""
import os
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict
from app.core.config import settings

logger = logging.getLogger(__name__)


class BlobStoreError(Exception):
    """Raised when the blob store cannot complete an operation."""


class BlobNotFoundError(BlobStoreError):
    """Raised when no blob exists under the requested name."""


class BlobStore(ABC):
    """Minimal key/bytes storage used for avatars and attachments."""

    @abstractmethod
    def save(self, data: bytes, name: str) -> None:
        ...

    @abstractmethod
    def fetch(self, name: str) -> bytes:
        ...

    @abstractmethod
    def delete(self, name: str) -> None:
        ...


class LocalBlobStore(BlobStore):
    """Stores each blob as a file under a root directory."""

    def __init__(self, root: str):
        self.root = root

    def _path(self, name: str) -> str:
        if not name or os.path.basename(name) != name or name in (".", ".."):
            raise BlobStoreError(f"Invalid blob name: {name!r}")
        return os.path.join(self.root, name)

    def save(self, data: bytes, name: str) -> None:
        path = self._path(name)
        try:
            os.makedirs(self.root, exist_ok=True)
            with open(path, "wb") as buffer:
                buffer.write(data)
        except OSError as e:
            raise BlobStoreError(f"Could not save blob {name}: {e}") from e

    def fetch(self, name: str) -> bytes:
        path = self._path(name)
        try:
            with open(path, "rb") as buffer:
                return buffer.read()
        except FileNotFoundError as e:
            raise BlobNotFoundError(name) from e
        except OSError as e:
            raise BlobStoreError(f"Could not read blob {name}: {e}") from e

    def delete(self, name: str) -> None:
        path = self._path(name)
        try:
            os.remove(path)
        except FileNotFoundError as e:
            raise BlobNotFoundError(name) from e
        except OSError as e:
            raise BlobStoreError(f"Could not delete blob {name}: {e}") from e


class InMemoryBlobStore(BlobStore):
    """Process-local blob store, used by tests and throwaway deployments."""

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def save(self, data: bytes, name: str) -> None:
        with self._lock:
            self._blobs[name] = bytes(data)

    def fetch(self, name: str) -> bytes:
        with self._lock:
            try:
                return self._blobs[name]
            except KeyError:
                raise BlobNotFoundError(name) from None

    def delete(self, name: str) -> None:
        with self._lock:
            if self._blobs.pop(name, None) is None:
                raise BlobNotFoundError(name)

    def __contains__(self, name: str) -> bool:
        return name in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)


_blob_store: BlobStore = None


def get_blob_store() -> BlobStore:
    """Dependency returning the configured blob store."""
    global _blob_store
    if _blob_store is None:
        if settings.BLOB_STORE_BACKEND == "memory":
            _blob_store = InMemoryBlobStore()
        else:
            _blob_store = LocalBlobStore(settings.UPLOAD_DIR)
        logger.info(f"Using {type(_blob_store).__name__} blob store")
    return _blob_store
