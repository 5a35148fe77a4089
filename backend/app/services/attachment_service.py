"""
Attachment lifecycle: keep blob store contents and metadata rows in step.

Used for both record attachments and user avatars. An owner holds one current
asset of each kind; uploading a new one replaces the previous one only after
the new blob and its metadata row are durably saved.

Known partial failures (no compensating rollback is attempted):
    * metadata save fails after the blob was saved: the blob is orphaned.
    * removing the previous asset fails: the call reports StorageError even
      though the new asset is already saved and visible.
"""
from sqlalchemy.orm import Session
from typing import List, Optional, Type, Union
import logging
from app.core.exceptions import NotFound, StorageError
from app.core.tasks import TaskGraph
from app.core.utils import generate_blob_name
from app.db.transaction import persist
from app.models.asset import Attachment, Avatar
from app.models.record import Record
from app.models.user import User
from app.storage.blob_store import BlobStore, BlobStoreError, BlobNotFoundError

logger = logging.getLogger(__name__)

Asset = Union[Attachment, Avatar]

_PARENT_COLUMNS = {
    Attachment: "record_id",
    Avatar: "user_id",
}


class AttachmentLifecycle:
    """Upload, download, replace and delete one kind of asset."""

    def __init__(self, db: Session, blob_store: BlobStore, model: Type[Asset]):
        self.db = db
        self.blob_store = blob_store
        self.model = model
        self.parent_column = getattr(model, _PARENT_COLUMNS[model])

    @classmethod
    def for_avatars(cls, db: Session, blob_store: BlobStore) -> "AttachmentLifecycle":
        return cls(db, blob_store, Avatar)

    @classmethod
    def for_attachments(cls, db: Session, blob_store: BlobStore) -> "AttachmentLifecycle":
        return cls(db, blob_store, Attachment)

    def list_for(self, owner: Union[Record, User]) -> List[Asset]:
        return self.db.query(self.model).filter(
            self.parent_column == owner.id
        ).order_by(self.model.id).all()

    def latest_for(self, owner: Union[Record, User]) -> Optional[Asset]:
        return self.db.query(self.model).filter(
            self.parent_column == owner.id
        ).order_by(self.model.id.desc()).first()

    def _save_blob(self, data: bytes) -> str:
        name = generate_blob_name()
        try:
            self.blob_store.save(data, name)
        except BlobStoreError as e:
            logger.error(f"Could not save blob for {self.model.__name__}: {e}", exc_info=True)
            raise StorageError("Could not store file") from e
        return name

    def _save_metadata(self, owner: Union[Record, User], name: str) -> Asset:
        asset = self.model(name=name, **{_PARENT_COLUMNS[self.model]: owner.id})
        with persist(self.db, f"save {self.model.__name__.lower()}"):
            self.db.add(asset)
        self.db.refresh(asset)
        return asset

    def _remove_previous(self, previous: List[Asset]) -> None:
        for asset in previous:
            self.delete(asset)

    def upload(self, owner: Union[Record, User], data: bytes, file_name: str = None) -> Asset:
        """Store `data` as the owner's current asset, replacing any previous one."""
        graph = TaskGraph(f"upload-{self.model.__name__.lower()}")
        graph.add("previous-found", lambda: self.list_for(owner))
        graph.add("blob-saved", lambda: self._save_blob(data))
        graph.add("metadata-saved", lambda name: self._save_metadata(owner, name),
                  depends_on=("blob-saved",))
        graph.add("previous-removed", lambda previous, _: self._remove_previous(previous),
                  depends_on=("previous-found", "metadata-saved"))

        try:
            results = graph.run()
        except StorageError:
            if "metadata-saved" in graph.results:
                logger.error(
                    f"New {self.model.__name__.lower()} for {type(owner).__name__} {owner.id} "
                    f"was saved but the previous one could not be removed"
                )
            raise

        asset = results["metadata-saved"]
        logger.info(
            f"Uploaded {self.model.__name__.lower()} {asset.id} ({file_name or 'unnamed'}, "
            f"{len(data)} bytes) for {type(owner).__name__} {owner.id}"
        )
        return asset

    def download(self, asset: Asset) -> bytes:
        """Return the blob behind `asset`. A lost blob is reported as NotFound."""
        try:
            return self.blob_store.fetch(asset.name)
        except BlobNotFoundError as e:
            logger.warning(f"Blob {asset.name} missing for {self.model.__name__} {asset.id}")
            raise NotFound("File not found") from e
        except BlobStoreError as e:
            logger.error(f"Could not read blob {asset.name}: {e}", exc_info=True)
            raise StorageError("Could not read file") from e

    def delete(self, asset: Asset) -> None:
        """Delete the blob, then the metadata row. The row is kept if the blob delete fails."""
        asset_id = asset.id
        try:
            self.blob_store.delete(asset.name)
        except BlobNotFoundError:
            logger.warning(f"Blob {asset.name} already gone, removing metadata only")
        except BlobStoreError as e:
            logger.error(f"Could not delete blob {asset.name}: {e}", exc_info=True)
            raise StorageError("Could not delete file") from e

        with persist(self.db, f"delete {self.model.__name__.lower()}"):
            self.db.delete(asset)
        logger.info(f"Deleted {self.model.__name__.lower()} {asset_id}")
