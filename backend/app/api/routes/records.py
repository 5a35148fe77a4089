"""
Record routes, including record attachments.
"""
from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.schemas.asset import AssetResponse
from app.schemas.record import RecordIntact, RecordRequest
from app.models.user import User
from app.api.dependencies import get_current_user, read_upload
from app.services.attachment_service import AttachmentLifecycle
from app.services.authorization import AuthorizationGuard
from app.services.record_service import RecordCompositionEngine
from app.storage.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/records", tags=["records"])


@router.get("", response_model=List[RecordIntact])
async def list_records(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's records, newest first."""
    return RecordCompositionEngine(db).list_for(current_user)


@router.post("", response_model=RecordIntact, status_code=status.HTTP_201_CREATED)
async def create_record(
    body: RecordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a record with its companions."""
    return RecordCompositionEngine(db).create(current_user, body)


@router.get("/{record_id}", response_model=RecordIntact)
async def get_record(
    record_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get one record."""
    return RecordCompositionEngine(db).get(current_user, record_id)


@router.put("/{record_id}", response_model=RecordIntact)
async def update_record(
    record_id: int,
    body: RecordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a record; the companion set is replaced by `companion_ids`."""
    return RecordCompositionEngine(db).update(current_user, record_id, body)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Soft delete a record."""
    RecordCompositionEngine(db).delete(current_user, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{record_id}/attachments", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def upload_attachment(
    record_id: int,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Upload the record's attachment, replacing the previous one."""
    record = AuthorizationGuard(db).owned_record(current_user, record_id)
    content = await read_upload(file)
    return AttachmentLifecycle.for_attachments(db, blob_store).upload(record, content, file.filename)


@router.get("/{record_id}/attachments/{attachment_id}")
async def download_attachment(
    record_id: int,
    attachment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Download attachment bytes. Still available after the record is deleted."""
    attachment = AuthorizationGuard(db).record_attachment(
        current_user, record_id, attachment_id, include_deleted=True
    )
    content = AttachmentLifecycle.for_attachments(db, blob_store).download(attachment)
    return Response(content=content, media_type="application/octet-stream")


@router.delete("/{record_id}/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(
    record_id: int,
    attachment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Delete an attachment and its blob."""
    attachment = AuthorizationGuard(db).record_attachment(current_user, record_id, attachment_id)
    AttachmentLifecycle.for_attachments(db, blob_store).delete(attachment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
