"""
Avatar routes: upload, download and delete the caller's avatar.
"""
from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.asset import AssetResponse
from app.models.user import User
from app.api.dependencies import get_current_user, read_upload
from app.services.attachment_service import AttachmentLifecycle
from app.services.authorization import AuthorizationGuard
from app.storage.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/users/{user_id}/avatars", tags=["avatars"])


@router.post("", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def upload_avatar(
    user_id: int,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Upload a new avatar, replacing the previous one."""
    user = AuthorizationGuard(db).self_user(current_user, user_id)
    content = await read_upload(file)
    return AttachmentLifecycle.for_avatars(db, blob_store).upload(user, content, file.filename)


@router.get("/{avatar_id}")
async def download_avatar(
    user_id: int,
    avatar_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Download avatar bytes."""
    avatar = AuthorizationGuard(db).user_avatar(current_user, user_id, avatar_id)
    content = AttachmentLifecycle.for_avatars(db, blob_store).download(avatar)
    return Response(content=content, media_type="application/octet-stream")


@router.delete("/{avatar_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_avatar(
    user_id: int,
    avatar_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Delete an avatar and its blob."""
    avatar = AuthorizationGuard(db).user_avatar(current_user, user_id, avatar_id)
    AttachmentLifecycle.for_avatars(db, blob_store).delete(avatar)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
