"""
Authentication routes for signup, login, and logout.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.user import SignupRequest, DeviceInfo, UserPublic
from app.models.user import User
from app.api.dependencies import get_basic_user, get_current_user
from app.services.token_service import TokenService
from app.services.user_service import UserService, make_public

router = APIRouter(prefix="/users", tags=["auth"])


@router.post("/signup", response_model=UserPublic)
async def signup(body: SignupRequest, db: Session = Depends(get_db)):
    """Register a new user and issue a token for the signing-up device."""
    user, token = UserService(db).signup(body.user_info, body.os_name, body.time_zone)
    return make_public(db, user, token)


@router.post("/login", response_model=UserPublic)
async def login(
    device: DeviceInfo,
    user: User = Depends(get_basic_user),
    db: Session = Depends(get_db)
):
    """Login with basic auth; reuses the device's active token if there is one."""
    token = UserService(db).login(user, device.os_name, device.time_zone)
    return make_public(db, user, token)


@router.delete("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    device: DeviceInfo,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Revoke the caller's token for the given device."""
    TokenService(db).revoke(current_user, device.os_name, device.time_zone)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
