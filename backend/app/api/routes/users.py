"""
User management routes.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.schemas.user import UserPublic, UserUpdate
from app.models.user import User
from app.api.dependencies import get_current_user
from app.services.authorization import AuthorizationGuard
from app.services.user_service import UserService, make_public, make_publics

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=List[UserPublic])
async def search_users(
    q: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Search users by substring of username, names or email."""
    return make_publics(db, UserService(db).search(q))


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the caller's own profile."""
    user = AuthorizationGuard(db).self_user(current_user, user_id)
    return make_public(db, user)


@router.put("/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: int,
    body: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the caller's own profile."""
    user = AuthorizationGuard(db).self_user(current_user, user_id)
    return make_public(db, UserService(db).update(user, body))
