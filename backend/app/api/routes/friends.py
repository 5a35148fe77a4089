"""
Friendship routes.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.schemas.user import AddFriendRequest, UserPublic
from app.models.user import User
from app.api.dependencies import get_current_user
from app.services.authorization import AuthorizationGuard
from app.services.friendship_service import FriendshipGraph
from app.services.user_service import make_public, make_publics

router = APIRouter(prefix="/users/{user_id}/friends", tags=["friends"])


@router.get("", response_model=List[UserPublic])
async def list_friends(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List all friends of the caller."""
    user = AuthorizationGuard(db).self_user(current_user, user_id)
    return make_publics(db, FriendshipGraph(db).list_friends(user))


@router.get("/{person_id}", response_model=UserPublic)
async def get_friend(
    user_id: int,
    person_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get one friend; 404 when the two users are not friends."""
    user = AuthorizationGuard(db).self_user(current_user, user_id)
    return make_public(db, FriendshipGraph(db).get_one(user, person_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_friend(
    user_id: int,
    body: AddFriendRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a friend. Adding an existing friend succeeds without change."""
    user = AuthorizationGuard(db).self_user(current_user, user_id)
    FriendshipGraph(db).add(user, body.person_id)
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_friend(
    user_id: int,
    person_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a friend. Removing a non-friend succeeds without change."""
    user = AuthorizationGuard(db).self_user(current_user, user_id)
    FriendshipGraph(db).remove(user, person_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
