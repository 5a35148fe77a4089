"""
Friendship graph: idempotent, symmetric friendship edges.
"""
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from app.core.exceptions import BadRequest, NotFound, StorageError
from app.db.transaction import persist
from app.models.friendship import Friendship
from app.models.user import User

logger = logging.getLogger(__name__)


class FriendshipGraph:
    """Friendship edges queried regardless of which side added them."""

    def __init__(self, db: Session):
        self.db = db

    def _edge(self, a_id: int, b_id: int) -> Optional[Friendship]:
        return self.db.query(Friendship).filter(
            or_(
                and_(Friendship.user_id == a_id, Friendship.friend_id == b_id),
                and_(Friendship.user_id == b_id, Friendship.friend_id == a_id)
            )
        ).first()

    def exists(self, a: User, b: User) -> bool:
        return self._edge(a.id, b.id) is not None

    def add(self, user: User, person_id: int) -> bool:
        """
        Make `user` and `person_id` friends.

        Returns True when a new edge was inserted, False when the friendship
        already existed. Raises BadRequest if the person does not exist.
        """
        person = self.db.get(User, person_id)
        if not person:
            raise BadRequest("Person does not exist")
        if person.id == user.id:
            raise BadRequest("Cannot add yourself as a friend")

        if self.exists(user, person):
            logger.info(f"Users {user.id} and {person.id} are already friends")
            return False

        try:
            with persist(self.db, "add friendship"):
                self.db.add(Friendship(user_id=user.id, friend_id=person.id))
                self.db.flush()
        except StorageError as e:
            # Lost a race against an identical insert: the edge is there now
            if isinstance(e.__cause__, IntegrityError) and self.exists(user, person):
                return False
            raise
        logger.info(f"Added friendship between users {user.id} and {person.id}")
        return True

    def remove(self, user: User, person_id: int) -> bool:
        """Remove the friendship if present. Absent edges are a no-op; unknown people are not."""
        if not self.db.get(User, person_id):
            raise NotFound("Person not found")

        edge = self._edge(user.id, person_id)
        if not edge:
            return False

        with persist(self.db, "remove friendship"):
            self.db.delete(edge)
        logger.info(f"Removed friendship between users {user.id} and {person_id}")
        return True

    def list_friends(self, user: User) -> List[User]:
        """All users connected to `user` in either direction."""
        added = self.db.query(Friendship.friend_id).filter(Friendship.user_id == user.id)
        added_by = self.db.query(Friendship.user_id).filter(Friendship.friend_id == user.id)
        return self.db.query(User).filter(
            or_(User.id.in_(added), User.id.in_(added_by))
        ).order_by(User.id).all()

    def get_one(self, user: User, candidate_id: int) -> User:
        """Return the friend, or raise NotFound if there is no friendship."""
        candidate = self.db.get(User, candidate_id)
        if not candidate or not self.exists(user, candidate):
            raise NotFound("Friend not found")
        return candidate
