"""
User service for signup, credentials, profile updates and public views.
"""
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
import logging
from app.core.exceptions import BadRequest, Unauthorized
from app.core.security import get_password_hash, verify_password
from app.core.tasks import TaskGraph
from app.db.transaction import persist
from app.models.asset import Avatar
from app.models.token import Token
from app.models.user import User
from app.schemas.asset import AssetResponse
from app.schemas.user import UserInfo, UserPublic, UserUpdate
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)


def make_public(db: Session, user: User, token: Optional[Token] = None) -> UserPublic:
    """Build the public representation of a user.

    The password digest is never included; the token only when given.
    """
    avatar = db.query(Avatar).filter(Avatar.user_id == user.id).order_by(Avatar.id.desc()).first()
    return UserPublic(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        username=user.username,
        email=user.email,
        token=token.token if token else None,
        asset=AssetResponse.model_validate(avatar) if avatar else None
    )


def make_publics(db: Session, users: List[User]) -> List[UserPublic]:
    return [make_public(db, user) for user in users]


class UserService:
    """Account operations that are not session or ownership checks."""

    def __init__(self, db: Session):
        self.db = db
        self.tokens = TokenService(db)

    def _check_unique(self, username: str = None, email: str = None, exclude_id: int = None):
        if username is not None:
            query = self.db.query(User).filter(User.username == username)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise BadRequest("Username already exists")
        if email is not None:
            query = self.db.query(User).filter(User.email == email)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise BadRequest("Email already exists")

    def _create_user(self, info: UserInfo) -> User:
        user = User(
            first_name=info.first_name,
            last_name=info.last_name,
            username=info.username,
            email=info.email,
            hashed_password=get_password_hash(info.password)
        )
        with persist(self.db, "create user"):
            self.db.add(user)
        self.db.refresh(user)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    def signup(self, info: Optional[UserInfo], os_name: str, time_zone: str) -> Tuple[User, Token]:
        """Create a user and its first session token.

        If issuing the token fails the user row stays; the client can log in.
        """
        if info is None:
            raise BadRequest("Missing user info")
        self._check_unique(username=info.username, email=info.email)

        graph = TaskGraph("signup")
        graph.add("user-saved", lambda: self._create_user(info))
        graph.add("token-issued", lambda user: self.tokens.issue_or_reuse(user, os_name, time_zone),
                  depends_on=("user-saved",))
        results = graph.run()
        return results["user-saved"], results["token-issued"]

    def verify_credentials(self, username: str, password: str) -> User:
        """Check basic-auth credentials, raising Unauthorized on any mismatch."""
        user = self.db.query(User).filter(User.username == username).first()
        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login for username '{username}'")
            raise Unauthorized("Incorrect username or password")
        return user

    def login(self, user: User, os_name: str, time_zone: str) -> Token:
        return self.tokens.issue_or_reuse(user, os_name, time_zone)

    def update(self, user: User, body: UserUpdate) -> User:
        """Apply profile changes. Username and password are not editable here."""
        changes: Dict[str, str] = body.model_dump(exclude_none=True)
        if "email" in changes:
            self._check_unique(email=changes["email"], exclude_id=user.id)

        with persist(self.db, "update user"):
            for field, value in changes.items():
                setattr(user, field, value)
        self.db.refresh(user)
        logger.info(f"Updated user {user.id}: {sorted(changes)}")
        return user

    def search(self, key: str) -> List[User]:
        """Users whose username, names or email contain `key`."""
        pattern = f"%{key}%"
        return self.db.query(User).filter(
            or_(
                User.username.like(pattern),
                User.first_name.like(pattern),
                User.last_name.like(pattern),
                User.email.like(pattern)
            )
        ).order_by(User.id).all()
