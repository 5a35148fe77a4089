"""
Token service: issue, look up, rotate and revoke device-scoped session tokens.
"""
from sqlalchemy.orm import Session
import logging
from app.core.exceptions import NotFound, Unauthorized
from app.core.security import generate_token_value
from app.db.transaction import persist
from app.models.token import Token
from app.models.user import User

logger = logging.getLogger(__name__)


class TokenService:
    """Session token lifecycle for one request-scoped session."""

    def __init__(self, db: Session):
        self.db = db

    def _query_device(self, user: User, os_name: str, time_zone: str):
        return self.db.query(Token).filter(
            Token.user_id == user.id,
            Token.os_name == os_name,
            Token.time_zone == time_zone
        )

    def issue_or_reuse(self, user: User, os_name: str, time_zone: str) -> Token:
        """
        Return the active token for (user, os_name, time_zone), minting one if needed.

        Re-login from a device that still holds an active token gets the same
        token back, so other devices' sessions are never invalidated.
        """
        active = self._query_device(user, os_name, time_zone).filter(
            Token.is_revoked.is_(False)
        ).first()
        if active:
            logger.info(f"Reusing active token for user {user.id} on {os_name}/{time_zone}")
            return active

        token = Token(
            token=generate_token_value(),
            user_id=user.id,
            os_name=os_name,
            time_zone=time_zone,
            is_revoked=False
        )
        with persist(self.db, "issue token"):
            self.db.add(token)
        self.db.refresh(token)
        logger.info(f"Issued new token for user {user.id} on {os_name}/{time_zone}")
        return token

    def authenticate(self, token_value: str) -> User:
        """Resolve the owner of an active token, or raise Unauthorized."""
        token = self.db.query(Token).filter(Token.token == token_value).first()
        if not token or token.is_revoked:
            logger.warning("Rejected unknown or revoked bearer token")
            raise Unauthorized("Invalid or revoked token")

        user = self.db.get(User, token.user_id)
        if not user:
            raise Unauthorized("Invalid or revoked token")
        return user

    def revoke(self, user: User, os_name: str, time_zone: str) -> Token:
        """Revoke the user's token for a device fingerprint."""
        # Prefer the active row when the device has older revoked ones
        token = self._query_device(user, os_name, time_zone).order_by(
            Token.is_revoked.asc(), Token.id.desc()
        ).first()
        if not token:
            raise NotFound("No token for this device")

        with persist(self.db, "revoke token"):
            token.is_revoked = True
        logger.info(f"Revoked token for user {user.id} on {os_name}/{time_zone}")
        return token
