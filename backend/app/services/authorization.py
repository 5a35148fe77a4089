"""
Ownership based access checks applied before any mutation or private read.

A caller requesting another user's resource always gets Unauthorized, whether or
not the resource exists. NotFound is only used where absence is not sensitive.
"""
from sqlalchemy.orm import Session
import logging
from app.core.exceptions import BadRequest, NotFound, Unauthorized
from app.models.asset import Attachment, Avatar
from app.models.record import Record
from app.models.user import User

logger = logging.getLogger(__name__)


def require_owner(caller: User, resource):
    """Return `resource` if `caller` owns it, otherwise raise Unauthorized."""
    if resource is None or resource.owner_id != caller.id:
        logger.warning(f"User {caller.id} denied access to {type(resource).__name__}")
        raise Unauthorized("Access denied")
    return resource


def require_active(record: Record) -> Record:
    """Soft-deleted records are invisible, even to their owner."""
    if record.is_deleted:
        raise NotFound("Record not found")
    return record


def require_attached(child, parent):
    """Return `child` if it belongs to `parent`, otherwise raise."""
    if child is None:
        raise NotFound(f"{parent.__class__.__name__} has no such asset")
    if child.parent_id != parent.id:
        logger.warning(
            f"{type(child).__name__} {child.id} requested through {type(parent).__name__} {parent.id}"
        )
        raise BadRequest("Asset does not belong to this resource")
    return child


class AuthorizationGuard:
    """Resolves path ids into resources the caller may act on."""

    def __init__(self, db: Session):
        self.db = db

    def self_user(self, caller: User, user_id: int) -> User:
        return require_owner(caller, self.db.get(User, user_id))

    def owned_record(self, caller: User, record_id: int) -> Record:
        return require_active(require_owner(caller, self.db.get(Record, record_id)))

    def record_attachment(
        self,
        caller: User,
        record_id: int,
        attachment_id: int,
        include_deleted: bool = False
    ) -> Attachment:
        """
        Resolve an attachment through its record.

        Attachments outlive their record's soft delete, so reads may pass
        `include_deleted=True` to reach them as history.
        """
        record = require_owner(caller, self.db.get(Record, record_id))
        if not include_deleted:
            require_active(record)
        return require_attached(self.db.get(Attachment, attachment_id), record)

    def user_avatar(self, caller: User, user_id: int, avatar_id: int) -> Avatar:
        user = self.self_user(caller, user_id)
        return require_attached(self.db.get(Avatar, avatar_id), user)
