"""
Record composition: create and update a record together with its companions.
"""
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from app.core.tasks import TaskGraph
from app.db.transaction import persist
from app.models.asset import Attachment
from app.models.record import Record, RecordCompanion
from app.models.user import User
from app.schemas.asset import AssetResponse
from app.schemas.record import RecordIntact, RecordRequest
from app.services.authorization import AuthorizationGuard
from app.services.user_service import make_publics

logger = logging.getLogger(__name__)

_RECORD_FIELDS = ("title", "note", "date", "mood", "amount", "currency")


class RecordCompositionEngine:
    """Orchestrates record persistence and the record's companion set.

    Companion ids that do not resolve to a user are dropped silently. On
    update the companion set is replaced, never merged: an update without
    `companion_ids` leaves the record with no companions.
    """

    def __init__(self, db: Session, guard: AuthorizationGuard = None):
        self.db = db
        self.guard = guard or AuthorizationGuard(db)

    def resolve_companions(self, companion_ids: List[int]) -> List[User]:
        if not companion_ids:
            return []
        return self.db.query(User).filter(
            User.id.in_(set(companion_ids))
        ).order_by(User.id).all()

    def companions_of(self, record: Record) -> List[User]:
        return self.db.query(User).join(
            RecordCompanion, RecordCompanion.user_id == User.id
        ).filter(
            RecordCompanion.record_id == record.id
        ).order_by(User.id).all()

    def _save_record(self, record: Record, body: RecordRequest) -> Record:
        with persist(self.db, "save record"):
            for field in _RECORD_FIELDS:
                setattr(record, field, getattr(body, field))
            self.db.add(record)
        self.db.refresh(record)
        return record

    def _detach_companions(self, record: Record) -> None:
        with persist(self.db, "detach companions"):
            self.db.query(RecordCompanion).filter(
                RecordCompanion.record_id == record.id
            ).delete(synchronize_session=False)

    def _attach_companions(self, record: Record, companions: List[User]) -> Record:
        with persist(self.db, "attach companions"):
            for companion in companions:
                self.db.add(RecordCompanion(record_id=record.id, user_id=companion.id))
        return record

    def create_or_update(self, user: User, existing: Optional[Record], body: RecordRequest) -> RecordIntact:
        """Create a record (existing is None) or replace an existing one's fields and companions."""
        if existing is None:
            return self.create(user, body)
        return self.update(user, existing.id, body)

    def create(self, user: User, body: RecordRequest) -> RecordIntact:
        record = Record(user_id=user.id, is_deleted=False)

        graph = TaskGraph("create-record")
        graph.add("companions-resolved", lambda: self.resolve_companions(body.companion_ids))
        graph.add("record-saved", lambda: self._save_record(record, body))
        graph.add("companions-attached", self._attach_companions,
                  depends_on=("record-saved", "companions-resolved"))
        graph.run()

        logger.info(f"User {user.id} created record {record.id}")
        return self.to_intact(record)

    def update(self, user: User, record_id: int, body: RecordRequest) -> RecordIntact:
        record = self.guard.owned_record(user, record_id)

        graph = TaskGraph("update-record")
        graph.add("companions-resolved", lambda: self.resolve_companions(body.companion_ids))
        graph.add("record-saved", lambda: self._save_record(record, body))
        graph.add("companions-detached", self._detach_companions, depends_on=("record-saved",))
        graph.add("companions-attached", lambda saved, companions, _: self._attach_companions(saved, companions),
                  depends_on=("record-saved", "companions-resolved", "companions-detached"))
        graph.run()

        logger.info(f"User {user.id} updated record {record.id}")
        return self.to_intact(record)

    def get(self, user: User, record_id: int) -> RecordIntact:
        return self.to_intact(self.guard.owned_record(user, record_id))

    def list_for(self, user: User) -> List[RecordIntact]:
        records = self.db.query(Record).filter(
            Record.user_id == user.id,
            Record.is_deleted.is_(False)
        ).order_by(Record.date.desc(), Record.id.desc()).all()
        return [self.to_intact(record) for record in records]

    def delete(self, user: User, record_id: int) -> None:
        """Soft delete. Attachments are kept as history."""
        record = self.guard.owned_record(user, record_id)
        with persist(self.db, "delete record"):
            record.is_deleted = True
        logger.info(f"User {user.id} soft-deleted record {record_id}")

    def to_intact(self, record: Record) -> RecordIntact:
        attachments = self.db.query(Attachment).filter(
            Attachment.record_id == record.id
        ).order_by(Attachment.id).all()
        return RecordIntact(
            id=record.id,
            title=record.title,
            note=record.note,
            date=record.date,
            mood=record.mood,
            amount=record.amount,
            currency=record.currency,
            companions=make_publics(self.db, self.companions_of(record)),
            attachments=[AssetResponse.model_validate(a) for a in attachments],
            created_at=record.created_at,
            updated_at=record.updated_at
        )
