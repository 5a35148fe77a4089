"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.token import Token
from app.models.record import Record, RecordCompanion, Mood
from app.models.friendship import Friendship
from app.models.asset import Attachment, Avatar

__all__ = [
    "User",
    "Token",
    "Record",
    "RecordCompanion",
    "Mood",
    "Friendship",
    "Attachment",
    "Avatar",
]
