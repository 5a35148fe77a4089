"""
Record model for mood-tagged spending events.
"""
from sqlalchemy import Column, String, Numeric, DateTime, Boolean, Enum as SQLEnum, ForeignKey, Integer, Text, UniqueConstraint
from app.db.base import BaseModel
import enum


class Mood(str, enum.Enum):
    """Mood enumeration."""
    HAPPY = "happy"
    GOOD = "good"
    NEUTRAL = "neutral"
    BAD = "bad"
    SAD = "sad"


class Record(BaseModel):
    """Record owned by the user who created it. Never physically deleted."""
    __tablename__ = "records"
    
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    note = Column(Text, nullable=False, default="")
    date = Column(DateTime, nullable=False, index=True)
    mood = Column(SQLEnum(Mood, values_callable=lambda e: [m.value for m in e]), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)

    @property
    def owner_id(self) -> int:
        return self.user_id


class RecordCompanion(BaseModel):
    """Junction table for Record and User (companion) many-to-many relationship."""
    __tablename__ = "record_companions"
    
    record_id = Column(Integer, ForeignKey("records.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    __table_args__ = (
        UniqueConstraint('record_id', 'user_id', name='uq_record_companion'),
    )
