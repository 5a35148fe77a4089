"""
Blob metadata models: record attachments and user avatars.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from app.db.base import BaseModel


class Attachment(BaseModel):
    """Attachment metadata; `name` is the blob store key."""
    __tablename__ = "attachments"
    
    name = Column(String(64), unique=True, nullable=False)
    record_id = Column(Integer, ForeignKey("records.id"), nullable=False, index=True)

    @property
    def parent_id(self) -> int:
        return self.record_id


class Avatar(BaseModel):
    """Avatar metadata; `name` is the blob store key."""
    __tablename__ = "avatars"
    
    name = Column(String(64), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    @property
    def parent_id(self) -> int:
        return self.user_id
