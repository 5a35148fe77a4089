"""
Session token model, one row per (user, device fingerprint) login.
"""
from sqlalchemy import Column, String, Boolean, ForeignKey, Integer
from app.db.base import BaseModel


class Token(BaseModel):
    """Opaque bearer token bound to a user and a device fingerprint."""
    __tablename__ = "tokens"
    
    token = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    os_name = Column(String(100), nullable=False)
    time_zone = Column(String(100), nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)
