"""
Friendship edge model.
"""
from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from app.db.base import BaseModel


class Friendship(BaseModel):
    """Presence-only edge between two users, queried in both directions."""
    __tablename__ = "friendships"
    
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    friend_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    __table_args__ = (
        UniqueConstraint('user_id', 'friend_id', name='uq_friendship_pair'),
    )
