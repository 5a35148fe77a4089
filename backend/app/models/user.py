"""
User model for authentication and profile data.
"""
from sqlalchemy import Column, String
from app.db.base import BaseModel


class User(BaseModel):
    """User model with immutable username."""
    __tablename__ = "users"
    
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    @property
    def owner_id(self) -> int:
        # A user profile is owned by the user itself
        return self.id
