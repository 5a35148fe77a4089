"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from app.schemas.asset import AssetResponse


class DeviceInfo(BaseModel):
    """Device fingerprint a session token is bound to."""
    os_name: str = Field(..., min_length=1, max_length=100)
    time_zone: str = Field(..., min_length=1, max_length=100)


class UserInfo(BaseModel):
    """Schema for the identity part of a signup request."""
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    email: EmailStr


class SignupRequest(DeviceInfo):
    """Schema for user signup."""
    user_info: Optional[UserInfo] = None


class UserUpdate(BaseModel):
    """Schema for user update."""
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None


class UserPublic(BaseModel):
    """Public user representation. Token is only set on signup and login."""
    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    token: Optional[str] = None
    asset: Optional[AssetResponse] = None
    
    class Config:
        from_attributes = True


class AddFriendRequest(BaseModel):
    """Schema for adding a friend."""
    person_id: int
