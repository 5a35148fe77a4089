"""
Pydantic schemas for stored blobs (avatars and record attachments).
"""
from pydantic import BaseModel


class AssetResponse(BaseModel):
    """Reference to an uploaded avatar or attachment."""
    id: int
    name: str
    
    class Config:
        from_attributes = True
