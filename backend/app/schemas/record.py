"""
Pydantic schemas for Record entity.
"""
from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import List
from datetime import datetime, timezone
from decimal import Decimal
from app.models.record import Mood
from app.schemas.asset import AssetResponse
from app.schemas.user import UserPublic


class RecordRequest(BaseModel):
    """Schema for record creation and update.

    Omitting `companion_ids` on update clears every companion of the record.
    """
    title: str = Field(..., min_length=1, max_length=200)
    note: str = ""
    date: datetime  # ISO-8601 or epoch milliseconds
    mood: Mood
    amount: Decimal = Field(..., max_digits=15, decimal_places=2)
    currency: str = Field(..., pattern=r"^[A-Z]{3}$")
    companion_ids: List[int] = []
    
    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v):
        """Normalize currency codes to upper case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v
    
    @field_validator("date")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Store dates as naive UTC."""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class RecordIntact(BaseModel):
    """Record together with its resolved companions and attachments."""
    id: int
    title: str
    note: str
    date: datetime
    mood: Mood
    amount: Decimal
    currency: str
    companions: List[UserPublic] = []
    attachments: List[AssetResponse] = []
    created_at: datetime
    updated_at: datetime
    
    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        """Clients receive the amount as a JSON number."""
        return float(amount)
