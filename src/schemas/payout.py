"""Payout, streaming and admin dashboard schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.utils.validators import MonthKeyValidator

from .base import BaseSchema, JSONAPICollectionResponse, JSONAPIResponse


class PayoutAttributes(BaseSchema):
    artist_user_id: UUID
    artist_name: Optional[str] = None
    month: str
    total_streams: int
    amount: Decimal
    status: str
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PayoutResource(BaseSchema):
    type: str = Field("payout", description="Resource type")
    id: UUID = Field(description="Payout UUID")
    attributes: PayoutAttributes


class PayoutResponse(JSONAPIResponse):
    data: PayoutResource


class PayoutCollectionResponse(JSONAPICollectionResponse):
    data: List[PayoutResource]


class PayoutRunRequest(BaseSchema):
    """Trigger a payout run for a closed month."""

    month: str = Field(description="Month to process (YYYY-MM)")

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        if not MonthKeyValidator.is_valid(v):
            raise ValueError("Month must be in format YYYY-MM")
        return v


class PayoutRunAttributes(BaseSchema):
    month: str
    total_revenue: Decimal
    artist_pool: Decimal
    total_streams: int
    payouts_created: int
    payouts_existing: int
    skipped_reason: Optional[str] = None


class PayoutRunResponse(BaseSchema):
    data: PayoutRunAttributes


class PlayRequest(BaseSchema):
    """A finished playback reported by the player."""

    duration_seconds: int = Field(ge=0, description="Seconds actually listened")


class PlayResponse(BaseSchema):
    recorded: bool = Field(description="False when the play was too short to count")


class StreamUrlResponse(BaseSchema):
    url: str = Field(description="Time-limited fetch URL for the audio")
    expires_in: int = Field(description="Seconds until the URL expires")


class DashboardStats(BaseSchema):
    pending_artists: int
    pending_songs: int
    pending_albums: int
    open_complaints: int
    open_disputes: int


class DashboardResponse(BaseSchema):
    data: DashboardStats


class AuditLogEntry(BaseSchema):
    id: UUID
    action_type: str
    target_id: UUID
    description: Optional[str] = None
    created_at: datetime
    admin_name: Optional[str] = None
    admin_email: Optional[str] = None


class AuditLogResponse(BaseSchema):
    data: List[AuditLogEntry]
