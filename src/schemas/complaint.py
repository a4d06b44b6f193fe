"""Complaint and dispute schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from .base import BaseSchema, JSONAPICollectionResponse, JSONAPIResponse


class ComplaintCreateAttributes(BaseSchema):
    song_id: UUID = Field(description="Reported song")
    reason: str = Field(max_length=2000, description="Why the song is being reported")


class ComplaintCreateResource(BaseSchema):
    type: str = Field("complaint", description="Resource type")
    attributes: ComplaintCreateAttributes


class ComplaintCreateRequest(BaseSchema):
    """Request schema for filing a complaint."""

    data: ComplaintCreateResource


class ComplaintResolveRequest(BaseSchema):
    """Administrative resolution; ``action`` is RESTORE or REMOVE."""

    action: str = Field(description="RESTORE or REMOVE")


class ComplaintAttributes(BaseSchema):
    song_id: UUID
    reported_by: Optional[UUID] = None
    reason: str
    status: str
    resolution_action: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    song_title: Optional[str] = None
    artist_name: Optional[str] = None
    reporter: Optional[str] = None


class ComplaintResource(BaseSchema):
    type: str = Field("complaint", description="Resource type")
    id: UUID = Field(description="Complaint UUID")
    attributes: ComplaintAttributes


class ComplaintResponse(JSONAPIResponse):
    data: ComplaintResource


class ComplaintCollectionResponse(JSONAPICollectionResponse):
    data: List[ComplaintResource]


class DisputeResolveRequest(BaseSchema):
    """Administrative resolution naming the song that keeps the rights."""

    winner_song_id: UUID = Field(description="One of the two disputed songs")


class DisputeAttributes(BaseSchema):
    song_id: UUID
    existing_song_id: UUID
    reason: Optional[str] = None
    status: str
    winner_song_id: Optional[UUID] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    song_title: Optional[str] = None
    existing_song_title: Optional[str] = None


class DisputeResource(BaseSchema):
    type: str = Field("dispute", description="Resource type")
    id: UUID = Field(description="Dispute UUID")
    attributes: DisputeAttributes


class DisputeResponse(JSONAPIResponse):
    data: DisputeResource


class DisputeCollectionResponse(JSONAPICollectionResponse):
    data: List[DisputeResource]
