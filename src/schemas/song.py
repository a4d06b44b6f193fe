"""Song-related Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from .base import BaseSchema, JSONAPICollectionResponse, JSONAPIResponse


class SongWriteAttributes(BaseSchema):
    """Attributes accepted when creating or editing a song."""

    title: Optional[str] = Field(None, max_length=500, description="Song title")
    lyrics: Optional[str] = Field(None, description="Song lyrics")
    language: Optional[str] = Field(None, description="Language (ISO 639-1)")
    genre: Optional[str] = Field(None, max_length=100, description="Genre")
    description: Optional[str] = Field(None, description="Free-form description")
    audio_key: Optional[str] = Field(None, max_length=500, description="Object key of the uploaded audio")
    cover_image_key: Optional[str] = Field(None, max_length=500, description="Object key of the cover image")
    album_id: Optional[UUID] = Field(None, description="Album the song belongs to")
    track_number: Optional[int] = Field(None, description="Position on the album")


class SongWriteResource(BaseSchema):
    """JSON:API resource for song writes."""

    type: str = Field("song", description="Resource type")
    attributes: SongWriteAttributes

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v != "song":
            raise ValueError("Resource type must be 'song'")
        return v


class SongCreateRequest(BaseSchema):
    """Request schema for creating a song."""

    data: SongWriteResource = Field(description="Song data to create")


class SongUpdateRequest(BaseSchema):
    """Request schema for a partial song update; only supplied attributes change."""

    data: SongWriteResource = Field(description="Song data to patch")


class SongAttributes(BaseSchema):
    """Attributes of a song resource."""

    artist_user_id: UUID
    album_id: Optional[UUID] = None
    track_number: Optional[int] = None
    title: str
    language: Optional[str] = None
    genre: Optional[str] = None
    lyrics: Optional[str] = None
    description: Optional[str] = None
    audio_key: Optional[str] = None
    cover_image_key: Optional[str] = None
    status: str
    reject_reason: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PendingSongAttributes(SongAttributes):
    """Song in the moderation queue with display names."""

    artist_name: Optional[str] = None
    album_title: Optional[str] = None


class SongResource(BaseSchema):
    type: str = Field("song", description="Resource type")
    id: UUID = Field(description="Song UUID")
    attributes: SongAttributes


class PendingSongResource(BaseSchema):
    type: str = Field("song", description="Resource type")
    id: UUID = Field(description="Song UUID")
    attributes: PendingSongAttributes


class SongResponse(JSONAPIResponse):
    """Response schema for a single song."""

    data: SongResource = Field(description="Song resource")


class SongCollectionResponse(JSONAPICollectionResponse):
    """Response schema for song collections."""

    data: List[SongResource] = Field(description="Song resources")


class PendingSongCollectionResponse(JSONAPICollectionResponse):
    data: List[PendingSongResource] = Field(description="Songs awaiting review")


class RejectRequest(BaseSchema):
    """Administrative rejection of a song or album."""

    reason: Optional[str] = Field(None, max_length=2000, description="Reason shown to the artist")
