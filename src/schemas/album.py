"""Album-related Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from .base import BaseSchema, JSONAPICollectionResponse, JSONAPIResponse
from .song import SongResource


class AlbumWriteAttributes(BaseSchema):
    """Attributes accepted when creating or editing an album."""

    title: Optional[str] = Field(None, max_length=500, description="Album title")
    description: Optional[str] = Field(None, description="Album description")
    language: Optional[str] = Field(None, description="Language (ISO 639-1)")
    release_type: Optional[str] = Field(None, description="album, ep, single or compilation")
    cover_image_key: Optional[str] = Field(None, max_length=500, description="Object key of the cover image")


class AlbumWriteResource(BaseSchema):
    """JSON:API resource for album writes."""

    type: str = Field("album", description="Resource type")
    attributes: AlbumWriteAttributes

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v != "album":
            raise ValueError("Resource type must be 'album'")
        return v


class AlbumCreateRequest(BaseSchema):
    """Request schema for creating an album."""

    data: AlbumWriteResource = Field(description="Album data to create")


class AlbumUpdateRequest(BaseSchema):
    """Request schema for a partial album update."""

    data: AlbumWriteResource = Field(description="Album data to patch")


class AlbumAttributes(BaseSchema):
    """Attributes of an album resource."""

    artist_user_id: UUID
    title: str
    description: Optional[str] = None
    language: Optional[str] = None
    release_type: Optional[str] = None
    cover_image_key: Optional[str] = None
    status: str
    reject_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AlbumResource(BaseSchema):
    type: str = Field("album", description="Resource type")
    id: UUID = Field(description="Album UUID")
    attributes: AlbumAttributes


class AlbumResponse(JSONAPIResponse):
    """Response schema for a single album; ``included`` carries its tracks when requested."""

    data: AlbumResource = Field(description="Album resource")
    included: Optional[List[SongResource]] = Field(None, description="Album tracks")


class AlbumCollectionResponse(JSONAPICollectionResponse):
    data: List[AlbumResource] = Field(description="Album resources")
