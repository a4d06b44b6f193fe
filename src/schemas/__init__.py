"""Pydantic schemas for request/response validation."""

from .base import *
from .song import *
from .album import *
from .complaint import *
from .payout import *

__all__ = [
    # Base schemas
    "BaseSchema",
    "PaginationMeta",
    "JSONAPIResponse",
    "JSONAPICollectionResponse",
    "JSONAPIError",
    "JSONAPIErrorResponse",
    "HealthCheckResponse",
    "build_resource",

    # Song schemas
    "SongWriteAttributes",
    "SongCreateRequest",
    "SongUpdateRequest",
    "SongResource",
    "SongResponse",
    "SongCollectionResponse",
    "PendingSongCollectionResponse",
    "RejectRequest",

    # Album schemas
    "AlbumWriteAttributes",
    "AlbumCreateRequest",
    "AlbumUpdateRequest",
    "AlbumResource",
    "AlbumResponse",
    "AlbumCollectionResponse",

    # Complaint and dispute schemas
    "ComplaintCreateRequest",
    "ComplaintResolveRequest",
    "ComplaintResponse",
    "ComplaintCollectionResponse",
    "DisputeResolveRequest",
    "DisputeResponse",
    "DisputeCollectionResponse",

    # Payout, streaming and admin schemas
    "PayoutResponse",
    "PayoutCollectionResponse",
    "PayoutRunRequest",
    "PayoutRunResponse",
    "PlayRequest",
    "PlayResponse",
    "StreamUrlResponse",
    "DashboardResponse",
    "AuditLogResponse",
]
