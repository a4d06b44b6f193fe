"""Administration endpoints: moderation queues, overrides and on-behalf authoring."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies.common import (
    get_album_service,
    get_audit_service,
    get_song_service,
    require_admin,
)
from src.api.routes.albums import album_resource
from src.api.routes.songs import song_resource
from src.schemas.album import AlbumCollectionResponse, AlbumCreateRequest, AlbumResponse
from src.schemas.base import build_resource
from src.schemas.payout import AuditLogResponse, DashboardResponse
from src.schemas.song import (
    PendingSongCollectionResponse,
    RejectRequest,
    SongCreateRequest,
    SongResponse,
)
from src.services.album_service import AlbumService
from src.services.audit_service import AuditLogService
from src.services.business_rules import Principal
from src.services.song_service import SongService

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    admin: Principal = Depends(require_admin),
    audit: AuditLogService = Depends(get_audit_service),
):
    """Counts of work waiting on administrators."""
    return DashboardResponse(data=await audit.dashboard_stats())


@router.get("/audit-logs", response_model=AuditLogResponse)
async def list_audit_logs(
    limit: int = Query(500, ge=1, le=500, description="Maximum entries to return"),
    admin: Principal = Depends(require_admin),
    audit: AuditLogService = Depends(get_audit_service),
):
    """Most recent administrative actions."""
    return AuditLogResponse(data=await audit.list_entries(limit=limit))


# Moderation queues

@router.get("/songs/pending", response_model=PendingSongCollectionResponse)
async def list_pending_songs(
    scope: str = Query("all", pattern="^(all|individual|album)$", description="all, individual or album"),
    admin: Principal = Depends(require_admin),
    service: SongService = Depends(get_song_service),
):
    """Songs awaiting review."""
    pending = await service.list_pending(scope)
    return PendingSongCollectionResponse(
        data=[build_resource("song", item, exclude=("audio_processed_key",)) for item in pending],
    )


@router.get("/albums/pending", response_model=AlbumCollectionResponse)
async def list_pending_albums(
    admin: Principal = Depends(require_admin),
    service: AlbumService = Depends(get_album_service),
):
    """Albums awaiting review."""
    albums = await service.list_pending()
    return AlbumCollectionResponse(data=[album_resource(album) for album in albums])


# Overrides

@router.post("/songs/{song_id}/approve", response_model=SongResponse)
async def approve_song(
    song_id: UUID,
    admin: Principal = Depends(require_admin),
    service: SongService = Depends(get_song_service),
):
    """Approve a song from any status."""
    song = await service.approve_song(song_id, admin.user_id)
    return SongResponse(data=song_resource(song))


@router.post("/songs/{song_id}/reject", response_model=SongResponse)
async def reject_song(
    song_id: UUID,
    request: RejectRequest,
    admin: Principal = Depends(require_admin),
    service: SongService = Depends(get_song_service),
):
    """Reject a song from any status."""
    song = await service.reject_song(song_id, request.reason, admin.user_id)
    return SongResponse(data=song_resource(song))


@router.post("/albums/{album_id}/approve", response_model=AlbumResponse)
async def approve_album(
    album_id: UUID,
    admin: Principal = Depends(require_admin),
    service: AlbumService = Depends(get_album_service),
):
    """Approve an album. Its songs are moderated individually."""
    album = await service.approve_album(album_id, admin.user_id)
    return AlbumResponse(data=album_resource(album))


@router.post("/albums/{album_id}/reject", response_model=AlbumResponse)
async def reject_album(
    album_id: UUID,
    request: RejectRequest,
    admin: Principal = Depends(require_admin),
    service: AlbumService = Depends(get_album_service),
):
    """Reject an album, keeping the reason."""
    album = await service.reject_album(album_id, request.reason, admin.user_id)
    return AlbumResponse(data=album_resource(album))


# On-behalf authoring

@router.post(
    "/artists/{artist_id}/songs",
    response_model=SongResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_song_for_artist(
    artist_id: UUID,
    request: SongCreateRequest,
    admin: Principal = Depends(require_admin),
    service: SongService = Depends(get_song_service),
):
    """Create a song owned by an approved artist."""
    song = await service.create_song_for_artist(
        artist_id,
        admin.user_id,
        request.data.attributes.model_dump(exclude_unset=True),
    )
    return SongResponse(data=song_resource(song))


@router.post(
    "/artists/{artist_id}/albums",
    response_model=AlbumResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_album_for_artist(
    artist_id: UUID,
    request: AlbumCreateRequest,
    admin: Principal = Depends(require_admin),
    service: AlbumService = Depends(get_album_service),
):
    """Create an album owned by an approved artist."""
    album = await service.create_album_for_artist(
        artist_id,
        admin.user_id,
        request.data.attributes.model_dump(exclude_unset=True),
    )
    return AlbumResponse(data=album_resource(album))


@router.post("/artists/{artist_id}/albums/{album_id}/submit", response_model=AlbumResponse)
async def submit_album_for_artist(
    artist_id: UUID,
    album_id: UUID,
    admin: Principal = Depends(require_admin),
    service: AlbumService = Depends(get_album_service),
):
    """Submit an artist's album and all of its songs for review."""
    album, song_count = await service.submit_album(album_id, artist_id, admin_id=admin.user_id)
    return AlbumResponse(data=album_resource(album), meta={"songs_submitted": song_count})
