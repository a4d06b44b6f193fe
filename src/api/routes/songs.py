"""Songs API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies.common import (
    get_current_principal,
    get_pagination_params,
    get_song_service,
    get_stream_service,
    paginate,
    require_active_subscription,
    require_approved_artist,
)
from src.core.settings import get_settings
from src.models.song import SongStatus
from src.schemas.base import build_resource
from src.schemas.payout import PlayRequest, PlayResponse, StreamUrlResponse
from src.schemas.song import (
    SongCollectionResponse,
    SongCreateRequest,
    SongResponse,
    SongUpdateRequest,
)
from src.services.business_rules import Principal
from src.services.song_service import SongService
from src.services.storage import StorageError
from src.services.stream_service import StreamService

router = APIRouter()
settings = get_settings()


def song_resource(song) -> dict:
    return build_resource("song", song.to_dict(), exclude=("audio_processed_key",))


@router.post("", response_model=SongResponse, status_code=status.HTTP_201_CREATED)
async def create_song(
    request: SongCreateRequest,
    principal: Principal = Depends(require_approved_artist),
    service: SongService = Depends(get_song_service),
):
    """Create a DRAFT song owned by the calling artist."""
    song = await service.create_song(
        principal.user_id,
        request.data.attributes.model_dump(exclude_unset=True),
    )
    return SongResponse(data=song_resource(song))


@router.get("/mine", response_model=SongCollectionResponse)
async def list_my_songs(
    pagination=Depends(get_pagination_params),
    principal: Principal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
):
    """List the calling artist's songs, newest first."""
    songs = await service.list_artist_songs(principal.user_id)
    page = paginate(songs, pagination)
    return SongCollectionResponse(
        data=[song_resource(song) for song in page["items"]],
        meta=page["meta"],
    )


@router.get("/{song_id}", response_model=SongResponse)
async def get_song(
    song_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
):
    """Get a song. Only APPROVED songs are visible to anyone but the owner and admins."""
    song = await service.get_song(song_id)
    if not principal.can_manage(song.artist_user_id) and song.status != SongStatus.APPROVED.value:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Song not found", "code": "RESOURCE_NOT_FOUND"}
        )
    return SongResponse(data=song_resource(song))


@router.patch("/{song_id}", response_model=SongResponse)
async def update_song(
    song_id: UUID,
    request: SongUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
):
    """Partially update a song (owner while in review, or admin)."""
    song = await service.update_song(
        song_id,
        principal,
        request.data.attributes.model_dump(exclude_unset=True),
    )
    return SongResponse(data=song_resource(song))


@router.post("/{song_id}/submit", response_model=SongResponse)
async def submit_song(
    song_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
):
    """Submit a standalone song for review."""
    song = await service.submit_song(song_id, principal)
    return SongResponse(data=song_resource(song))


@router.get("/{song_id}/stream", response_model=StreamUrlResponse)
async def get_stream_url(
    song_id: UUID,
    principal: Principal = Depends(require_active_subscription),
    service: StreamService = Depends(get_stream_service),
):
    """Get a time-limited URL for an APPROVED song's audio."""
    try:
        url = await service.get_stream_url(song_id)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": str(e), "code": "STORAGE_UNAVAILABLE"}
        )
    return StreamUrlResponse(url=url, expires_in=settings.presigned_url_expire_seconds)


@router.post("/{song_id}/plays", response_model=PlayResponse)
async def log_play(
    song_id: UUID,
    request: PlayRequest,
    principal: Principal = Depends(require_active_subscription),
    service: StreamService = Depends(get_stream_service),
):
    """Report a finished playback. Plays under the minimum duration are not counted."""
    recorded = await service.log_stream(song_id, principal.user_id, request.duration_seconds)
    return PlayResponse(recorded=recorded)
