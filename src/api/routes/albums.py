"""Albums API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies.common import (
    get_album_service,
    get_current_principal,
    get_pagination_params,
    paginate,
    require_approved_artist,
)
from src.api.routes.songs import song_resource
from src.schemas.album import (
    AlbumCollectionResponse,
    AlbumCreateRequest,
    AlbumResponse,
    AlbumUpdateRequest,
)
from src.schemas.base import build_resource
from src.services.album_service import AlbumService
from src.services.business_rules import Principal
from src.services.exceptions import AuthorizationError

router = APIRouter()


def album_resource(album) -> dict:
    return build_resource("album", album.to_dict())


@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    request: AlbumCreateRequest,
    principal: Principal = Depends(require_approved_artist),
    service: AlbumService = Depends(get_album_service),
):
    """Create a DRAFT album owned by the calling artist."""
    album = await service.create_album(
        principal.user_id,
        request.data.attributes.model_dump(exclude_unset=True),
    )
    return AlbumResponse(data=album_resource(album))


@router.get("/mine", response_model=AlbumCollectionResponse)
async def list_my_albums(
    pagination=Depends(get_pagination_params),
    principal: Principal = Depends(get_current_principal),
    service: AlbumService = Depends(get_album_service),
):
    """List the calling artist's albums, newest first."""
    albums = await service.list_artist_albums(principal.user_id)
    page = paginate(albums, pagination)
    return AlbumCollectionResponse(
        data=[album_resource(album) for album in page["items"]],
        meta=page["meta"],
    )


@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album(
    album_id: UUID,
    include: Optional[str] = Query(None, description="Include related resources (tracks)"),
    principal: Principal = Depends(get_current_principal),
    service: AlbumService = Depends(get_album_service),
):
    """Get an album, optionally with its tracks ordered by track number."""
    album, tracks = await service.get_album_tracks(album_id)
    if not principal.can_manage(album.artist_user_id):
        raise AuthorizationError("You can only view your own albums")

    included = None
    if include and "tracks" in include:
        included = [song_resource(song) for song in tracks]
    return AlbumResponse(
        data=album_resource(album),
        included=included,
        meta={"song_count": len(tracks)},
    )


@router.patch("/{album_id}", response_model=AlbumResponse)
async def update_album(
    album_id: UUID,
    request: AlbumUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    service: AlbumService = Depends(get_album_service),
):
    """Partially update a DRAFT album (owner or admin)."""
    album = await service.update_album(
        album_id,
        principal,
        request.data.attributes.model_dump(exclude_unset=True),
    )
    return AlbumResponse(data=album_resource(album))


@router.post("/{album_id}/submit", response_model=AlbumResponse)
async def submit_album(
    album_id: UUID,
    principal: Principal = Depends(require_approved_artist),
    service: AlbumService = Depends(get_album_service),
):
    """Submit an album; every song on it moves to PENDING with it."""
    album, song_count = await service.submit_album(album_id, principal.user_id)
    return AlbumResponse(data=album_resource(album), meta={"songs_submitted": song_count})
