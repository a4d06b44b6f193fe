"""Album service: authoring, submission cascade and moderation of albums."""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import transaction
from src.models.album import Album, AlbumStatus
from src.models.song import Song, SongStatus
from src.models.user import User
from src.services.audit_service import AdminActionType, AuditLogService
from src.services.business_rules import AlbumRules, Principal
from src.services.events import EventPublisher, EventType
from src.services.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateError,
    ValidationError,
)
from src.services.moderation import ModerationStateMachine

logger = logging.getLogger(__name__)

ALBUM_CREATE_FIELDS = ("title", "description", "language", "release_type", "cover_image_key")


class AlbumService:
    """
    Business logic for albums.

    An album is edited while DRAFT, then submitted as a unit. Submission
    moves the album and every song on it to PENDING in one transaction.
    """

    def __init__(self, db_session: AsyncSession, event_publisher: EventPublisher = None):
        self.db = db_session
        self.events = event_publisher
        self.audit = AuditLogService(db_session)

    async def get_album(self, album_id: uuid.UUID) -> Album:
        album = await self.db.get(Album, album_id)
        if not album:
            raise NotFoundError(f"Album {album_id} not found")
        return album

    async def _require_approved_artist(self, artist_id: uuid.UUID) -> User:
        artist = await self.db.get(User, artist_id)
        if not artist:
            raise NotFoundError(f"Artist {artist_id} not found")
        if not artist.is_approved_artist:
            raise ValidationError(
                "Can only create albums for approved artists",
                code="ARTIST_NOT_APPROVED",
            )
        return artist

    async def count_songs(self, album_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Song).where(Song.album_id == album_id)
        )
        return result.scalar_one()

    # Creation

    async def create_album(self, artist_id: uuid.UUID, album_data: Dict[str, Any]) -> Album:
        """Create a DRAFT album for an approved artist."""
        self._validate_creation(album_data)
        await self._require_approved_artist(artist_id)

        async with transaction(self.db):
            album = self._build_album(artist_id, album_data)
            self.db.add(album)

        logger.info(f"Created album {album.id} for artist {artist_id}")
        return album

    async def create_album_for_artist(
        self,
        artist_id: uuid.UUID,
        admin_id: uuid.UUID,
        album_data: Dict[str, Any],
    ) -> Album:
        """Admin creates an album on behalf of an approved artist."""
        self._validate_creation(album_data)
        await self._require_approved_artist(artist_id)

        async with transaction(self.db):
            album = self._build_album(artist_id, album_data)
            self.db.add(album)
            await self.db.flush()
            self.audit.log(
                admin_id,
                AdminActionType.ALBUM_CREATED_FOR_ARTIST,
                album.id,
                f'Admin created album "{album.title}" for artist ID {artist_id}',
            )

        logger.info(f"Admin {admin_id} created album {album.id} for artist {artist_id}")
        return album

    # Editing

    async def update_album(
        self,
        album_id: uuid.UUID,
        principal: Principal,
        album_data: Dict[str, Any],
    ) -> Album:
        """
        Apply a partial update to a DRAFT album.

        Raises:
            NotFoundError: album or owning artist missing
            AuthorizationError: caller is neither the owner nor an admin
            ValidationError: owning artist not approved, or bad fields
            StateError: album has left DRAFT
        """
        validation_result = AlbumRules.validate_album_update(album_data)
        if not validation_result.is_valid:
            raise ValidationError("Album validation failed", validation_result.errors)

        album = await self.get_album(album_id)

        if not principal.can_manage(album.artist_user_id):
            raise AuthorizationError("You can only update your own albums")

        await self._require_approved_artist(album.artist_user_id)

        if album.status != AlbumStatus.DRAFT.value:
            raise StateError(
                "Cannot update album that has been submitted or approved",
                code="ALBUM_NOT_DRAFT",
            )

        async with transaction(self.db):
            album.update_from_dict(album_data)
            if principal.is_admin and not principal.owns(album.artist_user_id):
                self.audit.log(
                    principal.user_id,
                    AdminActionType.ALBUM_UPDATED_BY_ADMIN,
                    album.id,
                    f"Admin updated fields: {', '.join(sorted(album_data))}",
                )

        return album

    # Workflow

    async def submit_album(
        self,
        album_id: uuid.UUID,
        artist_id: uuid.UUID,
        admin_id: Optional[uuid.UUID] = None,
    ) -> Tuple[Album, int]:
        """
        Submit an album and cascade PENDING to all of its songs.

        Every song on the album becomes PENDING whatever its prior status.
        ``admin_id`` is set when an administrator submits on the artist's
        behalf. Returns the album and the number of songs moved.

        Raises:
            NotFoundError: album missing
            AuthorizationError: album not owned by ``artist_id``
            ValidationError: album has no songs (nothing is changed)
        """
        album = await self.get_album(album_id)

        if album.artist_user_id != artist_id:
            raise AuthorizationError("Album does not belong to this artist")

        song_count = await self.count_songs(album_id)
        if song_count == 0:
            raise ValidationError("Album has no songs", code="ALBUM_EMPTY")

        async with transaction(self.db):
            album.status = AlbumStatus.PENDING.value
            await self.db.execute(
                update(Song)
                .where(Song.album_id == album_id)
                .values(status=SongStatus.PENDING.value)
                .execution_options(synchronize_session="fetch")
            )
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.ALBUM_SUBMITTED_FOR_ARTIST,
                    album.id,
                    f"Admin submitted album for artist ID {artist_id}",
                )

        logger.info(f"Album {album.id} submitted with {song_count} songs")
        if self.events:
            await self.events.publish(
                EventType.ALBUM_SUBMITTED,
                "album",
                album.id,
                {"status": album.status, "song_count": song_count},
                admin_id or artist_id,
            )
        return album, song_count

    async def approve_album(self, album_id: uuid.UUID, admin_id: Optional[uuid.UUID] = None) -> Album:
        """Administrative override to APPROVED."""
        album = await self.get_album(album_id)

        async with transaction(self.db):
            previous = ModerationStateMachine.admin_set_status(album, AlbumStatus.APPROVED.value)
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.ALBUM_APPROVED,
                    album.id,
                    "Album approved by admin",
                )

        logger.info(f"Album {album.id} approved (was {previous})")
        if self.events:
            await self.events.publish_album_status_changed(album.id, album.status, admin_id)
        return album

    async def reject_album(
        self,
        album_id: uuid.UUID,
        reason: Optional[str] = None,
        admin_id: Optional[uuid.UUID] = None,
    ) -> Album:
        """Administrative override to REJECTED, keeping the reason."""
        album = await self.get_album(album_id)

        async with transaction(self.db):
            previous = ModerationStateMachine.admin_set_status(
                album, AlbumStatus.REJECTED.value, reason
            )
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.ALBUM_REJECTED,
                    album.id,
                    f"Album rejected by admin: {reason}" if reason else "Album rejected by admin",
                )

        logger.info(f"Album {album.id} rejected (was {previous})")
        if self.events:
            await self.events.publish_album_status_changed(album.id, album.status, admin_id, reason)
        return album

    # Listings

    async def list_artist_albums(self, artist_id: uuid.UUID) -> List[Album]:
        result = await self.db.execute(
            select(Album)
            .where(Album.artist_user_id == artist_id)
            .order_by(Album.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_pending(self) -> List[Album]:
        result = await self.db.execute(
            select(Album)
            .where(Album.status == AlbumStatus.PENDING.value)
            .order_by(Album.created_at)
        )
        return list(result.scalars().all())

    async def get_album_tracks(self, album_id: uuid.UUID) -> Tuple[Album, List[Song]]:
        """Album with its songs ordered by track number."""
        album = await self.get_album(album_id)
        result = await self.db.execute(
            select(Song)
            .where(Song.album_id == album_id)
            .order_by(Song.track_number.asc().nulls_last(), Song.created_at.asc())
        )
        return album, list(result.scalars().all())

    # Helpers

    @staticmethod
    def _validate_creation(album_data: Dict[str, Any]) -> None:
        validation_result = AlbumRules.validate_album_creation(album_data)
        if not validation_result.is_valid:
            raise ValidationError("Album validation failed", validation_result.errors)

    @staticmethod
    def _build_album(artist_id: uuid.UUID, album_data: Dict[str, Any]) -> Album:
        fields = {key: album_data.get(key) for key in ALBUM_CREATE_FIELDS}
        return Album(
            artist_user_id=artist_id,
            status=AlbumStatus.DRAFT.value,
            **fields,
        )
