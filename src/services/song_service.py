"""Song service: authoring, editing, submission and moderation of songs."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import transaction
from src.models.album import Album, AlbumStatus
from src.models.song import Song, SongStatus
from src.models.user import User
from src.services.audit_service import AdminActionType, AuditLogService
from src.services.business_rules import Principal, SongRules
from src.services.events import EventPublisher
from src.services.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateError,
    ValidationError,
)
from src.services.moderation import ModerationStateMachine

logger = logging.getLogger(__name__)

SONG_CREATE_FIELDS = (
    "title",
    "language",
    "genre",
    "lyrics",
    "description",
    "audio_key",
    "cover_image_key",
    "album_id",
    "track_number",
)

ARTIST_EDITABLE_STATUSES = {SongStatus.DRAFT.value, SongStatus.PENDING.value}


class SongService:
    """
    Business logic for songs.

    Handles:
    - Creation by approved artists, or by admins on an artist's behalf
    - Owner/admin editing while the song is still in review
    - Standalone submission for review
    - Administrative approval and rejection
    - Pending moderation queues
    """

    def __init__(self, db_session: AsyncSession, event_publisher: EventPublisher = None):
        self.db = db_session
        self.events = event_publisher
        self.audit = AuditLogService(db_session)

    # Lookups

    async def get_song(self, song_id: uuid.UUID) -> Song:
        song = await self.db.get(Song, song_id)
        if not song:
            raise NotFoundError(f"Song {song_id} not found")
        return song

    async def get_approved_artist(self, artist_id: uuid.UUID) -> User:
        """Return the artist account, enforcing that it may author content."""
        artist = await self.db.get(User, artist_id)
        if not artist:
            raise NotFoundError(f"Artist {artist_id} not found")
        if not artist.is_approved_artist:
            raise ValidationError(
                "Can only create content for approved artists",
                code="ARTIST_NOT_APPROVED",
            )
        return artist

    async def _get_album(self, album_id: uuid.UUID) -> Album:
        album = await self.db.get(Album, album_id)
        if not album:
            raise NotFoundError(f"Album {album_id} not found")
        return album

    # Creation

    async def create_song(self, artist_id: uuid.UUID, song_data: Dict[str, Any]) -> Song:
        """
        Create a DRAFT song for an approved artist.

        Raises:
            ValidationError: missing title/lyrics or artist not approved
            NotFoundError: unknown artist or album
            AuthorizationError: album belongs to another artist
            StateError: album already submitted
        """
        self._validate_creation(song_data)
        await self.get_approved_artist(artist_id)

        album_id = song_data.get("album_id")
        if album_id:
            album = await self._get_album(album_id)
            if album.artist_user_id != artist_id:
                raise AuthorizationError("You can only add songs to your own albums")
            if album.status != AlbumStatus.DRAFT.value:
                raise StateError(
                    "Cannot add songs to an album that has already been submitted or approved",
                    code="ALBUM_NOT_DRAFT",
                )

        async with transaction(self.db):
            song = self._build_song(artist_id, song_data)
            self.db.add(song)

        logger.info(f"Created song {song.id} for artist {artist_id}")
        return song

    async def create_song_for_artist(
        self,
        artist_id: uuid.UUID,
        admin_id: uuid.UUID,
        song_data: Dict[str, Any],
    ) -> Song:
        """Admin creates a song on behalf of an approved artist; the album may be in any status."""
        self._validate_creation(song_data)
        await self.get_approved_artist(artist_id)

        album_id = song_data.get("album_id")
        if album_id:
            album = await self._get_album(album_id)
            if album.artist_user_id != artist_id:
                raise ValidationError(
                    "Album does not belong to the specified artist",
                    code="ALBUM_ARTIST_MISMATCH",
                )

        async with transaction(self.db):
            song = self._build_song(artist_id, song_data)
            self.db.add(song)
            await self.db.flush()
            self.audit.log(
                admin_id,
                AdminActionType.SONG_CREATED_FOR_ARTIST,
                song.id,
                f'Admin created song "{song.title}" for artist ID {artist_id}',
            )

        logger.info(f"Admin {admin_id} created song {song.id} for artist {artist_id}")
        return song

    # Editing

    async def update_song(
        self,
        song_id: uuid.UUID,
        principal: Principal,
        song_data: Dict[str, Any],
    ) -> Song:
        """
        Apply a partial update.

        Artists may edit their own songs while DRAFT or PENDING; admins may
        edit any song in any status.
        """
        validation_result = SongRules.validate_song_update(song_data)
        if not validation_result.is_valid:
            raise ValidationError("Song validation failed", validation_result.errors)

        song = await self.get_song(song_id)

        if not principal.can_manage(song.artist_user_id):
            raise AuthorizationError("You can only update your own songs")

        if not principal.is_admin and song.status not in ARTIST_EDITABLE_STATUSES:
            raise StateError(
                "Cannot update songs that have been approved or rejected",
                code="SONG_LOCKED",
            )

        album_id = song_data.get("album_id")
        if album_id is not None:
            album = await self._get_album(album_id)
            if album.artist_user_id != song.artist_user_id:
                raise ValidationError(
                    "Album does not belong to the song artist",
                    code="ALBUM_ARTIST_MISMATCH",
                )
            if not principal.is_admin and album.status != AlbumStatus.DRAFT.value:
                raise StateError(
                    "Cannot add songs to an album that has already been submitted or approved",
                    code="ALBUM_NOT_DRAFT",
                )

        async with transaction(self.db):
            song.update_from_dict(song_data)
            if principal.is_admin and not principal.owns(song.artist_user_id):
                self.audit.log(
                    principal.user_id,
                    AdminActionType.SONG_UPDATED_BY_ADMIN,
                    song.id,
                    f"Admin updated fields: {', '.join(sorted(song_data))}",
                )

        return song

    # Workflow

    async def submit_song(self, song_id: uuid.UUID, principal: Principal) -> Song:
        """
        Submit a standalone song for review.

        Songs on an album are submitted through their album.
        """
        song = await self.get_song(song_id)

        if not principal.can_manage(song.artist_user_id):
            raise AuthorizationError("You can only submit your own songs")
        if song.album_id is not None:
            raise StateError(
                "Songs on an album are submitted with the album",
                code="SUBMIT_VIA_ALBUM",
            )

        async with transaction(self.db):
            ModerationStateMachine.submit_for_review(song)

        logger.info(f"Song {song.id} submitted for review")
        if self.events:
            await self.events.publish_song_status_changed(song.id, song.status, principal.user_id)
        return song

    async def approve_song(self, song_id: uuid.UUID, admin_id: Optional[uuid.UUID] = None) -> Song:
        """Administrative override to APPROVED."""
        song = await self.get_song(song_id)

        async with transaction(self.db):
            previous = ModerationStateMachine.admin_set_status(song, SongStatus.APPROVED.value)
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.SONG_APPROVED,
                    song.id,
                    "Song approved by admin",
                )

        logger.info(f"Song {song.id} approved (was {previous})")
        if self.events:
            await self.events.publish_song_status_changed(song.id, song.status, admin_id)
        return song

    async def reject_song(
        self,
        song_id: uuid.UUID,
        reason: Optional[str] = None,
        admin_id: Optional[uuid.UUID] = None,
    ) -> Song:
        """Administrative override to REJECTED, keeping the reason."""
        song = await self.get_song(song_id)

        async with transaction(self.db):
            previous = ModerationStateMachine.admin_set_status(
                song, SongStatus.REJECTED.value, reason
            )
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.SONG_REJECTED,
                    song.id,
                    f"Song rejected by admin: {reason}" if reason else "Song rejected by admin",
                )

        logger.info(f"Song {song.id} rejected (was {previous})")
        if self.events:
            await self.events.publish_song_status_changed(song.id, song.status, admin_id, reason)
        return song

    # Listings

    async def list_artist_songs(self, artist_id: uuid.UUID) -> List[Song]:
        result = await self.db.execute(
            select(Song)
            .where(Song.artist_user_id == artist_id)
            .order_by(Song.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_pending(self, scope: str = "all") -> List[Dict[str, Any]]:
        """
        Songs awaiting review with artist (and album) names.

        ``scope`` is ``all``, ``individual`` (no album) or ``album``.
        """
        query = (
            select(Song, User.name, Album.title)
            .join(User, User.id == Song.artist_user_id)
            .outerjoin(Album, Album.id == Song.album_id)
            .where(Song.status == SongStatus.PENDING.value)
        )
        if scope == "individual":
            query = query.where(Song.album_id.is_(None))
        elif scope == "album":
            query = query.where(Song.album_id.is_not(None))
        elif scope != "all":
            raise ValidationError(f"Unknown pending scope '{scope}'", code="INVALID_SCOPE")

        result = await self.db.execute(query.order_by(Song.created_at))
        pending = []
        for song, artist_name, album_title in result.all():
            item = song.to_dict()
            item["artist_name"] = artist_name
            item["album_title"] = album_title
            pending.append(item)
        return pending

    # Helpers

    @staticmethod
    def _validate_creation(song_data: Dict[str, Any]) -> None:
        validation_result = SongRules.validate_song_creation(song_data)
        if not validation_result.is_valid:
            raise ValidationError("Song validation failed", validation_result.errors)

    @staticmethod
    def _build_song(artist_id: uuid.UUID, song_data: Dict[str, Any]) -> Song:
        fields = {key: song_data.get(key) for key in SONG_CREATE_FIELDS}
        return Song(
            artist_user_id=artist_id,
            status=SongStatus.DRAFT.value,
            **fields,
        )
