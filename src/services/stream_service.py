"""Stream ledger: playback logging and streaming access."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import dialect_insert, transaction
from src.core.settings import get_settings
from src.models.base import utcnow
from src.models.song import Song, SongStatus
from src.models.stream import RecentlyPlayed, Stream
from src.services.exceptions import NotFoundError, ValidationError
from src.services.storage import ObjectStorage, get_object_storage

logger = logging.getLogger(__name__)


class StreamService:
    """
    Appends qualifying plays to the stream ledger and hands out stream URLs.

    Plays shorter than ``min_stream_duration_seconds`` are ignored entirely:
    no ledger row and no recently played update.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        storage: ObjectStorage = None,
        min_duration_seconds: int = None,
    ):
        self.db = db_session
        self._storage = storage
        if min_duration_seconds is None:
            min_duration_seconds = get_settings().min_stream_duration_seconds
        self.min_duration_seconds = min_duration_seconds

    @property
    def storage(self) -> ObjectStorage:
        if self._storage is None:
            self._storage = get_object_storage()
        return self._storage

    async def log_stream(self, song_id: uuid.UUID, user_id: uuid.UUID, duration: int) -> bool:
        """
        Record a play. Returns True when a ledger row was written.

        Raises:
            ValidationError: negative duration
            NotFoundError: unknown or unpublished song
        """
        if duration is None or duration < 0:
            raise ValidationError("Duration must be a non-negative number of seconds")

        if duration < self.min_duration_seconds:
            logger.debug(
                f"Ignoring {duration}s play of song {song_id} "
                f"(minimum {self.min_duration_seconds}s)"
            )
            return False

        song = await self.db.get(Song, song_id)
        if not song:
            raise NotFoundError(f"Song {song_id} not found")
        if song.status != SongStatus.APPROVED.value:
            raise NotFoundError("Song not available", code="SONG_NOT_AVAILABLE")

        now = utcnow()
        async with transaction(self.db):
            self.db.add(Stream(
                song_id=song_id,
                user_id=user_id,
                duration_seconds=duration,
                played_at=now,
            ))
            upsert = dialect_insert(self.db, RecentlyPlayed).values(
                id=uuid.uuid4(),
                user_id=user_id,
                song_id=song_id,
                played_at=now,
            )
            await self.db.execute(
                upsert.on_conflict_do_update(
                    index_elements=["user_id", "song_id"],
                    set_={"played_at": upsert.excluded.played_at},
                )
            )

        return True

    async def get_stream_url(self, song_id: uuid.UUID) -> str:
        """Presigned URL for an APPROVED song's audio."""
        song = await self.db.get(Song, song_id)
        if not song or song.status != SongStatus.APPROVED.value or not song.stream_key:
            raise NotFoundError("Song not available", code="SONG_NOT_AVAILABLE")
        return self.storage.get_signed_url(song.stream_key)
