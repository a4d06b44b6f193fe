"""Tests for the stream ledger and streaming access."""

import uuid

import pytest
from sqlalchemy import func, select

from src.models.song import SongStatus
from src.models.stream import RecentlyPlayed, Stream
from src.services.exceptions import NotFoundError, ValidationError
from src.services.stream_service import StreamService

from factories import create_song


class FakeStorage:
    def get_signed_url(self, key, expires_in=None):
        return f"https://cdn.test/{key}"


async def count_rows(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_short_plays_are_ignored(db_session, artist, listener):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = StreamService(db_session, min_duration_seconds=30)

    recorded = await service.log_stream(song.id, listener.id, 29)

    assert recorded is False
    assert await count_rows(db_session, Stream) == 0
    assert await count_rows(db_session, RecentlyPlayed) == 0


@pytest.mark.asyncio
async def test_threshold_play_is_recorded(db_session, artist, listener):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = StreamService(db_session, min_duration_seconds=30)

    recorded = await service.log_stream(song.id, listener.id, 30)

    assert recorded is True
    result = await db_session.execute(select(Stream))
    stream = result.scalar_one()
    assert stream.song_id == song.id
    assert stream.user_id == listener.id
    assert stream.duration_seconds == 30


@pytest.mark.asyncio
async def test_recently_played_keeps_one_row_per_song(db_session, artist, listener):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = StreamService(db_session, min_duration_seconds=30)

    for _ in range(3):
        await service.log_stream(song.id, listener.id, 120)

    assert await count_rows(db_session, Stream) == 3
    assert await count_rows(db_session, RecentlyPlayed) == 1


@pytest.mark.asyncio
async def test_negative_duration_is_rejected(db_session, artist, listener):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = StreamService(db_session, min_duration_seconds=30)

    with pytest.raises(ValidationError):
        await service.log_stream(song.id, listener.id, -5)


@pytest.mark.asyncio
async def test_unknown_song_is_rejected(db_session, listener):
    service = StreamService(db_session, min_duration_seconds=30)

    with pytest.raises(NotFoundError):
        await service.log_stream(uuid.uuid4(), listener.id, 45)


@pytest.mark.asyncio
async def test_stream_url_for_approved_song(db_session, artist):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED, audio_key="audio/a.mp3")
    service = StreamService(db_session, storage=FakeStorage())

    assert await service.get_stream_url(song.id) == "https://cdn.test/audio/a.mp3"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [SongStatus.DRAFT, SongStatus.PENDING, SongStatus.TAKEN_DOWN])
async def test_stream_url_hidden_until_approved(db_session, artist, status):
    song = await create_song(db_session, artist, status=status)
    service = StreamService(db_session, storage=FakeStorage())

    with pytest.raises(NotFoundError):
        await service.get_stream_url(song.id)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status", [SongStatus.DRAFT, SongStatus.PENDING, SongStatus.REJECTED, SongStatus.TAKEN_DOWN]
)
async def test_plays_of_unpublished_songs_are_rejected(db_session, artist, listener, status):
    song = await create_song(db_session, artist, status=status)
    service = StreamService(db_session, min_duration_seconds=30)

    with pytest.raises(NotFoundError) as exc_info:
        await service.log_stream(song.id, listener.id, 45)

    assert exc_info.value.code == "SONG_NOT_AVAILABLE"
    assert await count_rows(db_session, Stream) == 0
    assert await count_rows(db_session, RecentlyPlayed) == 0
