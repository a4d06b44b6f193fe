"""Tests for song authoring, editing and moderation."""

import pytest
from sqlalchemy import select

from src.models.admin_action import AdminAction
from src.models.album import AlbumStatus
from src.models.song import SongStatus
from src.services.exceptions import AuthorizationError, StateError, ValidationError
from src.services.song_service import SongService

from factories import create_album, create_song, principal_for


@pytest.mark.asyncio
async def test_create_song_starts_in_draft(db_session, artist):
    service = SongService(db_session)

    song = await service.create_song(artist.id, {"title": "First Light", "lyrics": "Morning comes"})

    assert song.status == SongStatus.DRAFT.value
    assert song.artist_user_id == artist.id
    assert song.published_at is None


@pytest.mark.asyncio
async def test_create_song_requires_approved_artist(db_session, pending_artist):
    service = SongService(db_session)

    with pytest.raises(ValidationError) as exc_info:
        await service.create_song(pending_artist.id, {"title": "Nope", "lyrics": "Not yet"})

    assert exc_info.value.code == "ARTIST_NOT_APPROVED"


@pytest.mark.asyncio
async def test_create_song_requires_title_and_lyrics(db_session, artist):
    service = SongService(db_session)

    with pytest.raises(ValidationError) as exc_info:
        await service.create_song(artist.id, {"title": "  "})

    fields = {error.field for error in exc_info.value.validation_errors}
    assert fields == {"title", "lyrics"}


@pytest.mark.asyncio
async def test_create_song_rejects_foreign_album(db_session, artist, other_artist):
    album = await create_album(db_session, other_artist)
    service = SongService(db_session)

    with pytest.raises(AuthorizationError):
        await service.create_song(
            artist.id, {"title": "Borrowed", "lyrics": "Not mine", "album_id": album.id}
        )


@pytest.mark.asyncio
async def test_create_song_rejects_submitted_album(db_session, artist):
    album = await create_album(db_session, artist, status=AlbumStatus.PENDING)
    service = SongService(db_session)

    with pytest.raises(StateError):
        await service.create_song(
            artist.id, {"title": "Late", "lyrics": "Too late", "album_id": album.id}
        )


@pytest.mark.asyncio
async def test_admin_can_create_song_for_artist_in_submitted_album(db_session, artist, admin):
    album = await create_album(db_session, artist, status=AlbumStatus.PENDING)
    service = SongService(db_session)

    song = await service.create_song_for_artist(
        artist.id, admin.id, {"title": "Bonus", "lyrics": "Extra", "album_id": album.id}
    )

    assert song.artist_user_id == artist.id
    result = await db_session.execute(select(AdminAction).where(AdminAction.target_id == song.id))
    entry = result.scalar_one()
    assert entry.action_type == "SONG_CREATED_FOR_ARTIST"
    assert entry.admin_id == admin.id


@pytest.mark.asyncio
async def test_owner_can_edit_while_in_review(db_session, artist):
    song = await create_song(db_session, artist, status=SongStatus.PENDING)
    service = SongService(db_session)

    updated = await service.update_song(song.id, principal_for(artist), {"genre": "Folk"})

    assert updated.genre == "Folk"


@pytest.mark.asyncio
async def test_owner_cannot_edit_approved_song(db_session, artist):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = SongService(db_session)

    with pytest.raises(StateError):
        await service.update_song(song.id, principal_for(artist), {"genre": "Folk"})


@pytest.mark.asyncio
async def test_admin_can_edit_approved_song(db_session, artist, admin):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = SongService(db_session)

    updated = await service.update_song(song.id, principal_for(admin), {"title": "Remastered"})

    assert updated.title == "Remastered"
    assert updated.status == SongStatus.APPROVED.value


@pytest.mark.asyncio
async def test_other_artist_cannot_edit(db_session, artist, other_artist):
    song = await create_song(db_session, artist)
    service = SongService(db_session)

    with pytest.raises(AuthorizationError):
        await service.update_song(song.id, principal_for(other_artist), {"genre": "Folk"})


@pytest.mark.asyncio
async def test_submit_standalone_song(db_session, artist):
    song = await create_song(db_session, artist)
    service = SongService(db_session)

    await service.submit_song(song.id, principal_for(artist))

    assert song.status == SongStatus.PENDING.value
    with pytest.raises(StateError):
        await service.submit_song(song.id, principal_for(artist))


@pytest.mark.asyncio
async def test_songs_on_albums_are_submitted_with_the_album(db_session, artist):
    album = await create_album(db_session, artist)
    song = await create_song(db_session, artist, album=album)
    service = SongService(db_session)

    with pytest.raises(StateError) as exc_info:
        await service.submit_song(song.id, principal_for(artist))

    assert exc_info.value.code == "SUBMIT_VIA_ALBUM"


@pytest.mark.asyncio
async def test_approve_and_reject_are_unconditional_overrides(db_session, artist, admin):
    song = await create_song(db_session, artist, status=SongStatus.DRAFT)
    service = SongService(db_session)

    await service.approve_song(song.id, admin.id)
    assert song.status == SongStatus.APPROVED.value
    assert song.published_at is not None

    await service.reject_song(song.id, "Copyright concerns", admin.id)
    assert song.status == SongStatus.REJECTED.value
    assert song.reject_reason == "Copyright concerns"

    result = await db_session.execute(select(AdminAction.action_type).where(AdminAction.target_id == song.id))
    assert sorted(result.scalars().all()) == ["SONG_APPROVED", "SONG_REJECTED"]


@pytest.mark.asyncio
async def test_pending_queue_scopes(db_session, artist):
    album = await create_album(db_session, artist, title="Collection")
    single = await create_song(db_session, artist, title="Single", status=SongStatus.PENDING)
    track = await create_song(db_session, artist, title="Track", status=SongStatus.PENDING, album=album)
    await create_song(db_session, artist, title="Draft", status=SongStatus.DRAFT)
    service = SongService(db_session)

    everything = await service.list_pending("all")
    individual = await service.list_pending("individual")
    on_albums = await service.list_pending("album")

    assert {item["id"] for item in everything} == {str(single.id), str(track.id)}
    assert [item["id"] for item in individual] == [str(single.id)]
    assert [item["id"] for item in on_albums] == [str(track.id)]
    assert on_albums[0]["album_title"] == "Collection"
    assert on_albums[0]["artist_name"] == artist.name

    with pytest.raises(ValidationError):
        await service.list_pending("everything")
