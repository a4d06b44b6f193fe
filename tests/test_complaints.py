"""Tests for complaint filing and resolution."""

import uuid

import pytest
from sqlalchemy import select

from src.models.admin_action import AdminAction
from src.models.complaint import ComplaintAction, ComplaintStatus
from src.models.song import SongStatus
from src.services.complaint_service import ComplaintService
from src.services.exceptions import NotFoundError, ValidationError

from factories import create_song


@pytest.mark.asyncio
async def test_filing_a_complaint_takes_the_song_down(db_session, artist, listener):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = ComplaintService(db_session)

    complaint = await service.create_complaint(song.id, listener.id, "  Offensive lyrics ")

    await db_session.refresh(song)
    assert song.status == SongStatus.TAKEN_DOWN.value
    assert complaint.status == ComplaintStatus.OPEN.value
    assert complaint.reason == "Offensive lyrics"
    assert complaint.reported_by == listener.id


@pytest.mark.asyncio
async def test_complaint_requires_reason(db_session, artist, listener):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = ComplaintService(db_session)

    with pytest.raises(ValidationError):
        await service.create_complaint(song.id, listener.id, "   ")

    await db_session.refresh(song)
    assert song.status == SongStatus.APPROVED.value


@pytest.mark.asyncio
async def test_complaint_against_unknown_song(db_session, listener):
    service = ComplaintService(db_session)

    with pytest.raises(NotFoundError):
        await service.create_complaint(uuid.uuid4(), listener.id, "Spam")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "action,expected",
    [
        (ComplaintAction.RESTORE, SongStatus.APPROVED),
        (ComplaintAction.REMOVE, SongStatus.REJECTED),
        ("REMOVE", SongStatus.REJECTED),
    ],
)
async def test_resolution_sets_song_status(db_session, artist, listener, admin, action, expected):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = ComplaintService(db_session)
    complaint = await service.create_complaint(song.id, listener.id, "Stolen track")

    resolved = await service.resolve_complaint(complaint.id, action, admin.id)

    await db_session.refresh(song)
    assert song.status == expected.value
    assert resolved.status == ComplaintStatus.RESOLVED.value
    assert resolved.resolved_at is not None

    result = await db_session.execute(select(AdminAction).where(AdminAction.target_id == complaint.id))
    assert result.scalar_one().action_type == "COMPLAINT_RESOLVED"


@pytest.mark.asyncio
async def test_unknown_action_changes_nothing(db_session, artist, listener, admin):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = ComplaintService(db_session)
    complaint = await service.create_complaint(song.id, listener.id, "Stolen track")

    with pytest.raises(ValidationError) as exc_info:
        await service.resolve_complaint(complaint.id, "IGNORE", admin.id)

    assert exc_info.value.code == "INVALID_COMPLAINT_ACTION"
    await db_session.refresh(song)
    await db_session.refresh(complaint)
    assert song.status == SongStatus.TAKEN_DOWN.value
    assert complaint.status == ComplaintStatus.OPEN.value


@pytest.mark.asyncio
async def test_resolving_again_reapplies_the_outcome(db_session, artist, listener, admin):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    service = ComplaintService(db_session)
    complaint = await service.create_complaint(song.id, listener.id, "Stolen track")

    await service.resolve_complaint(complaint.id, ComplaintAction.REMOVE, admin.id)
    await service.resolve_complaint(complaint.id, ComplaintAction.RESTORE, admin.id)

    await db_session.refresh(song)
    assert song.status == SongStatus.APPROVED.value


@pytest.mark.asyncio
async def test_resolve_unknown_complaint(db_session, admin):
    service = ComplaintService(db_session)

    with pytest.raises(NotFoundError):
        await service.resolve_complaint(uuid.uuid4(), ComplaintAction.RESTORE, admin.id)


@pytest.mark.asyncio
async def test_complaint_listings(db_session, artist, listener, admin):
    song = await create_song(db_session, artist, title="Loud Song", status=SongStatus.APPROVED)
    other = await create_song(db_session, artist, title="Quiet Song", status=SongStatus.APPROVED)
    service = ComplaintService(db_session)
    first = await service.create_complaint(song.id, listener.id, "Too loud")
    second = await service.create_complaint(other.id, listener.id, "Too quiet")
    await service.resolve_complaint(second.id, ComplaintAction.RESTORE, admin.id)

    mine = await service.list_user_complaints(listener.id)
    open_items = await service.list_open_complaints()

    assert {item["song_title"] for item in mine} == {"Loud Song", "Quiet Song"}
    assert all(item["artist_name"] == artist.name for item in mine)
    assert [item["id"] for item in open_items] == [str(first.id)]
    assert open_items[0]["reporter"] == listener.name
