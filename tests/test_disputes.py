"""Tests for ownership dispute resolution."""

import uuid

import pytest

from src.models.complaint import DisputeStatus, SongDispute
from src.models.song import SongStatus
from src.services.dispute_service import DisputeService
from src.services.exceptions import NotFoundError, StateError, ValidationError

from factories import create_song


async def open_dispute(session, artist, other_artist):
    filed = await create_song(session, other_artist, title="New Upload", status=SongStatus.PENDING)
    existing = await create_song(session, artist, title="Original", status=SongStatus.APPROVED)
    dispute = SongDispute(
        song_id=filed.id,
        existing_song_id=existing.id,
        reason="Matching audio fingerprint",
        status=DisputeStatus.OPEN.value,
    )
    session.add(dispute)
    await session.commit()
    return dispute, filed, existing


@pytest.mark.asyncio
async def test_winner_approved_and_loser_rejected(db_session, artist, other_artist, admin):
    dispute, filed, existing = await open_dispute(db_session, artist, other_artist)
    service = DisputeService(db_session)

    resolved = await service.resolve_dispute(dispute.id, filed.id, admin.id)

    await db_session.refresh(filed)
    await db_session.refresh(existing)
    assert filed.status == SongStatus.APPROVED.value
    assert existing.status == SongStatus.REJECTED.value
    assert existing.reject_reason == "Rejected in ownership dispute"
    assert resolved.status == DisputeStatus.RESOLVED.value
    assert resolved.winner_song_id == filed.id


@pytest.mark.asyncio
async def test_winner_must_be_a_party(db_session, artist, other_artist, admin):
    dispute, filed, existing = await open_dispute(db_session, artist, other_artist)
    bystander = await create_song(db_session, artist, title="Unrelated", status=SongStatus.APPROVED)
    service = DisputeService(db_session)

    with pytest.raises(ValidationError):
        await service.resolve_dispute(dispute.id, bystander.id, admin.id)

    await db_session.refresh(filed)
    await db_session.refresh(existing)
    assert filed.status == SongStatus.PENDING.value
    assert existing.status == SongStatus.APPROVED.value


@pytest.mark.asyncio
async def test_resolution_is_final(db_session, artist, other_artist, admin):
    dispute, filed, existing = await open_dispute(db_session, artist, other_artist)
    service = DisputeService(db_session)
    await service.resolve_dispute(dispute.id, existing.id, admin.id)

    with pytest.raises(StateError):
        await service.resolve_dispute(dispute.id, filed.id, admin.id)

    await db_session.refresh(existing)
    assert existing.status == SongStatus.APPROVED.value


@pytest.mark.asyncio
async def test_unknown_dispute(db_session, admin):
    service = DisputeService(db_session)

    with pytest.raises(NotFoundError):
        await service.resolve_dispute(uuid.uuid4(), uuid.uuid4(), admin.id)


@pytest.mark.asyncio
async def test_open_disputes_list_both_titles(db_session, artist, other_artist, admin):
    dispute, _, _ = await open_dispute(db_session, artist, other_artist)
    service = DisputeService(db_session)

    items = await service.list_open_disputes()

    assert len(items) == 1
    assert items[0]["id"] == str(dispute.id)
    assert items[0]["song_title"] == "New Upload"
    assert items[0]["existing_song_title"] == "Original"
