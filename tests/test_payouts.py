"""Tests for the monthly payout engine."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from src.models.admin_action import AdminAction
from src.models.payout import ArtistEarning, PayoutStatus
from src.models.song import SongStatus
from src.services.exceptions import NotFoundError, ValidationError
from src.services.payout_service import PayoutService, split_artist_pool

from factories import add_payment, add_streams, create_song, create_user

MAY = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)
JUNE = datetime(2024, 6, 2, 9, 0, tzinfo=timezone.utc)


async def earnings_by_artist(session, month):
    result = await session.execute(select(ArtistEarning).where(ArtistEarning.month == month))
    return {earning.artist_user_id: earning for earning in result.scalars().all()}


@pytest.fixture
def service(db_session):
    return PayoutService(db_session, artist_share=0.70)


@pytest.mark.asyncio
async def test_pool_split_by_stream_share(db_session, service, artist, other_artist, listener):
    song_a = await create_song(db_session, artist, status=SongStatus.APPROVED)
    song_b = await create_song(db_session, other_artist, status=SongStatus.APPROVED)
    await add_payment(db_session, listener, "100.00", MAY)
    await add_streams(db_session, song_a, listener, 3, MAY)
    await add_streams(db_session, song_b, listener, 1, MAY)
    await add_streams(db_session, song_b, listener, 5, JUNE)

    run = await service.run_monthly_payout("2024-05")

    assert run.total_revenue == Decimal("100.00")
    assert run.artist_pool == Decimal("70.00")
    assert run.total_streams == 4
    assert run.payouts_created == 2

    earnings = await earnings_by_artist(db_session, "2024-05")
    assert earnings[artist.id].amount == Decimal("52.5")
    assert earnings[artist.id].total_streams == 3
    assert earnings[other_artist.id].amount == Decimal("17.5")
    assert earnings[other_artist.id].status == PayoutStatus.PENDING.value


@pytest.mark.asyncio
async def test_rerun_never_changes_written_payouts(db_session, service, artist, other_artist, listener):
    song_a = await create_song(db_session, artist, status=SongStatus.APPROVED)
    song_b = await create_song(db_session, other_artist, status=SongStatus.APPROVED)
    await add_payment(db_session, listener, "100.00", MAY)
    await add_streams(db_session, song_a, listener, 3, MAY)
    await add_streams(db_session, song_b, listener, 1, MAY)
    await service.run_monthly_payout("2024-05")

    # Late revenue and streams for the same month do not alter the first run.
    await add_payment(db_session, listener, "50.00", MAY)
    await add_streams(db_session, song_b, listener, 10, MAY)
    rerun = await service.run_monthly_payout("2024-05")

    assert rerun.payouts_created == 0
    assert rerun.payouts_existing == 2
    earnings = await earnings_by_artist(db_session, "2024-05")
    assert len(earnings) == 2
    assert earnings[artist.id].amount == Decimal("52.5")
    assert earnings[other_artist.id].amount == Decimal("17.5")


@pytest.mark.asyncio
async def test_shares_add_up_to_the_pool(db_session, service, artist, listener):
    third_artist = await create_user(db_session, "Farah Artist", artist_status="APPROVED")
    fourth_artist = await create_user(db_session, "Gita Artist", artist_status="APPROVED")
    await add_payment(db_session, listener, "100.00", MAY)
    for owner in (artist, third_artist, fourth_artist):
        song = await create_song(db_session, owner, status=SongStatus.APPROVED)
        await add_streams(db_session, song, listener, 1, MAY)

    run = await service.run_monthly_payout("2024-05")

    earnings = await earnings_by_artist(db_session, "2024-05")
    total_paid = sum((earning.amount for earning in earnings.values()), Decimal("0"))
    assert abs(total_paid - run.artist_pool) <= Decimal("0.0003")
    assert all(earning.amount == Decimal("23.3333") for earning in earnings.values())


@pytest.mark.asyncio
async def test_month_without_revenue_is_skipped(db_session, service, artist, listener):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    await add_streams(db_session, song, listener, 4, MAY)

    run = await service.run_monthly_payout("2024-05")

    assert run.skipped_reason == "no_revenue"
    assert await earnings_by_artist(db_session, "2024-05") == {}


@pytest.mark.asyncio
async def test_month_without_streams_is_skipped(db_session, service, listener):
    await add_payment(db_session, listener, "100.00", MAY)

    run = await service.run_monthly_payout("2024-05")

    assert run.skipped
    assert run.skipped_reason == "no_streams"
    assert Decimal(run.to_dict()["total_revenue"]) == Decimal("100")
    assert await earnings_by_artist(db_session, "2024-05") == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("month", ["2024-13", "2024-5", "May 2024", ""])
async def test_invalid_month_is_rejected(service, month):
    with pytest.raises(ValidationError):
        await service.run_monthly_payout(month)


@pytest.mark.asyncio
async def test_mark_paid_is_audited(db_session, service, artist, listener, admin):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    await add_payment(db_session, listener, "10.00", MAY)
    await add_streams(db_session, song, listener, 2, MAY)
    await service.run_monthly_payout("2024-05")
    earning = (await earnings_by_artist(db_session, "2024-05"))[artist.id]

    paid = await service.mark_paid(earning.id, admin.id)

    assert paid.status == PayoutStatus.PAID.value
    assert paid.paid_at is not None
    result = await db_session.execute(select(AdminAction).where(AdminAction.target_id == earning.id))
    assert result.scalar_one().action_type == "PAYOUT_MARKED_PAID"

    listed = await service.list_payouts(month="2024-05", status=PayoutStatus.PAID.value)
    assert [item["artist_name"] for item in listed] == [artist.name]
    assert await service.list_payouts(status=PayoutStatus.PENDING.value) == []


@pytest.mark.asyncio
async def test_mark_paid_unknown_payout(service, admin):
    with pytest.raises(NotFoundError):
        await service.mark_paid(uuid.uuid4(), admin.id)


def test_split_artist_pool_rounds_to_four_places():
    first, second = uuid.uuid4(), uuid.uuid4()

    shares = split_artist_pool(Decimal("10"), {first: 2, second: 1}, 3)

    amounts = {share.artist_user_id: share.amount for share in shares}
    assert amounts == {first: Decimal("6.6667"), second: Decimal("3.3333")}
    assert split_artist_pool(Decimal("10"), {}, 0) == []


@pytest.mark.asyncio
async def test_marking_paid_twice_keeps_first_payment(db_session, service, artist, listener, admin):
    song = await create_song(db_session, artist, status=SongStatus.APPROVED)
    await add_payment(db_session, listener, "10.00", MAY)
    await add_streams(db_session, song, listener, 2, MAY)
    await service.run_monthly_payout("2024-05")
    earning = (await earnings_by_artist(db_session, "2024-05"))[artist.id]

    first = await service.mark_paid(earning.id, admin.id)
    first_paid_at = first.paid_at
    second = await service.mark_paid(earning.id, admin.id)

    assert second.status == PayoutStatus.PAID.value
    assert second.paid_at == first_paid_at
    result = await db_session.execute(select(AdminAction).where(AdminAction.target_id == earning.id))
    assert len(result.scalars().all()) == 1
