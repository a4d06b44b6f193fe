"""Monthly royalty payout engine and payout administration."""

import logging
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import dialect_insert, transaction
from src.core.settings import get_settings
from src.models.base import utcnow
from src.models.payout import ArtistEarning, PayoutStatus
from src.models.song import Song
from src.models.stream import Stream
from src.models.user import User
from src.services.audit_service import AdminActionType, AuditLogService
from src.services.events import EventPublisher, EventType
from src.services.exceptions import NotFoundError, ValidationError
from src.services.subscription_service import SubscriptionService
from src.utils.validators import MonthKeyValidator

logger = logging.getLogger(__name__)

AMOUNT_PRECISION = Decimal("0.0001")


@dataclass
class ArtistShare:
    """Computed share of the artist pool for one artist."""
    artist_user_id: uuid.UUID
    streams: int
    amount: Decimal


@dataclass
class PayoutRunResult:
    """Summary of a monthly payout run."""
    month: str
    total_revenue: Decimal
    artist_pool: Decimal = Decimal("0")
    total_streams: int = 0
    payouts_created: int = 0
    payouts_existing: int = 0
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "total_revenue": str(self.total_revenue),
            "artist_pool": str(self.artist_pool),
            "total_streams": self.total_streams,
            "payouts_created": self.payouts_created,
            "payouts_existing": self.payouts_existing,
            "skipped_reason": self.skipped_reason,
        }


def split_artist_pool(
    artist_pool: Decimal,
    artist_streams: Dict[uuid.UUID, int],
    total_streams: int,
) -> List[ArtistShare]:
    """
    Divide the pool in proportion to each artist's stream count.

    ``amount = artist_pool * streams / total_streams``, rounded to four
    decimal places.
    """
    if total_streams <= 0:
        return []
    return [
        ArtistShare(
            artist_user_id=artist_id,
            streams=streams,
            amount=(artist_pool * Decimal(streams) / Decimal(total_streams)).quantize(
                AMOUNT_PRECISION, rounding=ROUND_HALF_EVEN
            ),
        )
        for artist_id, streams in artist_streams.items()
    ]


class PayoutService:
    """
    Computes monthly artist payouts from subscription revenue and streams.

    The artist pool is ``revenue * artist_share``; the platform keeps the
    rest. Each artist's payout is written at most once per month, so the
    first run for a month is authoritative and re-runs are no-ops.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        revenue_source: SubscriptionService = None,
        artist_share: float = None,
        event_publisher: EventPublisher = None,
    ):
        self.db = db_session
        self.revenue_source = revenue_source or SubscriptionService(db_session)
        if artist_share is None:
            artist_share = get_settings().artist_revenue_share
        self.artist_share = Decimal(str(artist_share))
        self.events = event_publisher
        self.audit = AuditLogService(db_session)

    async def count_streams(self, month: str) -> int:
        start, end = MonthKeyValidator.bounds(month)
        result = await self.db.execute(
            select(func.count(Stream.id)).where(
                Stream.played_at >= start,
                Stream.played_at < end,
            )
        )
        return result.scalar_one()

    async def count_artist_streams(self, month: str) -> Dict[uuid.UUID, int]:
        """Stream counts per artist for the month."""
        start, end = MonthKeyValidator.bounds(month)
        result = await self.db.execute(
            select(Song.artist_user_id, func.count(Stream.id))
            .join(Song, Song.id == Stream.song_id)
            .where(Stream.played_at >= start, Stream.played_at < end)
            .group_by(Song.artist_user_id)
        )
        return {artist_id: streams for artist_id, streams in result.all()}

    async def run_monthly_payout(self, month: str) -> PayoutRunResult:
        """
        Compute and record payouts for a closed month (YYYY-MM).

        Months with no revenue or no streams are skipped without writing
        any rows. Each artist row is committed on its own; a failure part
        way through keeps the rows already written, and a retry fills in
        the rest.
        """
        validation_errors = MonthKeyValidator.validate(month)
        if validation_errors:
            raise ValidationError("Invalid payout month", validation_errors)

        total_revenue = await self.revenue_source.get_monthly_revenue(month)
        run = PayoutRunResult(month=month, total_revenue=total_revenue)

        if total_revenue <= 0:
            logger.info(f"Payout {month}: no subscription revenue, nothing to distribute")
            run.skipped_reason = "no_revenue"
            return run

        run.artist_pool = total_revenue * self.artist_share

        run.total_streams = await self.count_streams(month)
        if run.total_streams == 0:
            logger.warning(
                f"Payout {month}: revenue {total_revenue} but no qualifying streams, "
                "pool left unallocated"
            )
            run.skipped_reason = "no_streams"
            return run

        artist_streams = await self.count_artist_streams(month)
        shares = split_artist_pool(run.artist_pool, artist_streams, run.total_streams)

        for share in shares:
            if await self._insert_payout(month, share):
                run.payouts_created += 1
            else:
                run.payouts_existing += 1

        logger.info(
            f"Payout {month}: pool {run.artist_pool} over {run.total_streams} streams, "
            f"{run.payouts_created} created, {run.payouts_existing} already present"
        )
        if self.events:
            await self.events.publish(
                EventType.PAYOUT_RUN_COMPLETED, "payout_run", month, run.to_dict()
            )
        return run

    async def _insert_payout(self, month: str, share: ArtistShare) -> bool:
        """Insert-or-ignore one payout row. Returns False when it already existed."""
        statement = (
            dialect_insert(self.db, ArtistEarning)
            .values(
                id=uuid.uuid4(),
                artist_user_id=share.artist_user_id,
                month=month,
                total_streams=share.streams,
                amount=share.amount,
                status=PayoutStatus.PENDING.value,
                created_at=utcnow(),
                updated_at=utcnow(),
            )
            .on_conflict_do_nothing(index_elements=["artist_user_id", "month"])
        )
        async with transaction(self.db):
            result = await self.db.execute(statement)
        return result.rowcount == 1

    async def list_payouts(
        self,
        month: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Payout rows with artist names, newest first."""
        query = select(ArtistEarning, User.name).join(User, User.id == ArtistEarning.artist_user_id)
        if month:
            query = query.where(ArtistEarning.month == month)
        if status:
            query = query.where(ArtistEarning.status == status)

        result = await self.db.execute(
            query.order_by(ArtistEarning.month.desc(), ArtistEarning.created_at.desc())
        )
        items = []
        for earning, artist_name in result.all():
            item = earning.to_dict()
            item["artist_name"] = artist_name
            items.append(item)
        return items

    async def mark_paid(self, payout_id: uuid.UUID, admin_id: uuid.UUID = None) -> ArtistEarning:
        """Transition a PENDING payout to PAID. Already paid payouts are returned unchanged."""
        earning = await self.db.get(ArtistEarning, payout_id)
        if not earning:
            raise NotFoundError(f"Payout {payout_id} not found")

        if earning.status == PayoutStatus.PAID.value:
            logger.info(f"Payout {earning.id} already paid at {earning.paid_at}")
            return earning

        async with transaction(self.db):
            earning.status = PayoutStatus.PAID.value
            earning.paid_at = utcnow()
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.PAYOUT_MARKED_PAID,
                    earning.id,
                    f"Payout of {earning.amount} for {earning.month} marked paid",
                )

        logger.info(f"Payout {earning.id} marked paid")
        if self.events:
            await self.events.publish(
                EventType.PAYOUT_PAID, "payout", earning.id,
                {"month": earning.month, "amount": str(earning.amount)}, admin_id,
            )
        return earning
