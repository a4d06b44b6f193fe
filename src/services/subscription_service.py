"""Subscription lookups used by streaming access and the payout run."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.subscription import Subscription, SubscriptionPayment, SubscriptionStatus
from src.utils.validators import MonthKeyValidator

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Read-only view of subscriptions and recognized revenue."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def has_active_subscription(self, user_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(Subscription.id).where(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE.value,
                Subscription.expires_at > utcnow(),
            )
        )
        return result.first() is not None

    async def get_monthly_revenue(self, month: str) -> Decimal:
        """Total subscription revenue captured during ``month`` (YYYY-MM)."""
        start, end = MonthKeyValidator.bounds(month)
        result = await self.db.execute(
            select(func.coalesce(func.sum(SubscriptionPayment.amount), 0)).where(
                SubscriptionPayment.paid_at >= start,
                SubscriptionPayment.paid_at < end,
            )
        )
        revenue = Decimal(str(result.scalar_one()))
        logger.debug(f"Recognized revenue for {month}: {revenue}")
        return revenue
