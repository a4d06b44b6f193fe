"""Listener subscriptions and recognized subscription revenue."""

from enum import Enum

from sqlalchemy import (
    CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, UUID
)

from .base import BaseModel


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class Subscription(BaseModel):
    """Current subscription window of a listener (one row per user)."""

    __tablename__ = "subscriptions"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="Subscribed user"
    )
    provider = Column(
        String(50),
        nullable=False,
        comment="Payment gateway that manages the subscription"
    )
    status = Column(
        String(20),
        nullable=False,
        default=SubscriptionStatus.ACTIVE.value,
        comment="Subscription status"
    )
    started_at = Column(
        DateTime(timezone=True),
        nullable=False,
        comment="Start of the paid window"
    )
    expires_at = Column(
        DateTime(timezone=True),
        nullable=False,
        comment="End of the paid window"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'CANCELLED', 'EXPIRED')",
            name="valid_subscription_status"
        ),
    )


class SubscriptionPayment(BaseModel):
    """A captured subscription charge, recognized as revenue in the month it was paid."""

    __tablename__ = "subscription_payments"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Paying user"
    )
    amount = Column(
        Numeric(12, 2),
        nullable=False,
        comment="Captured amount"
    )
    currency = Column(
        String(3),
        nullable=False,
        default="INR",
        comment="ISO 4217 currency code"
    )
    provider_payment_id = Column(
        String(255),
        unique=True,
        comment="Gateway payment identifier"
    )
    paid_at = Column(
        DateTime(timezone=True),
        nullable=False,
        comment="Capture timestamp"
    )

    __table_args__ = (
        CheckConstraint(
            "amount >= 0",
            name="non_negative_payment_amount"
        ),
        Index("idx_subscription_payments_paid_at", "paid_at"),
    )
