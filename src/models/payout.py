"""Monthly artist earnings produced by the payout run."""

from enum import Enum

from sqlalchemy import (
    CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String,
    UniqueConstraint, UUID
)

from .base import BaseModel


class PayoutStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class ArtistEarning(BaseModel):
    """
    One artist's revenue share for one calendar month.

    At most one row exists per (artist, month); the first payout run for a
    month is authoritative and later runs never change it.
    """

    __tablename__ = "artist_earnings"

    artist_user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Artist receiving the payout"
    )
    month = Column(
        String(7),
        nullable=False,
        comment="Accounting period (YYYY-MM)"
    )
    total_streams = Column(
        Integer,
        nullable=False,
        comment="Qualifying streams attributed to the artist in the month"
    )
    amount = Column(
        Numeric(14, 4),
        nullable=False,
        comment="Computed payout amount"
    )
    status = Column(
        String(20),
        nullable=False,
        default=PayoutStatus.PENDING.value,
        comment="Payout status"
    )
    paid_at = Column(
        DateTime(timezone=True),
        comment="When the payout was marked paid"
    )

    __table_args__ = (
        UniqueConstraint("artist_user_id", "month", name="unique_artist_month_earning"),
        CheckConstraint(
            "status IN ('PENDING', 'PAID')",
            name="valid_payout_status"
        ),
        CheckConstraint(
            "total_streams >= 0",
            name="non_negative_total_streams"
        ),
        Index("idx_artist_earnings_month", "month"),
        Index("idx_artist_earnings_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<ArtistEarning(artist_user_id={self.artist_user_id}, month='{self.month}', amount={self.amount})>"
