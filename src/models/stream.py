"""Stream ledger and recently played projection."""

import uuid

from sqlalchemy import (
    CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, UniqueConstraint, UUID
)

from src.core.database import Base
from .base import utcnow


class Stream(Base):
    """
    One qualifying playback.

    Append-only fact log aggregated by the monthly payout run. Rows are never
    updated or deleted.
    """

    __tablename__ = "streams"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key UUID"
    )
    song_id = Column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Played song"
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Listening user"
    )
    duration_seconds = Column(
        Integer,
        nullable=False,
        comment="Reported listening time in seconds"
    )
    played_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Playback timestamp"
    )

    __table_args__ = (
        CheckConstraint(
            "duration_seconds >= 0",
            name="non_negative_stream_duration"
        ),
        Index("idx_streams_song_id", "song_id"),
        Index("idx_streams_played_at", "played_at"),
    )

    def __repr__(self) -> str:
        return f"<Stream(id={self.id}, song_id={self.song_id}, duration={self.duration_seconds})>"


class RecentlyPlayed(Base):
    """Latest play of a song per user, refreshed on every qualifying stream."""

    __tablename__ = "recently_played"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    song_id = Column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="CASCADE"),
        nullable=False,
    )
    played_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "song_id", name="unique_recently_played_song"),
        Index("idx_recently_played_user_played_at", "user_id", "played_at"),
    )
