"""Listener complaints and ownership disputes against songs."""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text, UUID

from .base import BaseModel


class ComplaintStatus(str, Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"


class ComplaintAction(str, Enum):
    """Administrative outcome of a complaint."""

    RESTORE = "RESTORE"
    REMOVE = "REMOVE"


class DisputeStatus(str, Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"


class Complaint(BaseModel):
    """
    Safety report filed by a listener against a song.

    Filing a complaint takes the song down straight away; an administrator
    later restores or removes it.
    """

    __tablename__ = "complaints"

    song_id = Column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="CASCADE"),
        nullable=False,
        comment="Reported song"
    )
    reported_by = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Reporting user"
    )
    reason = Column(
        Text,
        nullable=False,
        comment="Reason given by the reporter"
    )
    status = Column(
        String(20),
        nullable=False,
        default=ComplaintStatus.OPEN.value,
        comment="Complaint status"
    )
    resolution_action = Column(
        String(20),
        comment="RESTORE or REMOVE once resolved"
    )
    resolved_at = Column(
        DateTime(timezone=True),
        comment="Resolution timestamp"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('OPEN', 'RESOLVED')",
            name="valid_complaint_status"
        ),
        CheckConstraint(
            "resolution_action IS NULL OR resolution_action IN ('RESTORE', 'REMOVE')",
            name="valid_complaint_action"
        ),
        Index("idx_complaints_song_id", "song_id"),
        Index("idx_complaints_reported_by", "reported_by"),
        Index("idx_complaints_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Complaint(id={self.id}, song_id={self.song_id}, status='{self.status}')>"


class SongDispute(BaseModel):
    """
    Conflicting rights claim between a newly filed song and an existing one.

    Disputes are opened by the ingestion pipeline; administrators resolve them
    by naming the winning song.
    """

    __tablename__ = "song_disputes"

    song_id = Column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="CASCADE"),
        nullable=False,
        comment="Song whose filing raised the dispute"
    )
    existing_song_id = Column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="CASCADE"),
        nullable=False,
        comment="Previously published song claiming the same rights"
    )
    reason = Column(
        Text,
        comment="Why the two songs were flagged"
    )
    status = Column(
        String(20),
        nullable=False,
        default=DisputeStatus.OPEN.value,
        comment="Dispute status"
    )
    winner_song_id = Column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="SET NULL"),
        comment="Song kept after resolution"
    )
    resolved_at = Column(
        DateTime(timezone=True),
        comment="Resolution timestamp"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('OPEN', 'RESOLVED')",
            name="valid_dispute_status"
        ),
        CheckConstraint(
            "song_id <> existing_song_id",
            name="distinct_dispute_parties"
        ),
        Index("idx_song_disputes_status", "status"),
    )

    @property
    def party_ids(self) -> tuple:
        return (self.song_id, self.existing_song_id)

    def __repr__(self) -> str:
        return f"<SongDispute(id={self.id}, song_id={self.song_id}, existing_song_id={self.existing_song_id})>"
