"""User model for listeners, artists and administrators."""

from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Column, Index, String

from .base import BaseModel


class ArtistStatus(str, Enum):
    """Artist verification state of a user account."""

    REQUESTED = "REQUESTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class User(BaseModel):
    """
    Marketplace user account.

    A single account can listen, publish as an artist once its artist
    application is APPROVED, and administer the platform when ``is_admin``
    is set. Credentials live with the identity service; this table only keeps
    what the moderation and payout flows need to know about a principal.
    """

    __tablename__ = "users"

    email = Column(
        String(255),
        nullable=False,
        unique=True,
        comment="Primary email address, unique across the platform"
    )

    name = Column(
        String(255),
        nullable=False,
        comment="Display name"
    )

    is_admin = Column(
        Boolean,
        nullable=False,
        default=False,
        comment="Platform administrator flag"
    )

    artist_status = Column(
        String(20),
        nullable=True,
        comment="Artist verification status (null when never requested)"
    )

    __table_args__ = (
        CheckConstraint(
            "artist_status IS NULL OR artist_status IN ('REQUESTED', 'APPROVED', 'REJECTED')",
            name="valid_artist_status"
        ),
        Index("idx_users_artist_status", "artist_status"),
    )

    @property
    def is_approved_artist(self) -> bool:
        """Check whether the account may author content."""
        return self.artist_status == ArtistStatus.APPROVED.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', artist_status='{self.artist_status}')>"
