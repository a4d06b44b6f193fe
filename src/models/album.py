"""Album model for artist releases."""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Text, UUID

from .base import BaseModel


class AlbumStatus(str, Enum):
    """Moderation states of an album."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Album(BaseModel):
    """
    Album owned by a single artist.

    Albums are edited while in DRAFT and submitted as a unit: submission moves
    the album and every song attached to it to PENDING.
    """

    __tablename__ = "albums"

    artist_user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning artist"
    )

    title = Column(
        String(500),
        nullable=False,
        comment="Album title"
    )
    description = Column(
        Text,
        comment="Release notes or description"
    )
    language = Column(
        String(10),
        comment="Primary language (ISO 639-1 code)"
    )
    release_type = Column(
        String(20),
        comment="Release type: album, ep, single"
    )
    cover_image_key = Column(
        String(500),
        comment="Object storage key of the cover image"
    )

    status = Column(
        String(20),
        nullable=False,
        default=AlbumStatus.DRAFT.value,
        comment="Moderation status"
    )
    reject_reason = Column(
        Text,
        comment="Reason given by the administrator on rejection"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT', 'PENDING', 'APPROVED', 'REJECTED')",
            name="valid_album_status"
        ),
        CheckConstraint(
            "length(title) > 0",
            name="album_title_not_empty"
        ),
        Index("idx_albums_artist_user_id", "artist_user_id"),
        Index("idx_albums_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Album(id={self.id}, title='{self.title}', status='{self.status}')>"
