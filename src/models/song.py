"""Song model, the core entity of the content catalog."""

from enum import Enum

from sqlalchemy import (
    CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, UUID
)

from .base import BaseModel


class SongStatus(str, Enum):
    """Moderation states of a song."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    TAKEN_DOWN = "TAKEN_DOWN"


class Song(BaseModel):
    """
    Song uploaded by an artist.

    Only APPROVED songs are streamable. A song attached to an album must
    belong to an album owned by the same artist.
    """

    __tablename__ = "songs"

    artist_user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning artist"
    )
    album_id = Column(
        UUID(as_uuid=True),
        ForeignKey("albums.id", ondelete="SET NULL"),
        nullable=True,
        comment="Album this song is released on, if any"
    )
    track_number = Column(
        Integer,
        comment="Position on the album"
    )

    # Metadata
    title = Column(
        String(500),
        nullable=False,
        comment="Song title"
    )
    language = Column(
        String(10),
        comment="Primary language (ISO 639-1 code)"
    )
    genre = Column(
        String(100),
        comment="Primary musical genre"
    )
    lyrics = Column(
        Text,
        comment="Full lyrics"
    )
    description = Column(
        Text,
        comment="Description shown to listeners"
    )

    # Media (opaque object storage keys)
    audio_key = Column(
        String(500),
        comment="Object storage key of the uploaded audio"
    )
    audio_processed_key = Column(
        String(500),
        comment="Object storage key of the transcoded audio served to listeners"
    )
    cover_image_key = Column(
        String(500),
        comment="Object storage key of the cover image"
    )

    # Moderation
    status = Column(
        String(20),
        nullable=False,
        default=SongStatus.DRAFT.value,
        comment="Moderation status"
    )
    reject_reason = Column(
        Text,
        comment="Reason given by the administrator on rejection"
    )
    published_at = Column(
        DateTime(timezone=True),
        comment="Set when the song is approved"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT', 'PENDING', 'APPROVED', 'REJECTED', 'TAKEN_DOWN')",
            name="valid_song_status"
        ),
        CheckConstraint(
            "length(title) > 0",
            name="song_title_not_empty"
        ),
        CheckConstraint(
            "track_number IS NULL OR track_number > 0",
            name="positive_track_number"
        ),
        Index("idx_songs_artist_user_id", "artist_user_id"),
        Index("idx_songs_album_id", "album_id"),
        Index("idx_songs_status", "status"),
    )

    @property
    def stream_key(self):
        """Key served to listeners, preferring the transcoded file."""
        return self.audio_processed_key or self.audio_key

    def __repr__(self) -> str:
        return f"<Song(id={self.id}, title='{self.title}', status='{self.status}')>"
