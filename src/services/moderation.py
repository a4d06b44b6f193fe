"""Song and album moderation state machine.

There are two kinds of transitions:

* workflow transitions (``submit_for_review``) follow the normal
  DRAFT -> PENDING -> APPROVED/REJECTED path and are guarded by the
  current status;
* administrative overrides (``admin_set_status``) move any song or album
  to APPROVED or REJECTED regardless of where it is.

Complaints use ``take_down`` which suspends a song unconditionally.
"""

import logging
from typing import Dict, FrozenSet, Optional, Union

from src.models.album import Album, AlbumStatus
from src.models.base import utcnow
from src.models.song import Song, SongStatus
from src.services.exceptions import StateError, ValidationError

logger = logging.getLogger(__name__)

Moderatable = Union[Song, Album]

SONG_WORKFLOW: Dict[SongStatus, FrozenSet[SongStatus]] = {
    SongStatus.DRAFT: frozenset({SongStatus.PENDING}),
    SongStatus.REJECTED: frozenset({SongStatus.PENDING}),
    SongStatus.PENDING: frozenset({SongStatus.APPROVED, SongStatus.REJECTED}),
    SongStatus.APPROVED: frozenset({SongStatus.TAKEN_DOWN}),
    SongStatus.TAKEN_DOWN: frozenset({SongStatus.APPROVED, SongStatus.REJECTED}),
}

ALBUM_WORKFLOW: Dict[AlbumStatus, FrozenSet[AlbumStatus]] = {
    AlbumStatus.DRAFT: frozenset({AlbumStatus.PENDING}),
    AlbumStatus.REJECTED: frozenset({AlbumStatus.PENDING}),
    AlbumStatus.PENDING: frozenset({AlbumStatus.APPROVED, AlbumStatus.REJECTED}),
    AlbumStatus.APPROVED: frozenset(),
}

OVERRIDE_TARGETS = frozenset({"APPROVED", "REJECTED"})


class ModerationStateMachine:
    """Applies status transitions to songs and albums."""

    @staticmethod
    def can_transition(item: Moderatable, target: str) -> bool:
        """Check whether ``target`` is a normal workflow step from the current status."""
        if isinstance(item, Song):
            allowed = SONG_WORKFLOW.get(SongStatus(item.status), frozenset())
            return SongStatus(target) in allowed
        allowed = ALBUM_WORKFLOW.get(AlbumStatus(item.status), frozenset())
        return AlbumStatus(target) in allowed

    @classmethod
    def submit_for_review(cls, item: Moderatable) -> str:
        """
        Workflow transition to PENDING.

        Raises StateError unless the item is in DRAFT (or REJECTED, for a
        resubmission). Returns the previous status.
        """
        previous = item.status
        if not cls.can_transition(item, "PENDING"):
            raise StateError(
                f"Cannot submit {_kind(item)} in status {previous} for review",
                code="NOT_SUBMITTABLE",
            )
        item.status = "PENDING"
        logger.debug(f"{_kind(item)} {item.id}: {previous} -> PENDING")
        return previous

    @staticmethod
    def admin_set_status(item: Moderatable, status: str, reason: Optional[str] = None) -> str:
        """
        Administrative override to APPROVED or REJECTED from any status.

        Approving a song stamps ``published_at``; rejecting records the
        reason. Returns the previous status.
        """
        if status not in OVERRIDE_TARGETS:
            raise ValidationError(
                f"Administrative override cannot set status {status}",
                code="INVALID_OVERRIDE_STATUS",
            )

        previous = item.status
        item.status = status
        if status == "APPROVED":
            item.reject_reason = None
            if isinstance(item, Song):
                item.published_at = utcnow()
        else:
            item.reject_reason = reason

        logger.debug(f"{_kind(item)} {item.id}: {previous} -> {status} (admin override)")
        return previous

    @staticmethod
    def take_down(song: Song) -> str:
        """Suspend a song pending complaint review. Returns the previous status."""
        previous = song.status
        song.status = SongStatus.TAKEN_DOWN.value
        logger.debug(f"song {song.id}: {previous} -> TAKEN_DOWN")
        return previous


def _kind(item: Moderatable) -> str:
    return "song" if isinstance(item, Song) else "album"
