"""Complaint handling: listener reports and their administrative resolution."""

import logging
import uuid
from typing import Any, Dict, List, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from src.core.database import transaction
from src.models.base import utcnow
from src.models.complaint import Complaint, ComplaintAction, ComplaintStatus
from src.models.song import Song, SongStatus
from src.models.user import User
from src.services.audit_service import AdminActionType, AuditLogService
from src.services.events import EventPublisher, EventType
from src.services.exceptions import NotFoundError, ValidationError
from src.services.moderation import ModerationStateMachine

logger = logging.getLogger(__name__)

RESOLUTION_STATUS = {
    ComplaintAction.RESTORE: SongStatus.APPROVED.value,
    ComplaintAction.REMOVE: SongStatus.REJECTED.value,
}


class ComplaintService:
    """
    Business logic for song complaints.

    Filing a complaint suspends the song immediately, before any review.
    An administrator then restores the song or removes it for good.
    """

    def __init__(self, db_session: AsyncSession, event_publisher: EventPublisher = None):
        self.db = db_session
        self.events = event_publisher
        self.audit = AuditLogService(db_session)

    async def get_complaint(self, complaint_id: uuid.UUID) -> Complaint:
        complaint = await self.db.get(Complaint, complaint_id)
        if not complaint:
            raise NotFoundError(f"Complaint {complaint_id} not found")
        return complaint

    async def create_complaint(
        self,
        song_id: uuid.UUID,
        user_id: uuid.UUID,
        reason: str,
    ) -> Complaint:
        """
        Record an OPEN complaint, then take the song down.

        The song is suspended whatever its current status and whatever the
        eventual outcome of the complaint.
        """
        if not reason or not reason.strip():
            raise ValidationError("Complaint reason is required", code="REASON_REQUIRED")

        song = await self.db.get(Song, song_id)
        if not song:
            raise NotFoundError(f"Song {song_id} not found")

        async with transaction(self.db):
            complaint = Complaint(
                song_id=song_id,
                reported_by=user_id,
                reason=reason.strip(),
                status=ComplaintStatus.OPEN.value,
            )
            self.db.add(complaint)
            await self.db.flush()
            previous = ModerationStateMachine.take_down(song)

        logger.warning(f"Song {song_id} taken down after complaint {complaint.id} (was {previous})")
        if self.events:
            await self.events.publish(
                EventType.COMPLAINT_FILED,
                "complaint",
                complaint.id,
                {"song_id": str(song_id)},
                user_id,
            )
            await self.events.publish_song_status_changed(song_id, song.status, user_id)
        return complaint

    async def resolve_complaint(
        self,
        complaint_id: uuid.UUID,
        action: Union[ComplaintAction, str],
        admin_id: uuid.UUID = None,
    ) -> Complaint:
        """
        Resolve a complaint with RESTORE (song -> APPROVED) or REMOVE (song -> REJECTED).

        Resolving again re-applies the song transition. Any other action
        fails with ValidationError and changes nothing.
        """
        try:
            action = ComplaintAction(action)
        except ValueError:
            raise ValidationError(
                f"Unknown complaint action '{action}'. Must be RESTORE or REMOVE",
                code="INVALID_COMPLAINT_ACTION",
            )

        complaint = await self.get_complaint(complaint_id)
        song = await self.db.get(Song, complaint.song_id)
        if not song:
            raise NotFoundError(f"Song {complaint.song_id} not found")

        async with transaction(self.db):
            ModerationStateMachine.admin_set_status(song, RESOLUTION_STATUS[action])
            complaint.status = ComplaintStatus.RESOLVED.value
            complaint.resolution_action = action.value
            complaint.resolved_at = utcnow()
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.COMPLAINT_RESOLVED,
                    complaint.id,
                    f"Complaint resolved with {action.value}; song {song.id} is now {song.status}",
                )

        logger.info(f"Complaint {complaint.id} resolved with {action.value}")
        if self.events:
            await self.events.publish(
                EventType.COMPLAINT_RESOLVED,
                "complaint",
                complaint.id,
                {"action": action.value, "song_id": str(song.id), "song_status": song.status},
                admin_id,
            )
        return complaint

    async def list_user_complaints(self, user_id: uuid.UUID) -> List[Dict[str, Any]]:
        """Complaints filed by a user, newest first."""
        artist = aliased(User)
        query = (
            select(Complaint, Song.title, artist.name)
            .join(Song, Song.id == Complaint.song_id)
            .join(artist, artist.id == Song.artist_user_id)
            .where(Complaint.reported_by == user_id)
            .order_by(Complaint.created_at.desc())
        )
        result = await self.db.execute(query)
        return [
            {
                "id": str(complaint.id),
                "reason": complaint.reason,
                "status": complaint.status,
                "created_at": complaint.created_at,
                "song_id": str(complaint.song_id),
                "song_title": song_title,
                "artist_name": artist_name,
            }
            for complaint, song_title, artist_name in result.all()
        ]

    async def list_open_complaints(self) -> List[Dict[str, Any]]:
        """Open complaints with song title and reporter name."""
        query = (
            select(Complaint, Song.title, User.name)
            .join(Song, Song.id == Complaint.song_id)
            .join(User, User.id == Complaint.reported_by)
            .where(Complaint.status == ComplaintStatus.OPEN.value)
            .order_by(Complaint.created_at)
        )
        result = await self.db.execute(query)
        items = []
        for complaint, song_title, reporter in result.all():
            item = complaint.to_dict()
            item["song_title"] = song_title
            item["reporter"] = reporter
            items.append(item)
        return items
