"""Admin audit log and dashboard statistics."""

import logging
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.admin_action import AdminAction
from src.models.album import Album, AlbumStatus
from src.models.complaint import Complaint, ComplaintStatus, DisputeStatus, SongDispute
from src.models.song import Song, SongStatus
from src.models.user import ArtistStatus, User

logger = logging.getLogger(__name__)


class AdminActionType(str, Enum):
    SONG_APPROVED = "SONG_APPROVED"
    SONG_REJECTED = "SONG_REJECTED"
    SONG_CREATED_FOR_ARTIST = "SONG_CREATED_FOR_ARTIST"
    SONG_UPDATED_BY_ADMIN = "SONG_UPDATED_BY_ADMIN"
    ALBUM_APPROVED = "ALBUM_APPROVED"
    ALBUM_REJECTED = "ALBUM_REJECTED"
    ALBUM_CREATED_FOR_ARTIST = "ALBUM_CREATED_FOR_ARTIST"
    ALBUM_SUBMITTED_FOR_ARTIST = "ALBUM_SUBMITTED_FOR_ARTIST"
    ALBUM_UPDATED_BY_ADMIN = "ALBUM_UPDATED_BY_ADMIN"
    COMPLAINT_RESOLVED = "COMPLAINT_RESOLVED"
    DISPUTE_RESOLVED = "DISPUTE_RESOLVED"
    PAYOUT_MARKED_PAID = "PAYOUT_MARKED_PAID"


class AuditLogService:
    """Writes and reads the append-only admin audit trail."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    def log(
        self,
        admin_id: uuid.UUID,
        action_type: AdminActionType,
        target_id: uuid.UUID,
        description: Optional[str] = None,
    ) -> AdminAction:
        """
        Stage an audit entry in the current unit of work.

        The entry is committed together with the change it describes.
        """
        entry = AdminAction(
            admin_id=admin_id,
            action_type=action_type.value,
            target_id=target_id,
            description=description,
        )
        self.db.add(entry)
        logger.info(f"Audit: {action_type.value} on {target_id} by admin {admin_id}")
        return entry

    async def list_entries(self, limit: int = 500) -> List[Dict[str, Any]]:
        """Most recent audit entries with the acting admin's identity."""
        query = (
            select(AdminAction, User.name, User.email)
            .join(User, User.id == AdminAction.admin_id)
            .order_by(AdminAction.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return [
            {
                "id": str(action.id),
                "action_type": action.action_type,
                "target_id": str(action.target_id),
                "description": action.description,
                "created_at": action.created_at,
                "admin_name": admin_name,
                "admin_email": admin_email,
            }
            for action, admin_name, admin_email in result.all()
        ]

    async def dashboard_stats(self) -> Dict[str, int]:
        """Counts of work waiting on administrators."""

        async def count(model, *conditions) -> int:
            result = await self.db.execute(
                select(func.count()).select_from(model).where(*conditions)
            )
            return result.scalar_one()

        return {
            "pending_artists": await count(User, User.artist_status == ArtistStatus.REQUESTED.value),
            "pending_songs": await count(Song, Song.status == SongStatus.PENDING.value),
            "pending_albums": await count(Album, Album.status == AlbumStatus.PENDING.value),
            "open_complaints": await count(Complaint, Complaint.status == ComplaintStatus.OPEN.value),
            "open_disputes": await count(SongDispute, SongDispute.status == DisputeStatus.OPEN.value),
        }
