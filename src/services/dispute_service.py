"""Dispute handling for songs claiming the same rights."""

import logging
import uuid
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from src.core.database import transaction
from src.models.base import utcnow
from src.models.complaint import DisputeStatus, SongDispute
from src.models.song import Song, SongStatus
from src.services.audit_service import AdminActionType, AuditLogService
from src.services.events import EventPublisher, EventType
from src.services.exceptions import NotFoundError, StateError, ValidationError
from src.services.moderation import ModerationStateMachine

logger = logging.getLogger(__name__)


class DisputeService:
    """Resolves ownership disputes by approving one song and rejecting the other."""

    def __init__(self, db_session: AsyncSession, event_publisher: EventPublisher = None):
        self.db = db_session
        self.events = event_publisher
        self.audit = AuditLogService(db_session)

    async def get_dispute(self, dispute_id: uuid.UUID) -> SongDispute:
        dispute = await self.db.get(SongDispute, dispute_id)
        if not dispute:
            raise NotFoundError(f"Dispute {dispute_id} not found")
        return dispute

    async def resolve_dispute(
        self,
        dispute_id: uuid.UUID,
        winner_song_id: uuid.UUID,
        admin_id: uuid.UUID = None,
    ) -> SongDispute:
        """
        Approve the winner, reject the other party and close the dispute.

        Raises:
            NotFoundError: dispute or one of its songs missing
            ValidationError: winner is not one of the two disputed songs
            StateError: dispute already resolved (resolution is irreversible)
        """
        dispute = await self.get_dispute(dispute_id)

        if dispute.status == DisputeStatus.RESOLVED.value:
            raise StateError(
                f"Dispute {dispute_id} is already resolved",
                code="DISPUTE_ALREADY_RESOLVED",
            )

        if winner_song_id not in dispute.party_ids:
            raise ValidationError(
                "Winner must be one of the disputed songs",
                code="WINNER_NOT_IN_DISPUTE",
            )

        loser_song_id = (
            dispute.existing_song_id
            if dispute.song_id == winner_song_id
            else dispute.song_id
        )

        winner = await self.db.get(Song, winner_song_id)
        loser = await self.db.get(Song, loser_song_id)
        if not winner or not loser:
            raise NotFoundError(f"Songs referenced by dispute {dispute_id} no longer exist")

        async with transaction(self.db):
            ModerationStateMachine.admin_set_status(winner, SongStatus.APPROVED.value)
            ModerationStateMachine.admin_set_status(
                loser, SongStatus.REJECTED.value, "Rejected in ownership dispute"
            )
            dispute.status = DisputeStatus.RESOLVED.value
            dispute.winner_song_id = winner_song_id
            dispute.resolved_at = utcnow()
            if admin_id:
                self.audit.log(
                    admin_id,
                    AdminActionType.DISPUTE_RESOLVED,
                    dispute.id,
                    f"Dispute resolved: song {winner_song_id} kept, song {loser_song_id} rejected",
                )

        logger.info(f"Dispute {dispute.id} resolved in favour of song {winner_song_id}")
        if self.events:
            await self.events.publish(
                EventType.DISPUTE_RESOLVED,
                "dispute",
                dispute.id,
                {"winner_song_id": str(winner_song_id), "loser_song_id": str(loser_song_id)},
                admin_id,
            )
        return dispute

    async def list_open_disputes(self) -> List[Dict[str, Any]]:
        """Open disputes with the titles of both songs."""
        filed_song = aliased(Song)
        existing_song = aliased(Song)
        query = (
            select(SongDispute, filed_song.title, existing_song.title)
            .outerjoin(filed_song, filed_song.id == SongDispute.song_id)
            .outerjoin(existing_song, existing_song.id == SongDispute.existing_song_id)
            .where(SongDispute.status == DisputeStatus.OPEN.value)
            .order_by(SongDispute.created_at)
        )
        result = await self.db.execute(query)
        items = []
        for dispute, song_title, existing_song_title in result.all():
            item = dispute.to_dict()
            item["song_title"] = song_title
            item["existing_song_title"] = existing_song_title
            items.append(item)
        return items
