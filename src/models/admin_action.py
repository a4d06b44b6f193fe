"""Append-only audit trail of administrative actions."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, UUID

from src.core.database import Base
from .base import utcnow


class AdminAction(Base):
    """Audit entry: who did what to which resource."""

    __tablename__ = "admin_actions"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    admin_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Acting administrator"
    )
    action_type = Column(
        String(50),
        nullable=False,
        comment="Action tag, e.g. SONG_APPROVED"
    )
    target_id = Column(
        UUID(as_uuid=True),
        nullable=False,
        comment="Affected resource"
    )
    description = Column(
        Text,
        comment="Human readable description"
    )
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_admin_actions_created_at", "created_at"),
        Index("idx_admin_actions_target_id", "target_id"),
    )

    def __repr__(self) -> str:
        return f"<AdminAction(action_type='{self.action_type}', target_id={self.target_id})>"
