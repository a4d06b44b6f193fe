"""Database models for the music marketplace service."""

from .base import BaseModel, TimestampMixin
from .user import User, ArtistStatus
from .album import Album, AlbumStatus
from .song import Song, SongStatus
from .complaint import (
    Complaint,
    ComplaintAction,
    ComplaintStatus,
    SongDispute,
    DisputeStatus,
)
from .stream import Stream, RecentlyPlayed
from .payout import ArtistEarning, PayoutStatus
from .subscription import Subscription, SubscriptionPayment, SubscriptionStatus
from .admin_action import AdminAction

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "User",
    "ArtistStatus",
    "Album",
    "AlbumStatus",
    "Song",
    "SongStatus",
    "Complaint",
    "ComplaintAction",
    "ComplaintStatus",
    "SongDispute",
    "DisputeStatus",
    "Stream",
    "RecentlyPlayed",
    "ArtistEarning",
    "PayoutStatus",
    "Subscription",
    "SubscriptionPayment",
    "SubscriptionStatus",
    "AdminAction",
]
