"""Initial marketplace schema: catalog, moderation, streams and payouts

Revision ID: 001
Revises: 
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("uuid_generate_v4()"),
    )


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS \"uuid-ossp\"")

    # Users
    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("artist_status", sa.String(20)),
        *_timestamps(),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint(
            "artist_status IS NULL OR artist_status IN ('REQUESTED', 'APPROVED', 'REJECTED')",
            name="valid_artist_status",
        ),
    )
    op.create_index("idx_users_artist_status", "users", ["artist_status"])

    # Albums
    op.create_table(
        "albums",
        _id_column(),
        sa.Column("artist_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("language", sa.String(10)),
        sa.Column("release_type", sa.String(20)),
        sa.Column("cover_image_key", sa.String(500)),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("reject_reason", sa.Text),
        *_timestamps(),
        sa.ForeignKeyConstraint(["artist_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("status IN ('DRAFT', 'PENDING', 'APPROVED', 'REJECTED')", name="valid_album_status"),
        sa.CheckConstraint("length(title) > 0", name="album_title_not_empty"),
    )
    op.create_index("idx_albums_artist_user_id", "albums", ["artist_user_id"])
    op.create_index("idx_albums_status", "albums", ["status"])

    # Songs
    op.create_table(
        "songs",
        _id_column(),
        sa.Column("artist_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("album_id", postgresql.UUID(as_uuid=True)),
        sa.Column("track_number", sa.Integer),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("language", sa.String(10)),
        sa.Column("genre", sa.String(100)),
        sa.Column("lyrics", sa.Text),
        sa.Column("description", sa.Text),
        sa.Column("audio_key", sa.String(500)),
        sa.Column("audio_processed_key", sa.String(500)),
        sa.Column("cover_image_key", sa.String(500)),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("reject_reason", sa.Text),
        sa.Column("published_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["artist_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["album_id"], ["albums.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('DRAFT', 'PENDING', 'APPROVED', 'REJECTED', 'TAKEN_DOWN')",
            name="valid_song_status",
        ),
        sa.CheckConstraint("length(title) > 0", name="song_title_not_empty"),
        sa.CheckConstraint("track_number IS NULL OR track_number > 0", name="positive_track_number"),
    )
    op.create_index("idx_songs_artist_user_id", "songs", ["artist_user_id"])
    op.create_index("idx_songs_album_id", "songs", ["album_id"])
    op.create_index("idx_songs_status", "songs", ["status"])

    # Complaints
    op.create_table(
        "complaints",
        _id_column(),
        sa.Column("song_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reported_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        sa.Column("resolution_action", sa.String(20)),
        sa.Column("resolved_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reported_by"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("status IN ('OPEN', 'RESOLVED')", name="valid_complaint_status"),
        sa.CheckConstraint(
            "resolution_action IS NULL OR resolution_action IN ('RESTORE', 'REMOVE')",
            name="valid_complaint_action",
        ),
    )
    op.create_index("idx_complaints_song_id", "complaints", ["song_id"])
    op.create_index("idx_complaints_reported_by", "complaints", ["reported_by"])
    op.create_index("idx_complaints_status", "complaints", ["status"])

    # Ownership disputes
    op.create_table(
        "song_disputes",
        _id_column(),
        sa.Column("song_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("existing_song_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reason", sa.Text),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        sa.Column("winner_song_id", postgresql.UUID(as_uuid=True)),
        sa.Column("resolved_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["existing_song_id"], ["songs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["winner_song_id"], ["songs.id"], ondelete="SET NULL"),
        sa.CheckConstraint("status IN ('OPEN', 'RESOLVED')", name="valid_dispute_status"),
        sa.CheckConstraint("song_id <> existing_song_id", name="distinct_dispute_parties"),
    )
    op.create_index("idx_song_disputes_status", "song_disputes", ["status"])

    # Stream ledger (append-only)
    op.create_table(
        "streams",
        _id_column(),
        sa.Column("song_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("duration_seconds", sa.Integer, nullable=False),
        sa.Column("played_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.CheckConstraint("duration_seconds >= 0", name="non_negative_stream_duration"),
    )
    op.create_index("idx_streams_song_id", "streams", ["song_id"])
    op.create_index("idx_streams_played_at", "streams", ["played_at"])

    op.create_table(
        "recently_played",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("song_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("played_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["song_id"], ["songs.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "song_id", name="unique_recently_played_song"),
    )
    op.create_index("idx_recently_played_user_played_at", "recently_played", ["user_id", "played_at"])

    # Subscriptions and revenue
    op.create_table(
        "subscriptions",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id"),
        sa.CheckConstraint("status IN ('ACTIVE', 'CANCELLED', 'EXPIRED')", name="valid_subscription_status"),
    )

    op.create_table(
        "subscription_payments",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="INR"),
        sa.Column("provider_payment_id", sa.String(255)),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("provider_payment_id"),
        sa.CheckConstraint("amount >= 0", name="non_negative_payment_amount"),
    )
    op.create_index("idx_subscription_payments_paid_at", "subscription_payments", ["paid_at"])

    # Payouts
    op.create_table(
        "artist_earnings",
        _id_column(),
        sa.Column("artist_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("month", sa.String(7), nullable=False),
        sa.Column("total_streams", sa.Integer, nullable=False),
        sa.Column("amount", sa.Numeric(14, 4), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["artist_user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("artist_user_id", "month", name="unique_artist_month_earning"),
        sa.CheckConstraint("status IN ('PENDING', 'PAID')", name="valid_payout_status"),
        sa.CheckConstraint("total_streams >= 0", name="non_negative_total_streams"),
    )
    op.create_index("idx_artist_earnings_month", "artist_earnings", ["month"])
    op.create_index("idx_artist_earnings_status", "artist_earnings", ["status"])

    # Admin audit trail
    op.create_table(
        "admin_actions",
        _id_column(),
        sa.Column("admin_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("action_type", sa.String(50), nullable=False),
        sa.Column("target_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["admin_id"], ["users.id"], ondelete="RESTRICT"),
    )
    op.create_index("idx_admin_actions_created_at", "admin_actions", ["created_at"])
    op.create_index("idx_admin_actions_target_id", "admin_actions", ["target_id"])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table("admin_actions")
    op.drop_table("artist_earnings")
    op.drop_table("subscription_payments")
    op.drop_table("subscriptions")
    op.drop_table("recently_played")
    op.drop_table("streams")
    op.drop_table("song_disputes")
    op.drop_table("complaints")
    op.drop_table("songs")
    op.drop_table("albums")
    op.drop_table("users")
