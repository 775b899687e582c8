"""Initial migration: users, tracks and track votes

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("remaining_votes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_vote_refresh", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("remaining_votes >= 0", name="ck_remaining_votes_non_negative"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # Tracks table
    op.create_table(
        "tracks",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=False),
        sa.Column("genre", sa.String(100), nullable=True),
        sa.Column("popularity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("album_art", sa.String(500), nullable=True),
        sa.Column("released_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("votes", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("votes >= 0", name="ck_track_votes_non_negative"),
    )
    op.create_index(op.f("ix_tracks_genre"), "tracks", ["genre"])
    op.create_index(op.f("ix_tracks_released_at"), "tracks", ["released_at"])

    # Track votes: one row per active vote
    op.create_table(
        "track_votes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "track_id",
            sa.String(64),
            sa.ForeignKey("tracks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "track_id", name="uq_track_vote"),
    )
    op.create_index("ix_track_votes_user_id", "track_votes", ["user_id"])
    op.create_index("ix_track_votes_track_id", "track_votes", ["track_id"])


def downgrade() -> None:
    op.drop_table("track_votes")
    op.drop_index(op.f("ix_tracks_released_at"), table_name="tracks")
    op.drop_index(op.f("ix_tracks_genre"), table_name="tracks")
    op.drop_table("tracks")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
