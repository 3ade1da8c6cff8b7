"""create players and player_stats tables

Revision ID: 4c7e2a9d1b30
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4c7e2a9d1b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.String(length=20), primary_key=True),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("shard", sa.String(length=20), nullable=False, server_default="steam"),
        sa.Column("last_matches", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("last_refreshed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_players_id", "players", ["id"])
    op.create_index("ix_players_account_id", "players", ["account_id"], unique=True)

    op.create_table(
        "player_stats",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "player_id",
            sa.String(length=20),
            sa.ForeignKey("players.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("period", sa.String(length=8), nullable=False),
        sa.Column("mode", sa.String(length=8), nullable=False),
        sa.Column("shard", sa.String(length=20), nullable=False),
        sa.Column("kills", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("deaths", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("kd_ratio", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("win_rate", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("damage_dealt", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("survival_time", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("wins", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("matches_counted", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("computed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "player_id", "period", "mode", "shard", name="player_stats_composite"
        ),
    )
    # the stats reaper deletes by expires_at
    op.create_index("ix_player_stats_expires_at", "player_stats", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_player_stats_expires_at", table_name="player_stats")
    op.drop_table("player_stats")
    op.drop_index("ix_players_account_id", table_name="players")
    op.drop_index("ix_players_id", table_name="players")
    op.drop_table("players")
