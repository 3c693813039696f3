"""Create users, game_versions, user_skill_records and user_skill_history

Revision ID: 5c1e7a2b9d40
Revises:
Create Date: 2026-10-17 11:40:12.118204

"""
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5c1e7a2b9d40'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

user_role = postgresql.ENUM("ADMIN", "USER", name="user_role", create_type=False)
instrument_type = postgresql.ENUM(
    "GUITAR", "BASS", "DRUM", "OPEN", name="instrument_type", create_type=False,
)
difficulty = postgresql.ENUM(
    "BASIC", "ADVANCED", "EXTREME", "MASTER", name="difficulty", create_type=False,
)


def upgrade() -> None:
    """Create the skill tracking schema."""
    bind = op.get_bind()
    user_role.create(bind, checkfirst=True)
    instrument_type.create(bind, checkfirst=True)
    difficulty.create(bind, checkfirst=True)

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("ingame_name", sa.String(100), nullable=True),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("gitadora_id", sa.String(50), nullable=True, unique=True),
        sa.Column("role", user_role, nullable=False, server_default="USER"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # --- game_versions ---
    op.create_table(
        "game_versions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # --- user_skill_records (append-only) ---
    op.create_table(
        "user_skill_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("song_title", sa.String(300), nullable=False),
        sa.Column("instrument_type", instrument_type, nullable=False),
        sa.Column("difficulty", difficulty, nullable=False),
        sa.Column("achievement", sa.Float, nullable=False),
        sa.Column("skill_score", sa.Float, nullable=False),
        sa.Column("level", sa.Float, nullable=False, server_default="0"),
        sa.Column("is_hot", sa.Boolean, nullable=False),
        sa.Column("version", sa.String(100), nullable=True),
        sa.Column("played_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_skill_records_user_instrument_played", "user_skill_records",
        ["user_id", "instrument_type", "played_at"],
    )
    op.create_index(
        "ix_skill_records_song_title", "user_skill_records", ["song_title"],
    )

    # --- user_skill_history ---
    op.create_table(
        "user_skill_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("total_skill", sa.Float, nullable=False, server_default="0"),
        sa.Column("hot_skill", sa.Float, nullable=False, server_default="0"),
        sa.Column("other_skill", sa.Float, nullable=False, server_default="0"),
        sa.Column("instrument_type", instrument_type, nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_skill_history_user_instrument_recorded", "user_skill_history",
        ["user_id", "instrument_type", "recorded_at"],
    )


def downgrade() -> None:
    """Drop the skill tracking schema."""
    op.drop_index("ix_skill_history_user_instrument_recorded", table_name="user_skill_history")
    op.drop_table("user_skill_history")
    op.drop_index("ix_skill_records_song_title", table_name="user_skill_records")
    op.drop_index("ix_skill_records_user_instrument_played", table_name="user_skill_records")
    op.drop_table("user_skill_records")
    op.drop_table("game_versions")
    op.drop_table("users")

    bind = op.get_bind()
    difficulty.drop(bind, checkfirst=True)
    instrument_type.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)
