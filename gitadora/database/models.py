"""
gitadora.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- users              — Player accounts (ADMIN / USER roles)
- game_versions      — GITADORA release windows records are uploaded under
- user_skill_records — Append-only play records, one row per recorded play
- user_skill_history — Skill snapshots written after each upload
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class InstrumentType(enum.StrEnum):
    """Game modes; each keeps a separate skill total."""
    GUITAR = "GUITAR"
    BASS = "BASS"
    DRUM = "DRUM"
    OPEN = "OPEN"


class Difficulty(enum.StrEnum):
    BASIC = "BASIC"
    ADVANCED = "ADVANCED"
    EXTREME = "EXTREME"
    MASTER = "MASTER"


class UserRole(enum.StrEnum):
    ADMIN = "ADMIN"
    USER = "USER"


# ---------------------------------------------------------------------------
# Users — one row per player account
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    ingame_name: Mapped[str | None] = mapped_column(String(100), default=None)
    title: Mapped[str | None] = mapped_column(String(200), default=None)
    gitadora_id: Mapped[str | None] = mapped_column(String(50), unique=True, default=None)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"), default=UserRole.USER
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    skill_records: Mapped[list[SkillRecord]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    skill_history: Mapped[list[SkillHistory]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        return self.ingame_name or self.name

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.name!r} role={self.role}>"


# ---------------------------------------------------------------------------
# GameVersion — release windows
# ---------------------------------------------------------------------------
class GameVersion(Base):
    __tablename__ = "game_versions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<GameVersion id={self.id} name={self.name!r}>"


# ---------------------------------------------------------------------------
# SkillRecord — append-only play journal
# ---------------------------------------------------------------------------
class SkillRecord(Base):
    """One recorded play.

    Rows are never updated; a better play is a new row with a later
    ``played_at``.  Aggregation picks one row per
    (song_title, instrument_type, difficulty, is_hot).
    """
    __tablename__ = "user_skill_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    song_title: Mapped[str] = mapped_column(String(300), nullable=False)
    instrument_type: Mapped[InstrumentType] = mapped_column(
        Enum(InstrumentType, name="instrument_type"), nullable=False
    )
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, name="difficulty"), nullable=False
    )
    achievement: Mapped[float] = mapped_column(Float, nullable=False)
    skill_score: Mapped[float] = mapped_column(Float, nullable=False)
    level: Mapped[float] = mapped_column(Float, default=0)
    is_hot: Mapped[bool] = mapped_column(Boolean, nullable=False)
    version: Mapped[str | None] = mapped_column(String(100), default=None)
    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="skill_records")

    __table_args__ = (
        Index("ix_skill_records_user_instrument_played", "user_id", "instrument_type", "played_at"),
        Index("ix_skill_records_song_title", "song_title"),
    )

    def __repr__(self) -> str:
        return (
            f"<SkillRecord id={self.id} user={self.user_id} "
            f"song={self.song_title!r} {self.instrument_type}/{self.difficulty}>"
        )


# ---------------------------------------------------------------------------
# SkillHistory — snapshots of computed totals
# ---------------------------------------------------------------------------
class SkillHistory(Base):
    __tablename__ = "user_skill_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    total_skill: Mapped[float] = mapped_column(Float, default=0)
    hot_skill: Mapped[float] = mapped_column(Float, default=0)
    other_skill: Mapped[float] = mapped_column(Float, default=0)
    instrument_type: Mapped[InstrumentType] = mapped_column(
        Enum(InstrumentType, name="instrument_type"), nullable=False
    )
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="skill_history")

    __table_args__ = (
        Index("ix_skill_history_user_instrument_recorded", "user_id", "instrument_type", "recorded_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<SkillHistory id={self.id} user={self.user_id} "
            f"{self.instrument_type} total={self.total_skill}>"
        )
