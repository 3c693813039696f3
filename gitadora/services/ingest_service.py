"""
gitadora.services.ingest_service — Play Record Upload & Snapshot Writing
=========================================================================

Shared service for both upload endpoints (by user id and by GITADORA id).
Every upload follows the pattern:
  1. Resolve / create the player and apply profile changes
  2. Validate each raw record independently; collect per-record errors
  3. Insert valid records (never update — the journal is append-only)
  4. For every instrument touched, aggregate the player's records up to the
     upload time and write a SkillHistory snapshot
  5. Commit (done by the caller's session scope)

One bad record never sinks the batch: it is reported in ``errors`` and
skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictStr,
    ValidationError,
    field_validator,
)
from sqlalchemy import select
from sqlalchemy.orm import Session

from gitadora.database.models import (
    Difficulty,
    GameVersion,
    InstrumentType,
    SkillHistory,
    SkillRecord,
    User,
)
from gitadora.services.errors import NotFoundError, ValidationFailed
from gitadora.services.skill_service import compute_skill, history_dict

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input schemas
# ---------------------------------------------------------------------------
class SkillRecordInput(BaseModel):
    """One uploaded play, as sent by the score-scraping client."""

    model_config = ConfigDict(populate_by_name=True)

    song_title: StrictStr = Field(alias="songTitle")
    instrument_type: InstrumentType = Field(alias="instrumentType")
    difficulty: Difficulty
    achievement: StrictFloat = Field(ge=0, le=100, allow_inf_nan=False)
    skill_score: StrictFloat = Field(alias="skillScore", ge=0, allow_inf_nan=False)
    level: StrictFloat | None = Field(default=None, ge=0, allow_inf_nan=False)
    is_hot: StrictBool = Field(alias="isHot")
    played_at: datetime | None = Field(default=None, alias="playedAt")

    @field_validator("song_title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("songTitle is required")
        return value


class ProfileInfo(BaseModel):
    """Profile fields scraped alongside the records."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    title: str | None = None
    gitadora_id: str | None = Field(default=None, alias="gitadoraId")


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------
@dataclass
class IngestResult:
    user_id: int
    created: list[int] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    snapshots: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        body: dict[str, Any] = {
            "success": True,
            "userId": self.user_id,
            "created": len(self.created),
            "errorCount": len(self.errors),
            "snapshots": self.snapshots,
        }
        if self.errors:
            body["errors"] = self.errors
        return body


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def upload_time(now: datetime | None = None) -> datetime:
    """Batch timestamp: *now* (UTC) truncated to the minute.

    Every record and snapshot of one upload shares this value.
    """
    now = now or datetime.now(UTC)
    return _as_utc(now).replace(second=0, microsecond=0)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "record"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse_records(raw_records: list[Any]) -> tuple[list[SkillRecordInput], list[dict]]:
    """Validate each raw record on its own.

    Returns ``(valid, errors)`` where each error is
    ``{"index", "record", "error"}``.
    """
    valid: list[SkillRecordInput] = []
    errors: list[dict] = []
    for index, raw in enumerate(raw_records):
        try:
            valid.append(SkillRecordInput.model_validate(raw))
        except ValidationError as exc:
            message = _describe(exc)
            logger.warning("Skipping record %d: %s", index, message)
            errors.append({"index": index, "record": raw, "error": message})
    return valid, errors


def resolve_version(session: Session, name: str) -> GameVersion:
    version = session.scalar(select(GameVersion).where(GameVersion.name == name))
    if version is None:
        raise NotFoundError(f"Version not found: {name}")
    return version


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
def apply_profile(session: Session, user: User, profile: ProfileInfo) -> None:
    """Overwrite every profile key the client sent; empty values clear.

    A GITADORA id already owned by another player is left unchanged so
    the records in the same upload are still stored.
    """
    sent = profile.model_fields_set
    if "name" in sent:
        user.ingame_name = profile.name or None
    if "title" in sent:
        user.title = profile.title or None
    if "gitadora_id" in sent:
        if profile.gitadora_id and _gitadora_id_taken(session, profile.gitadora_id, user.id):
            logger.warning(
                "Profile update for user %s skipped gitadoraId %s: owned by another user",
                user.id, profile.gitadora_id,
            )
        else:
            user.gitadora_id = profile.gitadora_id or None


def _gitadora_id_taken(session: Session, gitadora_id: str, user_id: int) -> bool:
    owner = session.scalar(
        select(User.id).where(User.gitadora_id == gitadora_id, User.id != user_id)
    )
    return owner is not None


def get_or_create_by_gitadora_id(session: Session, profile: ProfileInfo) -> User:
    """Fetch the player owning ``profile.gitadora_id`` or create one.

    Non-empty name / title overwrite the stored ones; empty values are
    ignored.
    """
    if not profile.gitadora_id:
        raise ValidationFailed("gitadoraId is required in profileInfo")

    user = session.scalar(select(User).where(User.gitadora_id == profile.gitadora_id))
    if user is None:
        logger.info("Creating new user for gitadoraId %s", profile.gitadora_id)
        user = User(
            gitadora_id=profile.gitadora_id,
            name=profile.name or f"User-{profile.gitadora_id}",
            ingame_name=profile.name or None,
            title=profile.title or None,
        )
        session.add(user)
        session.flush()
        return user

    if profile.name:
        user.ingame_name = profile.name
    if profile.title:
        user.title = profile.title
    return user


# ---------------------------------------------------------------------------
# Core write path
# ---------------------------------------------------------------------------
def write_snapshot(
    session: Session,
    user_id: int,
    instrument_type: InstrumentType,
    recorded_at: datetime,
) -> SkillHistory:
    """Aggregate everything played up to *recorded_at* and store the totals."""
    summary = compute_skill(session, user_id, instrument_type, cutoff=recorded_at)
    snapshot = SkillHistory(
        user_id=user_id,
        total_skill=summary.total_skill,
        hot_skill=summary.hot_skill,
        other_skill=summary.other_skill,
        instrument_type=instrument_type,
        recorded_at=recorded_at,
    )
    session.add(snapshot)
    session.flush()
    logger.info(
        "Snapshot user=%s %s total=%.2f (hot=%.2f other=%.2f)",
        user_id, instrument_type, summary.total_skill,
        summary.hot_skill, summary.other_skill,
    )
    return snapshot


def upload_records(
    session: Session,
    user: User,
    raw_records: list[Any],
    *,
    version: str | None = None,
    now: datetime | None = None,
) -> IngestResult:
    """Insert valid records for *user* and snapshot each touched instrument."""
    batch_time = upload_time(now)
    result = IngestResult(user_id=user.id)

    valid, result.errors = parse_records(raw_records)
    logger.info(
        "Processing %d records for user %s (%d rejected)",
        len(raw_records), user.id, len(result.errors),
    )

    rows: list[SkillRecord] = []
    instruments: list[InstrumentType] = []
    for record in valid:
        rows.append(SkillRecord(
            user_id=user.id,
            song_title=record.song_title,
            instrument_type=record.instrument_type,
            difficulty=record.difficulty,
            achievement=record.achievement,
            skill_score=record.skill_score,
            level=record.level or 0,
            is_hot=record.is_hot,
            version=version,
            played_at=_as_utc(record.played_at) if record.played_at else batch_time,
        ))
        if record.instrument_type not in instruments:
            instruments.append(record.instrument_type)

    session.add_all(rows)
    session.flush()
    result.created = [row.id for row in rows]

    for instrument in instruments:
        snapshot = write_snapshot(session, user.id, instrument, batch_time)
        result.snapshots.append(history_dict(snapshot))

    return result


# ---------------------------------------------------------------------------
# Entry points used by the routes
# ---------------------------------------------------------------------------
def upload_for_user(
    session: Session,
    user_id: int,
    raw_records: list[Any],
    *,
    profile: ProfileInfo | None = None,
    version: str | None = None,
    now: datetime | None = None,
) -> IngestResult:
    """``POST /users/{id}/skill-records``."""
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User not found: {user_id}")
    if not raw_records:
        raise ValidationFailed("records array is required")

    if profile is not None:
        apply_profile(session, user, profile)

    return upload_records(session, user, raw_records, version=version, now=now)


def upload_by_gitadora_id(
    session: Session,
    raw_records: list[Any],
    *,
    profile: ProfileInfo | None,
    version_name: str,
    now: datetime | None = None,
) -> IngestResult:
    """``POST /skill-records`` — the player is identified by GITADORA id."""
    if profile is None or not profile.gitadora_id:
        raise ValidationFailed("gitadoraId is required in profileInfo")

    version = resolve_version(session, version_name)
    user = get_or_create_by_gitadora_id(session, profile)

    if not raw_records:
        logger.info("User %s updated, no records provided", user.id)
        return IngestResult(user_id=user.id)

    return upload_records(session, user, raw_records, version=version.name, now=now)
