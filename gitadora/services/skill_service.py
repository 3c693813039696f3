"""
gitadora.services.skill_service — Skill Lookup for One Player
==============================================================

Fetches a player's play records for one instrument, runs the aggregation
engine, and attaches the stored snapshot history.

Records are fetched newest first.  The engine keeps the first entry per
slot unless a later one has a strictly better achievement, so among equally
good plays the newest one is shown.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from gitadora.constants import HISTORY_LIMIT
from gitadora.database.models import InstrumentType, SkillHistory, SkillRecord
from gitadora.engine.skill import SkillEntry, SkillSummary, aggregate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------
def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def entry_dict(entry: SkillEntry) -> dict:
    return {
        "id": entry.id,
        "songTitle": entry.song_title,
        "instrumentType": str(entry.instrument_type),
        "difficulty": str(entry.difficulty),
        "achievement": entry.achievement,
        "skillScore": entry.skill_score,
        "isHot": entry.is_hot,
        "playedAt": _iso(entry.played_at),
    }


def history_dict(row: SkillHistory) -> dict:
    return {
        "id": row.id,
        "totalSkill": row.total_skill,
        "hotSkill": row.hot_skill,
        "otherSkill": row.other_skill,
        "instrumentType": str(row.instrument_type),
        "recordedAt": _iso(row.recorded_at),
    }


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def resolve_cutoff(session: Session, user_id: int, history_id: int | None) -> datetime | None:
    """``recorded_at`` of snapshot *history_id* if it belongs to *user_id*.

    Unknown snapshots and snapshots of other players resolve to ``None``
    (no cutoff) rather than an error.
    """
    if history_id is None:
        return None
    snapshot = session.get(SkillHistory, history_id)
    if snapshot is None or snapshot.user_id != user_id:
        logger.debug("History %s not usable as cutoff for user %s", history_id, user_id)
        return None
    return snapshot.recorded_at


def fetch_entries(
    session: Session,
    user_id: int,
    instrument_type: InstrumentType,
    *,
    version: str | None = None,
    cutoff: datetime | None = None,
) -> list[SkillEntry]:
    """Play records for one player + instrument, newest first."""
    query = select(SkillRecord).where(
        SkillRecord.user_id == user_id,
        SkillRecord.instrument_type == instrument_type,
    )
    if version:
        query = query.where(SkillRecord.version == version)
    if cutoff is not None:
        query = query.where(SkillRecord.played_at <= cutoff)
    query = query.order_by(SkillRecord.played_at.desc(), SkillRecord.id.desc())

    return [SkillEntry.from_row(row) for row in session.scalars(query)]


def fetch_history(
    session: Session,
    user_id: int,
    instrument_type: InstrumentType,
    limit: int = HISTORY_LIMIT,
) -> list[SkillHistory]:
    return list(session.scalars(
        select(SkillHistory)
        .where(
            SkillHistory.user_id == user_id,
            SkillHistory.instrument_type == instrument_type,
        )
        .order_by(SkillHistory.recorded_at.desc(), SkillHistory.id.desc())
        .limit(limit)
    ))


def compute_skill(
    session: Session,
    user_id: int,
    instrument_type: InstrumentType,
    *,
    version: str | None = None,
    cutoff: datetime | None = None,
) -> SkillSummary:
    entries = fetch_entries(
        session, user_id, instrument_type, version=version, cutoff=cutoff,
    )
    return aggregate(entries, cutoff)


def get_user_skill(
    session: Session,
    user_id: int,
    instrument_type: InstrumentType,
    *,
    history_id: int | None = None,
    version: str | None = None,
) -> dict:
    """Full skill payload for ``GET /users/{id}/skill``."""
    cutoff = resolve_cutoff(session, user_id, history_id)
    summary = compute_skill(
        session, user_id, instrument_type, version=version, cutoff=cutoff,
    )
    history = fetch_history(session, user_id, instrument_type)

    return {
        "totalSkill": summary.total_skill,
        "hotSkill": summary.hot_skill,
        "otherSkill": summary.other_skill,
        "instrumentType": str(instrument_type),
        "hotRecords": [entry_dict(e) for e in summary.hot_records],
        "otherRecords": [entry_dict(e) for e in summary.other_records],
        "history": [history_dict(h) for h in history],
    }
