"""
gitadora.engine.skill — Skill Aggregation Pipeline
===================================================

Pure calculation over play records that are already fetched.
No DB I/O inside the engine.

Pipeline stages:
  SkillEntry[] → Deduplicate → Partition (hot / other) → Rank → Top 25 → SkillSummary

The caller pre-filters entries to one player and one instrument (and, when
looking at a past snapshot, to ``played_at <= cutoff``).  Nothing here
re-checks that.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from gitadora.constants import SLOT_LIMIT
from gitadora.database.models import Difficulty, InstrumentType

if TYPE_CHECKING:
    from gitadora.database.models import SkillRecord

logger = logging.getLogger(__name__)

__all__ = [
    "DedupKey",
    "SkillEntry",
    "SkillSummary",
    "aggregate",
    "dedup_key",
    "deduplicate",
    "top_slots",
]

DedupKey = tuple[str, InstrumentType, Difficulty, bool]


# ---------------------------------------------------------------------------
# SkillEntry — one play, detached from the ORM session
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class SkillEntry:
    """A single play record as seen by the aggregator."""

    song_title: str
    instrument_type: InstrumentType
    difficulty: Difficulty
    achievement: float
    skill_score: float
    is_hot: bool
    played_at: datetime | None = None
    id: int | None = None

    @classmethod
    def from_row(cls, row: SkillRecord) -> SkillEntry:
        return cls(
            song_title=row.song_title,
            instrument_type=row.instrument_type,
            difficulty=row.difficulty,
            achievement=row.achievement,
            skill_score=row.skill_score,
            is_hot=row.is_hot,
            played_at=row.played_at,
            id=row.id,
        )


# ---------------------------------------------------------------------------
# SkillSummary — output of the pipeline
# ---------------------------------------------------------------------------
@dataclass
class SkillSummary:
    """Aggregated skill for one player and one instrument."""

    total_skill: float = 0
    hot_skill: float = 0
    other_skill: float = 0
    hot_records: list[SkillEntry] = field(default_factory=list)
    other_records: list[SkillEntry] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Stage 1: Deduplication
# ---------------------------------------------------------------------------
def dedup_key(entry: SkillEntry) -> DedupKey:
    return (entry.song_title, entry.instrument_type, entry.difficulty, entry.is_hot)


def deduplicate(entries: Iterable[SkillEntry]) -> list[SkillEntry]:
    """Keep one entry per :func:`dedup_key`.

    The first entry seen for a key is kept unless a later one has a
    strictly greater achievement.  Equal achievements never replace, so
    feeding entries newest-first keeps the newest of equally good plays.
    The result preserves the order in which keys were first seen.
    """
    best: dict[DedupKey, SkillEntry] = {}
    for entry in entries:
        key = dedup_key(entry)
        kept = best.get(key)
        if kept is None or entry.achievement > kept.achievement:
            best[key] = entry
    return list(best.values())


# ---------------------------------------------------------------------------
# Stages 3–4: Rank + truncate
# ---------------------------------------------------------------------------
def top_slots(entries: Iterable[SkillEntry], limit: int = SLOT_LIMIT) -> list[SkillEntry]:
    """Highest *limit* entries by skill score, descending.

    ``sorted`` is stable with ``reverse=True``, so equal scores keep their
    input order.
    """
    ranked = sorted(entries, key=lambda e: e.skill_score, reverse=True)
    return ranked[:limit]


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------
def aggregate(
    entries: Iterable[SkillEntry],
    cutoff: datetime | None = None,
    *,
    limit: int = SLOT_LIMIT,
) -> SkillSummary:
    """Run the full skill pipeline.

    This is a PURE function.  *cutoff* is informational only: entries must
    already be restricted to ``played_at <= cutoff`` by the caller.

    Parameters
    ----------
    entries : play records for one player and one instrument
    cutoff : snapshot time the entries were filtered to, if any
    limit : scoring slots per pool (25 in the game)
    """
    # 1. Deduplicate
    latest_best = deduplicate(entries)

    # 2. Partition
    hot = [e for e in latest_best if e.is_hot]
    other = [e for e in latest_best if not e.is_hot]

    # 3–4. Rank and keep the scoring slots
    hot_records = top_slots(hot, limit)
    other_records = top_slots(other, limit)

    # 5. Sum
    hot_skill = sum(e.skill_score for e in hot_records)
    other_skill = sum(e.skill_score for e in other_records)

    logger.debug(
        "Aggregated %d unique slots (%d hot, %d other) cutoff=%s",
        len(latest_best), len(hot), len(other), cutoff,
    )

    return SkillSummary(
        total_skill=hot_skill + other_skill,
        hot_skill=hot_skill,
        other_skill=other_skill,
        hot_records=hot_records,
        other_records=other_records,
    )
