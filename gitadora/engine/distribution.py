"""
gitadora.engine.distribution — Per-Song Score Distribution
===========================================================

How every player did on one song: best play per player, instrument and
difficulty, grouped into averages, scatter points and a 10-bin
achievement histogram.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from gitadora.database.models import Difficulty, InstrumentType

__all__ = ["HISTOGRAM_BINS", "PlayerPlay", "best_per_player", "build_distribution"]

HISTOGRAM_BINS = 10


@dataclass(frozen=True, slots=True)
class PlayerPlay:
    user_id: int
    username: str
    instrument_type: InstrumentType
    difficulty: Difficulty
    achievement: float
    skill_score: float


def best_per_player(plays: Iterable[PlayerPlay]) -> list[PlayerPlay]:
    """One play per (user, instrument, difficulty); higher achievement wins."""
    best: dict[tuple[int, InstrumentType, Difficulty], PlayerPlay] = {}
    for play in plays:
        key = (play.user_id, play.instrument_type, play.difficulty)
        kept = best.get(key)
        if kept is None or play.achievement > kept.achievement:
            best[key] = play
    return list(best.values())


def _histogram(achievements: list[float]) -> list[int]:
    bins = [0] * HISTOGRAM_BINS
    for achievement in achievements:
        index = min(math.floor(achievement / 10), HISTOGRAM_BINS - 1)
        bins[max(index, 0)] += 1
    return bins


def build_distribution(plays: Iterable[PlayerPlay]) -> dict:
    """Group best plays by instrument then difficulty.

    Returns ``{"distribution", "histogram", "totalRecords"}`` keyed the
    way the API serves it.
    """
    records = best_per_player(plays)

    distribution: dict[str, dict[str, dict]] = {}
    for play in records:
        by_difficulty = distribution.setdefault(str(play.instrument_type), {})
        bucket = by_difficulty.setdefault(str(play.difficulty), {
            "count": 0,
            "avgAchievement": 0,
            "avgSkillScore": 0,
            "records": [],
            "skillScores": [],
            "points": [],
        })
        bucket["count"] += 1
        bucket["records"].append(play.achievement)
        bucket["skillScores"].append(play.skill_score)
        bucket["points"].append({
            "x": play.skill_score,
            "y": play.achievement,
            "username": play.username,
        })

    histogram: dict[str, dict[str, list[int]]] = {}
    for instrument, by_difficulty in distribution.items():
        histogram[instrument] = {}
        for difficulty, bucket in by_difficulty.items():
            bucket["avgAchievement"] = sum(bucket["records"]) / bucket["count"]
            bucket["avgSkillScore"] = sum(bucket["skillScores"]) / bucket["count"]
            histogram[instrument][difficulty] = _histogram(bucket["records"])

    return {
        "distribution": distribution,
        "histogram": histogram,
        "totalRecords": len(records),
    }
