"""
gitadora.engine.ranking — Player Leaderboard
=============================================

Ranks players by the total skill of their latest snapshot.  Pure; the
ranking service feeds it rows from ``users`` and ``user_skill_history``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from gitadora.constants import skill_tier

__all__ = ["PlayerTotal", "RankedPlayer", "latest_totals", "rank_players"]


class _Snapshot(Protocol):
    user_id: int
    total_skill: float


@dataclass(frozen=True, slots=True)
class PlayerTotal:
    user_id: int
    ingame_name: str | None
    title: str | None
    total_skill: float


@dataclass(frozen=True, slots=True)
class RankedPlayer:
    rank: int
    user_id: int
    ingame_name: str | None
    title: str | None
    total_skill: float
    tier: str


def latest_totals(snapshots: Iterable[_Snapshot]) -> dict[int, float]:
    """Map user id → total skill of the first snapshot seen for that user.

    *snapshots* must be ordered newest first.
    """
    totals: dict[int, float] = {}
    for snap in snapshots:
        totals.setdefault(snap.user_id, snap.total_skill)
    return totals


def rank_players(players: Iterable[PlayerTotal]) -> list[RankedPlayer]:
    """Drop zero totals, sort descending, number from 1.

    Ties keep input order.
    """
    scored = [p for p in players if p.total_skill > 0]
    scored.sort(key=lambda p: p.total_skill, reverse=True)
    return [
        RankedPlayer(
            rank=i + 1,
            user_id=p.user_id,
            ingame_name=p.ingame_name,
            title=p.title,
            total_skill=p.total_skill,
            tier=skill_tier(p.total_skill),
        )
        for i, p in enumerate(scored)
    ]
