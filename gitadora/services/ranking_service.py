"""
gitadora.services.ranking_service — Leaderboard Queries
========================================================
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from gitadora.database.models import InstrumentType, SkillHistory, User
from gitadora.engine.ranking import PlayerTotal, latest_totals, rank_players


def get_ranking(session: Session, instrument_type: InstrumentType) -> list[dict]:
    """Leaderboard for ``GET /users/list``.

    Each player's latest snapshot for *instrument_type* decides the total;
    players without one (or with zero) are left out.
    """
    snapshots = session.scalars(
        select(SkillHistory)
        .where(SkillHistory.instrument_type == instrument_type)
        .order_by(SkillHistory.recorded_at.desc(), SkillHistory.id.desc())
    )
    totals = latest_totals(snapshots)

    users = session.scalars(select(User).order_by(User.id)).all()
    ranked = rank_players(
        PlayerTotal(
            user_id=u.id,
            ingame_name=u.ingame_name,
            title=u.title,
            total_skill=totals.get(u.id, 0),
        )
        for u in users
    )

    return [
        {
            "rank": p.rank,
            "userId": p.user_id,
            "ingamename": p.ingame_name,
            "title": p.title,
            "totalSkill": p.total_skill,
            "tier": p.tier,
            "instrumentType": str(instrument_type),
        }
        for p in ranked
    ]
