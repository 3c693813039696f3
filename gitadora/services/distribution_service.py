"""
gitadora.services.distribution_service — Song Distribution Queries
===================================================================
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from gitadora.database.models import SkillRecord, User
from gitadora.engine.distribution import PlayerPlay, build_distribution


def get_song_distribution(session: Session, song_title: str) -> dict:
    """Every player's best plays on *song_title*, grouped for charts."""
    rows = session.execute(
        select(SkillRecord, User)
        .join(User, User.id == SkillRecord.user_id)
        .where(SkillRecord.song_title == song_title)
        .order_by(SkillRecord.played_at.desc(), SkillRecord.id.desc())
    ).all()

    plays = (
        PlayerPlay(
            user_id=record.user_id,
            username=user.display_name,
            instrument_type=record.instrument_type,
            difficulty=record.difficulty,
            achievement=record.achievement,
            skill_score=record.skill_score,
        )
        for record, user in rows
    )
    return {"songTitle": song_title, **build_distribution(plays)}
