"""
gitadora.services.version_service — Game Version Administration
================================================================

Start and end dates are stored at midnight; admins pick days, not times.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from gitadora.database.models import GameVersion
from gitadora.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def _midnight(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def version_dict(v: GameVersion) -> dict:
    return {
        "id": v.id,
        "name": v.name,
        "startedAt": v.started_at.isoformat() if v.started_at else None,
        "endedAt": v.ended_at.isoformat() if v.ended_at else None,
        "createdAt": v.created_at.isoformat() if v.created_at else None,
    }


def list_versions(session: Session) -> list[GameVersion]:
    return list(session.scalars(
        select(GameVersion).order_by(GameVersion.created_at.desc(), GameVersion.id.desc())
    ))


def get_version(session: Session, version_id: int) -> GameVersion:
    version = session.get(GameVersion, version_id)
    if version is None:
        raise NotFoundError("Version not found")
    return version


def _ensure_unique_name(session: Session, name: str, exclude_id: int | None = None) -> None:
    query = select(GameVersion.id).where(GameVersion.name == name)
    if exclude_id is not None:
        query = query.where(GameVersion.id != exclude_id)
    if session.scalar(query) is not None:
        raise ConflictError(f"Version already exists: {name}")


def create_version(
    session: Session,
    *,
    name: str,
    started_at: datetime,
    ended_at: datetime | None = None,
) -> GameVersion:
    _ensure_unique_name(session, name)
    version = GameVersion(
        name=name,
        started_at=_midnight(started_at),
        ended_at=_midnight(ended_at),
    )
    session.add(version)
    session.flush()
    logger.info("Created game version %r (id=%s)", name, version.id)
    return version


def update_version(
    session: Session,
    version_id: int,
    *,
    name: str,
    started_at: datetime,
    ended_at: datetime | None = None,
) -> GameVersion:
    version = get_version(session, version_id)
    _ensure_unique_name(session, name, exclude_id=version_id)
    version.name = name
    version.started_at = _midnight(started_at)
    version.ended_at = _midnight(ended_at)
    session.flush()
    logger.info("Updated game version %s → %r", version_id, name)
    return version
