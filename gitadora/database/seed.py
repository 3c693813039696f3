"""
gitadora.database.seed — Default Game Version Seeder
=====================================================

Uploads are filed under a game version, so a fresh database needs at least
one.  Idempotent — only inserts the version when no row with that name
exists.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine, select

from gitadora.constants import DEFAULT_VERSION_NAME
from gitadora.database.engine import get_session
from gitadora.database.models import GameVersion

logger = logging.getLogger(__name__)


def seed_default_version(engine: Engine, name: str | None = None) -> bool:
    """Insert the default :class:`GameVersion` if missing.

    Returns ``True`` when a row was inserted.
    """
    name = name or DEFAULT_VERSION_NAME
    with get_session(engine) as session:
        existing = session.scalar(select(GameVersion).where(GameVersion.name == name))
        if existing is not None:
            return False
        started = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
        session.add(GameVersion(name=name, started_at=started))

    logger.info("Seeded default game version %r.", name)
    return True
