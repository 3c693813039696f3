"""
gitadora.api.routes.skill — Skill lookup, leaderboard, uploads, distribution
=============================================================================
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from gitadora.api.deps import get_config, get_session
from gitadora.config import TrackerConfig
from gitadora.database.models import InstrumentType
from gitadora.services import (
    distribution_service,
    ingest_service,
    ranking_service,
    skill_service,
)
from gitadora.services.errors import NotFoundError, ValidationFailed
from gitadora.services.ingest_service import ProfileInfo

logger = logging.getLogger(__name__)
router = APIRouter(tags=["skill"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class SkillUpload(BaseModel):
    """Upload body.  Records stay raw so each one is validated on its own."""

    model_config = ConfigDict(populate_by_name=True)

    records: list[Any] = Field(default_factory=list)
    profile_info: ProfileInfo | None = Field(default=None, alias="profileInfo")
    version: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _instrument(value: InstrumentType | None, cfg: TrackerConfig) -> InstrumentType:
    return value or cfg.default_instrument


def _history_id(raw: str | None) -> int | None:
    """Non-numeric snapshot ids are ignored, not rejected."""
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# GET /users/list
# ---------------------------------------------------------------------------
@router.get("/users/list")
def get_user_list(
    instrument_type: InstrumentType | None = Query(None, alias="instrumentType"),
    session: Session = Depends(get_session),
    cfg: TrackerConfig = Depends(get_config),
):
    """Leaderboard by latest snapshot total."""
    return ranking_service.get_ranking(session, _instrument(instrument_type, cfg))


# ---------------------------------------------------------------------------
# GET /users/{user_id}/skill
# ---------------------------------------------------------------------------
@router.get("/users/{user_id}/skill")
def get_user_skill(
    user_id: int,
    instrument_type: InstrumentType | None = Query(None, alias="instrumentType"),
    history_id: str | None = Query(None, alias="historyId"),
    version: str | None = Query(None),
    session: Session = Depends(get_session),
    cfg: TrackerConfig = Depends(get_config),
):
    """Top-25 hot / other breakdown, optionally as of a past snapshot."""
    return skill_service.get_user_skill(
        session,
        user_id,
        _instrument(instrument_type, cfg),
        history_id=_history_id(history_id),
        version=version or None,
    )


# ---------------------------------------------------------------------------
# POST /users/{user_id}/skill-records
# ---------------------------------------------------------------------------
@router.post("/users/{user_id}/skill-records")
def upload_user_records(
    user_id: int,
    body: SkillUpload,
    session: Session = Depends(get_session),
    cfg: TrackerConfig = Depends(get_config),
):
    try:
        result = ingest_service.upload_for_user(
            session,
            user_id,
            body.records,
            profile=body.profile_info,
            version=body.version or cfg.default_version,
        )
    except NotFoundError as exc:
        raise HTTPException(404, str(exc))
    except ValidationFailed as exc:
        raise HTTPException(400, str(exc))
    session.commit()
    return result.to_dict()


# ---------------------------------------------------------------------------
# POST /skill-records
# ---------------------------------------------------------------------------
@router.post("/skill-records")
def upload_records(
    body: SkillUpload,
    session: Session = Depends(get_session),
    cfg: TrackerConfig = Depends(get_config),
):
    """Upload keyed by GITADORA id; creates the player on first upload."""
    try:
        result = ingest_service.upload_by_gitadora_id(
            session,
            body.records,
            profile=body.profile_info,
            version_name=body.version or cfg.default_version,
        )
    except NotFoundError as exc:
        raise HTTPException(404, str(exc))
    except ValidationFailed as exc:
        raise HTTPException(400, str(exc))
    session.commit()

    payload = result.to_dict()
    if not body.records:
        payload["message"] = "User updated, but no records provided"
    return payload


# ---------------------------------------------------------------------------
# GET /skill-distribution
# ---------------------------------------------------------------------------
@router.get("/skill-distribution")
def get_skill_distribution(
    song_title: str = Query(..., alias="songTitle", min_length=1),
    session: Session = Depends(get_session),
):
    """Per-instrument, per-difficulty spread of best plays on one song."""
    return distribution_service.get_song_distribution(session, song_title)
