"""
gitadora.api.routes.versions — Game versions (reads public, writes ADMIN)
==========================================================================
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from gitadora.api.deps import get_current_admin, get_session
from gitadora.services import version_service
from gitadora.services.errors import ConflictError, NotFoundError

router = APIRouter(prefix="/versions", tags=["versions"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class VersionBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    started_at: datetime = Field(alias="startedAt")
    ended_at: datetime | None = Field(default=None, alias="endedAt")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
@router.get("")
def list_versions(session: Session = Depends(get_session)):
    return [version_service.version_dict(v) for v in version_service.list_versions(session)]


@router.get("/{version_id}")
def get_version(version_id: int, session: Session = Depends(get_session)):
    try:
        version = version_service.get_version(session, version_id)
    except NotFoundError as exc:
        raise HTTPException(404, str(exc))
    return version_service.version_dict(version)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
@router.post("", status_code=201)
def create_version(
    body: VersionBody,
    admin: dict = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    try:
        version = version_service.create_version(
            session,
            name=body.name,
            started_at=body.started_at,
            ended_at=body.ended_at,
        )
    except ConflictError as exc:
        raise HTTPException(409, str(exc))
    session.commit()
    return version_service.version_dict(version)


@router.put("/{version_id}")
def update_version(
    version_id: int,
    body: VersionBody,
    admin: dict = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    try:
        version = version_service.update_version(
            session,
            version_id,
            name=body.name,
            started_at=body.started_at,
            ended_at=body.ended_at,
        )
    except NotFoundError as exc:
        raise HTTPException(404, str(exc))
    except ConflictError as exc:
        raise HTTPException(409, str(exc))
    session.commit()
    return version_service.version_dict(version)
