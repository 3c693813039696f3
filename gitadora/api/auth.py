"""
gitadora.api.auth — Token introspection
========================================

Tokens are issued by the login front end; this service only verifies them.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from gitadora.api.deps import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
def me(user: dict = Depends(get_current_user)):
    """Return the identity carried by the caller's token."""
    return {
        "id": str(user["sub"]),
        "username": user.get("username"),
        "role": user.get("role", "USER"),
        "is_admin": user.get("role") == "ADMIN",
    }
