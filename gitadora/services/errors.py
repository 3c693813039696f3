"""
gitadora.services.errors — Domain exceptions raised by the service layer.

Routes translate these into HTTP status codes; services never import
FastAPI.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for expected, caller-visible failures."""


class NotFoundError(ServiceError):
    """A referenced row (user, version) does not exist."""


class ConflictError(ServiceError):
    """A write would violate a uniqueness rule."""


class ValidationFailed(ServiceError):
    """Input passed schema validation but is unusable."""
