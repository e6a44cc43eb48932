"""Dependency injection for FastAPI endpoints"""

import hmac
from typing import Optional

from fastapi import Header, HTTPException, Request

from propcalc.config import settings
from propcalc.domain.exceptions import CronAuthorizationError
from propcalc.domain.models import EntityRole


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def authorize_cron_request(authorization: Optional[str], cron_secret: str) -> None:
    """
    Check a scheduled job's "Bearer <secret>" header.

    Raises:
        CronAuthorizationError: header missing or token does not match
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise CronAuthorizationError("Missing bearer token")

    token = authorization[len("Bearer "):]
    if not hmac.compare_digest(token.encode(), cron_secret.encode()):
        raise CronAuthorizationError("Invalid bearer token")


def verify_cron_token(authorization: Optional[str] = Header(None)) -> None:
    """Guard for /v1/jobs/* endpoints"""
    try:
        authorize_cron_request(authorization, settings.cron_secret)
    except CronAuthorizationError as e:
        raise HTTPException(status_code=401, detail=str(e))


def get_entity_role(x_entity_role: EntityRole = Header(...)) -> EntityRole:
    """Caller's role within the entity that owns the resource"""
    return x_entity_role
