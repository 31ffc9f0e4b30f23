"""Health check endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from bookstore_api.core.errors import StoreReadError
from bookstore_api.schemas.common import HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthStatus)
def health(request: Request) -> HealthStatus:
    users_file = request.app.state.user_repository.users_file
    # A missing store is fine (created on first use); an unreadable one is not.
    if not users_file.exists():
        return HealthStatus(status="ok", credential_store="absent")
    try:
        request.app.state.user_repository.read_all()
    except StoreReadError as e:
        logger.error("Health check: %s", e)
        return HealthStatus(status="degraded", credential_store="unreadable")
    return HealthStatus(status="ok", credential_store="ok")
