"""Common/shared schemas."""
from __future__ import annotations

from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str = "ok"
    credential_store: str = "ok"


class ErrorResponse(BaseModel):
    error: str
