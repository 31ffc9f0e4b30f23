"""Pydantic schemas for authentication flows."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator

MAX_PASSWORD_LEN = 72  # bcrypt limit


class Credentials(BaseModel):
    # Optional so that missing fields reach the service and get its error message
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_length_guard(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v.encode("utf-8")) > MAX_PASSWORD_LEN:
            raise ValueError(f"password must be <= {MAX_PASSWORD_LEN} bytes")
        return v


class AuthResult(BaseModel):
    token: str
    email: str
