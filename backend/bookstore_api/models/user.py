"""User record persisted in the credential store."""
from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    # Stores written by the earlier Node backend keep the hash under "password";
    # records are always written back as "password_hash".
    password_hash: str = Field(validation_alias=AliasChoices("password_hash", "password"))
