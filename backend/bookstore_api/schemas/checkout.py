"""Pydantic schemas for Stripe checkout sessions."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class CheckoutRequest(BaseModel):
    title: Optional[str] = Field(default=None, description="Product name shown on the payment page")
    price: Optional[float] = Field(default=None, description="Unit price in the major currency unit")

    @field_validator("price", mode="before")
    @classmethod
    def reject_boolean_price(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("price must be a number")
        return v


class CheckoutResponse(BaseModel):
    url: str
