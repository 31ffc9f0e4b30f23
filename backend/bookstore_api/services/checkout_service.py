"""Checkout service creating Stripe-hosted payment sessions."""
from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from numbers import Real
from typing import Any, Callable, Optional

import stripe

from bookstore_api.core.config import Settings
from bookstore_api.core.errors import CheckoutError, ValidationError

logger = logging.getLogger(__name__)

INVALID_BOOK_DATA = "Invalid book data"

SessionFactory = Callable[..., Any]


def to_subunits(price: float) -> int:
    """Convert a major-unit price to the smallest currency unit, rounding half up."""
    return int((Decimal(str(price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CheckoutService:
    def __init__(
        self,
        api_key: str,
        currency: str = "usd",
        success_url: str = "http://localhost:3000/success",
        cancel_url: str = "http://localhost:3000/cancel",
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.api_key = api_key
        self.currency = currency
        self.success_url = success_url
        self.cancel_url = cancel_url
        self.session_factory = session_factory or stripe.checkout.Session.create

    @classmethod
    def from_settings(cls, settings: Settings, session_factory: Optional[SessionFactory] = None) -> "CheckoutService":
        return cls(
            api_key=settings.STRIPE_SECRET_KEY,
            currency=settings.CHECKOUT_CURRENCY,
            success_url=settings.CHECKOUT_SUCCESS_URL,
            cancel_url=settings.CHECKOUT_CANCEL_URL,
            session_factory=session_factory,
        )

    def build_line_item(self, title: str, price: float) -> dict[str, Any]:
        return {
            "price_data": {
                "currency": self.currency,
                "unit_amount": to_subunits(price),
                "product_data": {"name": title},
            },
            "quantity": 1,
        }

    def create_session(self, title: Optional[str], price: Optional[float]) -> str:
        """Create a checkout session for a single item and return its redirect URL."""
        if not title or not self._is_positive_number(price):
            raise ValidationError(INVALID_BOOK_DATA)

        line_item = self.build_line_item(title, price)
        # prices below half a subunit would round to a free item
        if line_item["price_data"]["unit_amount"] < 1:
            raise ValidationError(INVALID_BOOK_DATA)
        try:
            session = self.session_factory(
                api_key=self.api_key,
                payment_method_types=["card"],
                line_items=[line_item],
                mode="payment",
                success_url=self.success_url,
                cancel_url=self.cancel_url,
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout failed for %r: %s", title, e.user_message or e)
            raise CheckoutError(str(e.user_message or e)) from e

        url = getattr(session, "url", None)
        if not url:
            raise CheckoutError("Payment processor returned no checkout URL")

        logger.info("Created checkout session for %r (%d %s)", title, line_item["price_data"]["unit_amount"], self.currency)
        return url

    @staticmethod
    def _is_positive_number(price: Any) -> bool:
        if isinstance(price, bool) or not isinstance(price, Real):
            return False
        return math.isfinite(price) and price > 0
