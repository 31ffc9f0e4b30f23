"""Stripe checkout endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from bookstore_api.schemas.checkout import CheckoutRequest, CheckoutResponse
from bookstore_api.schemas.common import ErrorResponse
from bookstore_api.services.checkout_service import CheckoutService

router = APIRouter(tags=["checkout"], responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout_service


@router.post("/create-checkout-session", response_model=CheckoutResponse)
def create_checkout_session(
    payload: CheckoutRequest,
    checkout_service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResponse:
    url = checkout_service.create_session(payload.title, payload.price)
    return CheckoutResponse(url=url)
