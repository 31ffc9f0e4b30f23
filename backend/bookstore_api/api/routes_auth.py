"""Authentication API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from bookstore_api.schemas.auth import AuthResult, Credentials
from bookstore_api.schemas.common import ErrorResponse
from bookstore_api.services.auth_service import AuthService

router = APIRouter(tags=["auth"], responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


@router.post("/register", response_model=AuthResult)
def register(
    payload: Credentials,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResult:
    return auth_service.register(payload.email, payload.password)


@router.post("/login", response_model=AuthResult)
def login(
    payload: Credentials,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResult:
    return auth_service.login(payload.email, payload.password)
