"""FastAPI application factory wiring routes, services, and shared state."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookstore_api.api import routes_auth, routes_checkout, routes_health
from bookstore_api.core.config import Settings, get_settings
from bookstore_api.core.errors import BookstoreError
from bookstore_api.core.security import PasswordHasher, TokenIssuer
from bookstore_api.repositories.user_repository import UserRepository
from bookstore_api.services.auth_service import AuthService
from bookstore_api.services.checkout_service import CheckoutService, SessionFactory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fails startup if the store exists but cannot be read
    users = app.state.user_repository.read_all()
    logger.info("Credential store %s: %d user(s)", app.state.user_repository.users_file, len(users))
    yield
    logger.info("Shutting down")


def create_app(
    settings: Optional[Settings] = None,
    checkout_session_factory: Optional[SessionFactory] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    app = FastAPI(title="Bookstore API", version="0.1.0", lifespan=lifespan)

    # Initialize persistence and services
    user_repo = UserRepository(settings.USERS_FILE)
    app.state.settings = settings
    app.state.user_repository = user_repo
    app.state.auth_service = AuthService(
        user_repo,
        PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        TokenIssuer.from_settings(settings),
    )
    app.state.checkout_service = CheckoutService.from_settings(settings, session_factory=checkout_session_factory)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_auth.router)
    app.include_router(routes_checkout.router)
    app.include_router(routes_health.router)

    @app.exception_handler(BookstoreError)
    async def handle_bookstore_error(request: Request, exc: BookstoreError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
            message = exc.message if settings.EXPOSE_ERROR_DETAILS else "Internal server error"
        else:
            message = exc.message
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid request body"
        logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) if settings.EXPOSE_ERROR_DETAILS else "Internal server error"
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": message})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        logging.info("📥 %s %s START", request.method, request.url.path)
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logging.info("🚀 %s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed)
        return response

    return app


def run() -> None:
    """Serve the app; equivalent to ``uvicorn bookstore_api.main:create_app --factory``."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.API_HOST, port=settings.API_PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
