"""Authentication service handling registration and login."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from bookstore_api.core.errors import AuthError, ConflictError, ValidationError
from bookstore_api.core.security import PasswordHasher, TokenIssuer
from bookstore_api.models.user import User
from bookstore_api.repositories.user_repository import UserRepository
from bookstore_api.schemas.auth import MAX_PASSWORD_LEN, AuthResult

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
MISSING_FIELDS = "Email and password required"
PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_LEN} bytes"


def _exceeds_bcrypt_limit(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_LEN


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class AuthService:
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        id_clock: Callable[[], int] = _epoch_millis,
    ) -> None:
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.id_clock = id_clock

    def register(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        if not email or not password:
            raise ValidationError(MISSING_FIELDS)
        if _exceeds_bcrypt_limit(password):
            raise ValidationError(PASSWORD_TOO_LONG)

        with self.user_repository.locked():
            users = self.user_repository.read_all()
            if any(u.email == email for u in users):
                logger.warning("Registration rejected, email already registered: %s", email)
                raise ConflictError("User already exists")

            user = User(
                id=self._next_id(users),
                email=email,
                password_hash=self.password_hasher.hash(password),
            )
            self.user_repository.write_all([*users, user])

        logger.info("Registered user %s (%s)", user.email, user.id)
        return AuthResult(token=self.token_issuer.issue(user.id, user.email), email=user.email)

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        if not email or not password:
            raise ValidationError(INVALID_CREDENTIALS)

        user = self.user_repository.find_by_email(email)
        # an over-long password can never have been registered
        if (
            user is None
            or _exceeds_bcrypt_limit(password)
            or not self.password_hasher.verify(password, user.password_hash)
        ):
            logger.warning("Failed login attempt for %s", email)
            raise AuthError(INVALID_CREDENTIALS)

        logger.info("Login: %s (%s)", user.email, user.id)
        return AuthResult(token=self.token_issuer.issue(user.id, user.email), email=user.email)

    def _next_id(self, users: list[User]) -> int:
        candidate = self.id_clock()
        if users:
            candidate = max(candidate, max(u.id for u in users) + 1)
        return candidate
