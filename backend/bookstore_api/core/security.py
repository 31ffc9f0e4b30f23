"""Password hashing and JWT issuance/verification."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import bcrypt
from jose import JWTError, jwt

from bookstore_api.core.config import Settings
from bookstore_api.core.errors import AuthError

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """bcrypt with an embedded random salt and a configurable work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True if ``password`` reproduces ``password_hash``.

        A mismatch returns False; a malformed hash raises ``ValueError``.
        """
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """Mints and verifies signed, time-limited identity tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(hours=1),
        clock: Clock = utcnow,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expires_delta=timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def issue(self, subject_id: int, email: str) -> str:
        # jose encodes datetimes as whole seconds, so drop the fraction up front
        issued_at = self.clock().replace(microsecond=0)
        to_encode = {
            "sub": str(subject_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Decode ``token`` and return its claims.

        Raises ``AuthError`` on a bad signature, malformed payload or expiry.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return TokenClaims(
                subject_id=int(payload["sub"]),
                email=payload["email"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (JWTError, KeyError, TypeError, ValueError) as e:
            raise AuthError(f"Invalid or expired token: {e}") from e
