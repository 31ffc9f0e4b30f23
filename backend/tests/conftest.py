from pathlib import Path
from typing import Optional

import pytest
import stripe
from fastapi.testclient import TestClient

from bookstore_api.core.config import Settings
from bookstore_api.core.security import PasswordHasher, TokenIssuer
from bookstore_api.main import create_app
from bookstore_api.repositories.user_repository import UserRepository
from bookstore_api.services.auth_service import AuthService

TEST_SECRET = "test-signing-secret-0123456789"
FAKE_CHECKOUT_URL = "https://checkout.stripe.com/c/pay/cs_test_a1b2c3"


class FakeSessionFactory:
    """Stands in for stripe.checkout.Session.create and records every call.

    Returns a real ``stripe.checkout.Session`` object, as the SDK does.
    """

    def __init__(self, url: str = FAKE_CHECKOUT_URL, error: Optional[Exception] = None):
        self.url = url
        self.error = error
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return stripe.checkout.Session.construct_from({"id": "cs_test_a1b2c3", "url": self.url}, "sk_test_dummy")


@pytest.fixture
def users_file(tmp_path: Path) -> Path:
    return tmp_path / "users.json"


@pytest.fixture
def settings(users_file: Path) -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET_KEY=TEST_SECRET,
        STRIPE_SECRET_KEY="sk_test_dummy",
        USERS_FILE=users_file,
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def fake_stripe() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def app(settings: Settings, fake_stripe: FakeSessionFactory):
    return create_app(settings, checkout_session_factory=fake_stripe)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def repo(users_file: Path) -> UserRepository:
    return UserRepository(users_file)


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(secret_key=TEST_SECRET)


@pytest.fixture
def auth_service(repo: UserRepository, token_issuer: TokenIssuer) -> AuthService:
    return AuthService(repo, PasswordHasher(rounds=4), token_issuer)
