"""
Tests for registration and login orchestration.
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from bookstore_api.core.errors import AuthError, ConflictError, StoreWriteError, ValidationError
from bookstore_api.core.security import PasswordHasher
from bookstore_api.services.auth_service import AuthService


class TestRegister:
    def test_new_email_returns_token_and_email(self, auth_service, token_issuer, repo):
        result = auth_service.register("reader@example.com", "s3cret!")
        assert result.email == "reader@example.com"

        [stored] = repo.read_all()
        claims = token_issuer.verify(result.token)
        assert claims.subject_id == stored.id
        assert claims.email == "reader@example.com"

    def test_password_is_stored_hashed(self, auth_service, repo):
        auth_service.register("reader@example.com", "s3cret!")
        [stored] = repo.read_all()
        assert stored.password_hash != "s3cret!"
        assert PasswordHasher().verify("s3cret!", stored.password_hash)

    def test_duplicate_email_conflicts_regardless_of_password(self, auth_service, repo):
        auth_service.register("reader@example.com", "first")
        with pytest.raises(ConflictError, match="User already exists"):
            auth_service.register("reader@example.com", "something-else")
        assert len(repo.read_all()) == 1

    def test_email_match_is_case_sensitive(self, auth_service, repo):
        auth_service.register("reader@example.com", "pw")
        auth_service.register("Reader@example.com", "pw")
        assert len(repo.read_all()) == 2

    @pytest.mark.parametrize("email,password", [(None, "pw"), ("a@example.com", None), ("", "pw"), ("a@example.com", "")])
    def test_missing_fields(self, auth_service, repo, email, password):
        with pytest.raises(ValidationError, match="Email and password required"):
            auth_service.register(email, password)
        assert repo.read_all() == []

    def test_password_over_bcrypt_limit_rejected(self, auth_service, repo):
        with pytest.raises(ValidationError, match="72 bytes"):
            auth_service.register("a@example.com", "é" * 37)
        assert repo.read_all() == []

    def test_ids_are_time_derived_and_increasing(self, repo, token_issuer):
        service = AuthService(repo, PasswordHasher(rounds=4), token_issuer, id_clock=lambda: 1_700_000_000_000)
        service.register("a@example.com", "pw")
        service.register("b@example.com", "pw")
        assert [u.id for u in repo.read_all()] == [1_700_000_000_000, 1_700_000_000_001]

    def test_write_failure_aborts_before_token(self, repo):
        issuer = MagicMock()
        repo.write_all([])
        repo.write_all = MagicMock(side_effect=StoreWriteError("disk full"))
        service = AuthService(repo, PasswordHasher(rounds=4), issuer)

        with pytest.raises(StoreWriteError, match="disk full"):
            service.register("a@example.com", "pw")
        issuer.issue.assert_not_called()

    def test_concurrent_duplicate_registrations_store_one_record(self, auth_service, repo):
        def attempt(_):
            try:
                auth_service.register("race@example.com", "pw")
                return "ok"
            except ConflictError:
                return "conflict"

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(attempt, range(8)))

        assert outcomes.count("ok") == 1
        assert outcomes.count("conflict") == 7
        assert [u.email for u in repo.read_all()] == ["race@example.com"]


class TestLogin:
    def test_correct_credentials_return_token(self, auth_service, token_issuer):
        auth_service.register("reader@example.com", "s3cret!")
        result = auth_service.login("reader@example.com", "s3cret!")
        assert result.email == "reader@example.com"
        assert token_issuer.verify(result.token).email == "reader@example.com"

    def test_unknown_email_and_wrong_password_are_indistinguishable(self, auth_service):
        auth_service.register("reader@example.com", "s3cret!")

        with pytest.raises(AuthError) as unknown:
            auth_service.login("nobody@example.com", "s3cret!")
        with pytest.raises(AuthError) as wrong:
            auth_service.login("reader@example.com", "wrong")

        assert unknown.value.message == wrong.value.message == "Invalid credentials"
        assert unknown.value.status_code == wrong.value.status_code

    @pytest.mark.parametrize("email,password", [(None, "pw"), ("a@example.com", None), ("", "")])
    def test_missing_fields(self, auth_service, email, password):
        with pytest.raises(ValidationError, match="Invalid credentials"):
            auth_service.login(email, password)

    def test_overlong_password_is_invalid_credentials(self, auth_service):
        auth_service.register("reader@example.com", "s3cret!")
        with pytest.raises(AuthError, match="Invalid credentials"):
            auth_service.login("reader@example.com", "x" * 73)

    def test_login_on_empty_store(self, auth_service):
        with pytest.raises(AuthError):
            auth_service.login("reader@example.com", "pw")
