"""Exception hierarchy shared by services and the HTTP layer."""
from __future__ import annotations


class BookstoreError(Exception):
    """Base exception for the bookstore backend."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(BookstoreError):
    """Required input is missing or malformed."""

    status_code = 400


class ConflictError(BookstoreError):
    """A user with the same email already exists."""

    status_code = 400


class AuthError(BookstoreError):
    """Credentials or a token did not check out."""

    status_code = 400


class StoreReadError(BookstoreError):
    """The credential store exists but could not be read or parsed."""


class StoreWriteError(BookstoreError):
    """The credential store could not be rewritten."""


class CheckoutError(BookstoreError):
    """The payment processor refused or failed to create a session."""
