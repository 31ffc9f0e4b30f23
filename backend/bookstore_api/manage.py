"""
Credential store administration commands.

Usage:
    python -m bookstore_api.manage check-store
    python -m bookstore_api.manage create-user EMAIL PASSWORD
"""
from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from bookstore_api.core.config import Settings, get_settings
from bookstore_api.core.errors import BookstoreError
from bookstore_api.core.security import PasswordHasher, TokenIssuer
from bookstore_api.repositories.user_repository import UserRepository
from bookstore_api.services.auth_service import AuthService


def check_store(settings: Settings, args: argparse.Namespace) -> int:
    """Print every user in the credential store."""
    users = UserRepository(settings.USERS_FILE).read_all()

    print(f"\nUsers in {settings.USERS_FILE}: {len(users)}\n")
    if not users:
        print("Store is empty. Register through POST /register or `create-user`.\n")
        return 0

    print("=" * 60)
    for user in users:
        print(f"ID: {user.id}")
        print(f"Email: {user.email}")
        print(f"Password hash: {user.password_hash[:29]}...")
        print("-" * 60)
    return 0


def create_user(settings: Settings, args: argparse.Namespace) -> int:
    """Register a user directly against the store."""
    auth_service = AuthService(
        UserRepository(settings.USERS_FILE),
        PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        TokenIssuer.from_settings(settings),
    )
    result = auth_service.register(args.email, args.password)
    print(f"Created user: {result.email}")
    return 0


COMMANDS = {
    "check-store": check_store,
    "create-user": create_user,
}


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    parser = argparse.ArgumentParser(description="Bookstore API credential store management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("check-store", help="List stored users")
    create = subparsers.add_parser("create-user", help="Register a new user")
    create.add_argument("email")
    create.add_argument("password")

    args = parser.parse_args(argv)
    settings = settings or get_settings()

    try:
        return COMMANDS[args.command](settings, args)
    except BookstoreError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
