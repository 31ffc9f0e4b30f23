"""Repository for user persistence and retrieval, backed by a JSON file."""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from bookstore_api.core.errors import StoreReadError, StoreWriteError
from bookstore_api.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Flat-file credential store.

    The whole file is read on every lookup and rewritten on every mutation.
    Callers that read, check and then write must do so inside ``locked()``.
    """

    def __init__(self, users_file: Path) -> None:
        self.users_file = Path(users_file)
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def read_all(self) -> List[User]:
        if not self.users_file.exists():
            logger.info("Credential store %s not found, initializing it", self.users_file)
            self.write_all([])
            return []

        try:
            with open(self.users_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreReadError(f"Failed to read users from {self.users_file}: {e}") from e

        if not isinstance(data, list):
            raise StoreReadError(f"Failed to read users from {self.users_file}: expected a JSON array")

        try:
            return [User(**record) for record in data]
        except (TypeError, PydanticValidationError) as e:
            raise StoreReadError(f"Malformed user record in {self.users_file}: {e}") from e

    def write_all(self, users: Sequence[User]) -> None:
        payload = [user.model_dump() for user in users]
        try:
            self.users_file.parent.mkdir(parents=True, exist_ok=True)
            self._atomic_write(payload)
        except OSError as e:
            logger.error("Failed to write users to %s: %s", self.users_file, e)
            raise StoreWriteError(f"Failed to save users to {self.users_file}: {e}") from e
        logger.debug("Wrote %d user(s) to %s", len(payload), self.users_file)

    def find_by_email(self, email: str) -> Optional[User]:
        for user in self.read_all():
            if user.email == email:
                return user
        return None

    def _atomic_write(self, payload: list) -> None:
        with tempfile.NamedTemporaryFile(
            mode="w", dir=self.users_file.parent, delete=False, suffix=".tmp", encoding="utf-8"
        ) as tf:
            json.dump(payload, tf, indent=2, ensure_ascii=False)
            temp_path = Path(tf.name)
        try:
            os.replace(temp_path, self.users_file)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
