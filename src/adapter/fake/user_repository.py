"""In-memory implementation of UserRepository for testing."""

import itertools
import threading
from datetime import datetime, timezone

from domain.model.errors import DuplicateEmailError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[int, User] = {}
        self.fail_with: Exception | None = None
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _check_failure(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    # ── write operations ─────────────────────────────────────

    def create(self, name: str, email: str, password_hash: str) -> User:
        self._check_failure()
        # Stands in for the unique index on users.email
        with self._lock:
            if any(u.email == email for u in self.store.values()):
                raise DuplicateEmailError()

            user = User(
                id=next(self._ids),
                name=name,
                email=email,
                created_at=datetime.now(timezone.utc),
                password_hash=password_hash,
            )
            self.store[user.id] = user
        return user

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        self._check_failure()
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def get_by_id(self, user_id: int) -> User | None:
        self._check_failure()
        return self.store.get(user_id)

    def ping(self) -> bool:
        return self.fail_with is None
