"""
In-memory credential store: the only owner of user records.
Lives for the process lifetime; nothing is persisted.
"""

import threading
from dataclasses import dataclass
from typing import Any

from core.exceptions import DuplicateEmailError


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: str
    email: str
    password_hash: str

    def public_view(self) -> dict[str, Any]:
        """Outward-facing fields; never includes the password hash."""
        return {"id": self.id, "username": self.username, "email": self.email}


class CredentialStore:
    """
    Append-only user table keyed by id and email.
    A single lock serializes reads with inserts, and the duplicate-email check
    runs inside the same critical section as the insert.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[int, UserRecord] = {}
        self._by_email: dict[str, UserRecord] = {}

    def find_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            return self._by_email.get(email)

    def find_by_id(self, user_id: int) -> UserRecord | None:
        with self._lock:
            return self._by_id.get(user_id)

    def insert(self, username: str, email: str, password_hash: str) -> UserRecord:
        """Add a user with the next sequential id. Raises DuplicateEmailError if email is taken."""
        with self._lock:
            if email in self._by_email:
                raise DuplicateEmailError()
            # max + 1: ids are never reused
            next_id = max(self._by_id, default=0) + 1
            record = UserRecord(
                id=next_id,
                username=username,
                email=email,
                password_hash=password_hash,
            )
            self._by_id[next_id] = record
            self._by_email[email] = record
            return record

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
