"""In-memory storage for user records."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from .models import User


class UserStore:
    """Ordered, lock-guarded collection of users keyed by id."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: List[User] = []
        self._lock = threading.Lock()
        self._last_id = 0
        seen = set()
        for user in users:
            if user.id in seen:
                raise ValueError(f"Duplicate user id {user.id}")
            seen.add(user.id)
            self._users.append(replace(user))
            self._last_id = max(self._last_id, user.id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def list_users(self) -> Tuple[User, ...]:
        with self._lock:
            return tuple(replace(user) for user in self._users)

    def get(self, user_id: int) -> Optional[User]:
        with self._lock:
            record = self._find(user_id)
            return replace(record) if record is not None else None

    def insert(self, user: User) -> User:
        """Append ``user`` under a freshly assigned id and return the stored copy.

        The new id is one past the highest id currently held, or one past the
        highest id ever assigned when that is larger, so ids freed by a
        delete are not handed out again.
        """

        with self._lock:
            current_max = max((existing.id for existing in self._users), default=0)
            new_id = max(current_max, self._last_id) + 1
            record = replace(user, id=new_id)
            self._users.append(record)
            self._last_id = new_id
            return replace(record)

    def update(self, user_id: int, name: str, email: str) -> Optional[User]:
        with self._lock:
            record = self._find(user_id)
            if record is None:
                return None
            record.name = name
            record.email = email
            return replace(record)

    def remove(self, user_id: int) -> bool:
        with self._lock:
            record = self._find(user_id)
            if record is None:
                return False
            self._users.remove(record)
            return True

    def _find(self, user_id: int) -> Optional[User]:
        # Caller must hold the lock.
        for user in self._users:
            if user.id == user_id:
                return user
        return None


__all__ = ["UserStore"]
