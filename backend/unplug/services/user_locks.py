"""Per-user serialization of quota, draw and mission operations."""

import threading
from contextlib import contextmanager

from unplug import db
from unplug.models.user import User


class UserLockRegistry:
    """
    One lock per user id for this process.

    Holding the lock also selects the user row FOR UPDATE, so backends with
    row locks serialize the same user across worker processes too. SQLite
    ignores FOR UPDATE; a single process is assumed there.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def lock_for(self, user_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: int):
        """Serialize everything inside the block for ``user_id``.

        Yields the locked User row, or None if the user does not exist.
        """
        with self.lock_for(user_id):
            user = (
                db.session.query(User)
                .filter(User.id == user_id)
                .with_for_update()
                .first()
            )
            try:
                yield user
            finally:
                # Ends the transaction so the row lock is released with ours.
                # Work inside the block commits explicitly.
                db.session.rollback()
