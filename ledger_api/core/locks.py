"""
In-process account locks.

Transfers hold one mutex per account they touch. Mutexes are always taken in
ascending account id order, so two transfers over the same pair in opposite
directions cannot deadlock. Entries are reference counted and dropped once no
caller holds or waits on them.
"""

import threading
import time
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ledger_api.core.errors import LockTimeout


class _LockEntry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class AccountLockManager:
    """Hands out per-account mutexes acquired in a canonical order."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[int, _LockEntry] = {}

    def _checkout(self, account_id: int) -> _LockEntry:
        with self._guard:
            entry = self._entries.get(account_id)
            if entry is None:
                entry = self._entries[account_id] = _LockEntry()
            entry.users += 1
            return entry

    def _checkin(self, account_id: int, entry: _LockEntry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[account_id]

    @contextmanager
    def acquire(self, account_ids: Iterable[int], timeout: Optional[float] = None) -> Iterator[None]:
        """
        Lock every account in ``account_ids`` for the duration of the block.

        ``timeout`` bounds the total wait in seconds; None waits forever.
        Raises LockTimeout (with nothing held) when it expires.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        held: List[Tuple[int, _LockEntry]] = []
        try:
            for account_id in sorted(set(account_ids)):
                entry = self._checkout(account_id)
                if deadline is None:
                    acquired = entry.lock.acquire()
                else:
                    acquired = entry.lock.acquire(timeout=max(0.0, deadline - time.monotonic()))
                if not acquired:
                    self._checkin(account_id, entry)
                    raise LockTimeout(
                        f"Timed out waiting for account {account_id}; transfer was not applied"
                    )
                held.append((account_id, entry))
            yield
        finally:
            for account_id, entry in reversed(held):
                entry.lock.release()
                self._checkin(account_id, entry)

    def active_count(self) -> int:
        """Number of accounts currently locked or waited on."""
        with self._guard:
            return len(self._entries)
