from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from paygo.exceptions import UnitBusy
from paygo.settings import settings

logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class UnitLockRegistry:
    """One mutex per payable unit.

    Approvals, payment creation and deletion of the same unit take the same
    key and therefore run one at a time. Different keys never block each other.
    An entry lives only while some caller holds or waits on it.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        timeout = settings.lock_timeout_seconds if self.timeout is None else self.timeout
        entry = self._checkout(key)
        try:
            if not entry.lock.acquire(timeout=timeout):
                logger.warning("Timed out after %.1fs waiting for lock %s", timeout, key)
                raise UnitBusy(f"{key} is busy, try again")
            logger.debug("Lock acquired: %s", key)
            try:
                yield
            finally:
                entry.lock.release()
                logger.debug("Lock released: %s", key)
        finally:
            self._checkin(key, entry)


unit_locks = UnitLockRegistry()
