"""Human-readable display numbers: ``BILL-1718000000000-000``.

The numeric part is the epoch milliseconds at allocation time, padded to a
fixed width, followed by a per-process sequence that breaks ties inside one
millisecond. Fixed widths keep string order equal to allocation order.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from paygo.exceptions import DuplicateIdentifier
from paygo.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_SEQUENCE = 999


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class IdentifierAllocator:
    def __init__(self, prefix: str, clock: Callable[[], int] | None = None) -> None:
        self.prefix = prefix
        self._clock = clock or _epoch_millis
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    def next(self) -> str:
        with self._lock:
            now_ms = self._clock()
            if now_ms > self._last_ms:
                self._last_ms = now_ms
                self._sequence = 0
            else:
                # Same millisecond, or the clock stepped back: never go backwards.
                self._sequence += 1
                if self._sequence > MAX_SEQUENCE:
                    self._last_ms += 1
                    self._sequence = 0
            return f"{self.prefix}-{self._last_ms:013d}-{self._sequence:03d}"


BILL_NUMBERS = IdentifierAllocator("BILL")
NMR_NUMBERS = IdentifierAllocator("NMR")
PAYMENT_IDS = IdentifierAllocator("PAY")


def create_with_identifier(
    allocator: IdentifierAllocator,
    create: Callable[[str], T],
    retries: int | None = None,
) -> T:
    """Allocate a number and pass it to ``create``, retrying on collisions.

    ``create`` must raise ``DuplicateIdentifier`` when the store already holds
    the number. After ``retries`` further attempts the collision is raised.
    """
    attempts = (settings.identifier_retries if retries is None else retries) + 1
    last_error: DuplicateIdentifier | None = None
    for attempt in range(1, attempts + 1):
        number = allocator.next()
        try:
            return create(number)
        except DuplicateIdentifier as exc:
            logger.warning("Identifier %s already taken (attempt %d/%d)", number, attempt, attempts)
            last_error = exc
    raise DuplicateIdentifier(f"Could not allocate a unique {allocator.prefix} number") from last_error
