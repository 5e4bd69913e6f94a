"""
Identity allocator shared by every entity kind.
"""

import logging

from .config import U64_MAX
from .errors import COUNTER_OVERFLOW, StorageFault

logger = logging.getLogger(__name__)


class IdAllocator:
    """
    Issues unique, strictly increasing ids from one persisted counter.

    The counter starts at 0 and next_id() returns the value after the
    increment, so the first id handed out is 1. The new value is persisted
    before it is returned; if that fails the id is never used.
    """

    def __init__(self, cell):
        self._cell = cell

    def next_id(self) -> int:
        current = self._cell.get()
        new_value = current + 1
        if new_value > U64_MAX:
            raise StorageFault("Id counter exhausted the 64-bit range", code=COUNTER_OVERFLOW)

        # Raises StorageFault if the counter cannot be persisted
        self._cell.set(new_value)
        logger.debug("[Allocator] Issued id %d", new_value)
        return new_value

    @property
    def last_id(self) -> int:
        """Most recently issued id, or 0 if none has been issued yet."""
        return self._cell.get()
