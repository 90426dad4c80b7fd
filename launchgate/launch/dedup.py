"""Dedup Guard.

Idempotency-key store that admits at most one concurrent launch per
candidate key. ``try_acquire`` is a synchronous check-and-mark, so two
coroutines on the same loop can never both acquire the same key.
"""

from typing import Protocol, runtime_checkable
import logging

logger = logging.getLogger(__name__)


@runtime_checkable
class IdempotencyStore(Protocol):
    """Atomic check-and-mark over launch keys."""

    def try_acquire(self, key: str) -> bool:
        """Mark ``key``; False if it was already marked."""
        ...

    def release(self, key: str) -> bool:
        """Unmark ``key``; False if it was not marked."""
        ...

    def contains(self, key: str) -> bool:
        ...


class InMemoryIdempotencyStore:
    """Set-backed IdempotencyStore for a single process. Never evicts."""

    def __init__(self) -> None:
        self._keys: set[str] = set()

    def try_acquire(self, key: str) -> bool:
        if key in self._keys:
            logger.info("Duplicate launch key %s rejected", key)
            return False
        self._keys.add(key)
        return True

    def release(self, key: str) -> bool:
        if key not in self._keys:
            return False
        self._keys.discard(key)
        return True

    def contains(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
