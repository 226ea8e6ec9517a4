"""In-flight import registry: the set of record keys currently being imported."""

from __future__ import annotations


class InFlightRegistry:
    """Tracks which record keys have an import in progress.

    One registry is shared by every ImportCoordinator that must not import
    the same record twice. Acquire and release are plain synchronous calls,
    so on a single asyncio loop the check-and-add cannot interleave with
    another task.
    """

    def __init__(self) -> None:
        self._keys: set[str] = set()

    def try_acquire(self, key: str) -> bool:
        """Mark ``key`` as in flight. Returns False if it already was."""
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    def release(self, key: str) -> None:
        self._keys.discard(key)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
