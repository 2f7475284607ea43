"""Known-good session keys, kept as a latency hint.

Nothing depends on an entry being present or fresh: a missing entry means
the key is re-derived, a stale one goes through the normal recovery rules.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable


class SessionKeyCache:
    """Bounded LRU of sender -> last session key that delivered, with a TTL."""

    def __init__(
        self,
        max_size: int = 1024,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[str, float]] = OrderedDict()

    def get(self, sender: str) -> str | None:
        """Return the cached key for *sender*, or None if absent or expired."""
        entry = self._entries.get(sender)
        if entry is None:
            return None
        key, stored_at = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[sender]
            return None
        self._entries.move_to_end(sender)
        return key

    def put(self, sender: str, key: str) -> None:
        if self.max_size <= 0:
            return
        self._entries[sender] = (key, self._clock())
        self._entries.move_to_end(sender)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def discard(self, sender: str) -> None:
        self._entries.pop(sender, None)

    def clear(self) -> int:
        """Drop all entries. Returns the count of cleared entries."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def __len__(self) -> int:
        return len(self._entries)
