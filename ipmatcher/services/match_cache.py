from __future__ import annotations

from datetime import datetime
from threading import Lock


class MatchCache:
    """Positive-result memo: query address -> time it was last found to match.

    Negative results are never stored and entries never expire on their own.
    Every ``clear`` starts a new generation; an ``add`` carrying an older
    generation is dropped, so a scan that began before the clear cannot
    repopulate the cache.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._hits: dict[str, datetime] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def add(self, address: str, matched_at: datetime, *, generation: int | None = None) -> bool:
        """Record a match.

        Returns False if ``address`` was already cached or ``generation`` is
        no longer current.
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            if address in self._hits:
                return False
            self._hits[address] = matched_at
            return True

    def discard(self, address: str) -> bool:
        with self._lock:
            return self._hits.pop(address, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._hits)
            self._hits = {}
            self._generation += 1
            return count

    def get(self, address: str) -> datetime | None:
        with self._lock:
            return self._hits.get(address)

    def snapshot(self) -> dict[str, datetime]:
        with self._lock:
            return dict(self._hits)

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._hits

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)
