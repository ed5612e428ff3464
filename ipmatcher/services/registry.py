from __future__ import annotations

from threading import Lock

from ipmatcher.models import NetworkEntry


class NetworkRegistry:
    """Thread-safe, insertion-ordered collection of network entries.

    Every read and write takes the same exclusive lock. Callers receive
    snapshots, never the live list.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._entries: list[NetworkEntry] = []

    def add(self, entry: NetworkEntry) -> bool:
        """Append ``entry`` unless an equal entry exists. Returns True if added."""
        with self._lock:
            if entry in self._entries:
                return False
            self._entries.append(entry)
            return True

    def contains(self, address: str, netmask: str) -> bool:
        with self._lock:
            return any(e.address == address and e.netmask == netmask for e in self._entries)

    def has_host(self, address: str) -> bool:
        with self._lock:
            return any(e.is_host and e.address == address for e in self._entries)

    def networks(self) -> list[NetworkEntry]:
        """Snapshot of all entries that are not exact-host routes."""
        with self._lock:
            return [e for e in self._entries if not e.is_host]

    def remove(self, address: str) -> int:
        """Drop every entry with ``address`` whatever its netmask. Returns the count."""
        with self._lock:
            kept = [e for e in self._entries if e.address != address]
            removed = len(self._entries) - len(kept)
            self._entries = kept
            return removed

    def entries(self) -> list[NetworkEntry]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
