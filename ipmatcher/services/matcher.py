"""IPv4 network membership matcher.

The matcher owns a :class:`NetworkRegistry` and a :class:`MatchCache`, each
guarded by its own lock. The two locks are never held at the same time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from ipmatcher import constants
from ipmatcher.core.addresses import canonical_ipv4, parse_ipv4
from ipmatcher.core.logging import LogCallback, logger_callback
from ipmatcher.core.metrics import record_event
from ipmatcher.models import EntryOutcome, NetworkEntry
from ipmatcher.services.match_cache import MatchCache
from ipmatcher.services.registry import NetworkRegistry
from ipmatcher.settings import CacheInvalidation, Settings

logger = logging.getLogger("ipmatcher")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Matcher:
    """Answer whether an IPv4 address falls within any registered network.

    Attributes:
        registry: Registered networks
        cache: Positive match results
    """

    def __init__(
        self,
        *,
        log: LogCallback | None = None,
        cache_enabled: bool = True,
        cache_invalidation: CacheInvalidation = constants.CACHE_INVALIDATION_FULL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the matcher.

        Args:
            log: Callback receiving one formatted line per event; defaults to
                DEBUG lines on the ``ipmatcher.matcher`` logger
            cache_enabled: Consult and populate the match cache
            cache_invalidation: "full" or "address", applied on remove
            clock: Source of cache timestamps
        """
        if cache_invalidation not in (
            constants.CACHE_INVALIDATION_FULL,
            constants.CACHE_INVALIDATION_ADDRESS,
        ):
            raise ValueError(f"Unknown cache invalidation policy: {cache_invalidation!r}")

        self.registry = NetworkRegistry()
        self.cache = MatchCache()
        self.log = log
        self._cache_enabled = cache_enabled
        self._cache_invalidation = cache_invalidation
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, log: LogCallback | None = None) -> Matcher:
        return cls(
            log=log,
            cache_enabled=settings.cache_enabled,
            cache_invalidation=settings.cache_invalidation,
        )

    @property
    def log(self) -> LogCallback:
        return self._log

    @log.setter
    def log(self, callback: LogCallback | None) -> None:
        self._log = callback or logger_callback(logging.getLogger("ipmatcher.matcher"))

    def _emit(self, message: str) -> None:
        try:
            self._log(message)
        except Exception:
            logger.exception("matcher log callback failed")

    def add(self, address: str, netmask: str) -> None:
        """Register a network, normalizing ``address`` to its network base.

        Adding an entry that already exists is a no-op.
        """
        entry = NetworkEntry.create(address, netmask)
        if not self.registry.add(entry):
            record_event(constants.EVENT_NETWORK_DUPLICATE)
            self._emit(f"{entry.address} {entry.netmask} already exists")
            return

        record_event(constants.EVENT_NETWORK_ADDED)
        self._emit(f"{entry.address} {entry.netmask} added")

    def exists(self, address: str, netmask: str) -> bool:
        """Check whether a network is registered or ``address`` is a cached match."""
        entry = NetworkEntry.create(address, netmask)

        if self._cache_enabled and entry.address in self.cache:
            self._emit(f"{entry.address} {entry.netmask} exists in cache")
            return True

        if self.registry.contains(entry.address, entry.netmask):
            self._emit(f"{entry.address} {entry.netmask} exists in address list")
            return True

        self._emit(f"{entry.address} {entry.netmask} does not exist in address list")
        return False

    def remove(self, address: str) -> None:
        """Remove every network with ``address``, whatever its netmask."""
        key = canonical_ipv4(address)

        removed = self.registry.remove(key)
        if removed:
            record_event(constants.EVENT_NETWORK_REMOVED)
        self._emit(f"{key} removed from address list")

        if removed and self._cache_invalidation == constants.CACHE_INVALIDATION_FULL:
            cleared = self.cache.clear()
            if cleared:
                record_event(constants.EVENT_CACHE_CLEARED)
            self._emit(f"cache cleared ({cleared} entries)")
        else:
            self.cache.discard(key)
            self._emit(f"{key} removed from cache")

    def match_exists(self, address: str) -> bool:
        """Check whether ``address`` falls within any registered network."""
        query = parse_ipv4(address)
        key = str(query)

        if self._cache_enabled and key in self.cache:
            record_event(constants.EVENT_CACHE_HIT)
            self._emit(f"{key} found in cache")
            return True

        # Read before the registry so a clear during the scan voids our cache write.
        generation = self.cache.generation

        # Exact-host routes are answered directly and never cached.
        if self.registry.has_host(key):
            record_event(constants.EVENT_HOST_MATCH)
            self._emit(f"{key} found in address list")
            return True

        packed = query.packed
        for entry in self.registry.networks():
            outcome = entry.test(packed)
            if outcome is EntryOutcome.INVALID_MASK:
                logger.debug(
                    "skipping network with non-contiguous netmask",
                    extra={"address": key, "extra": {"network": str(entry)}},
                )
                continue
            if outcome is EntryOutcome.NO_MATCH:
                continue

            record_event(constants.EVENT_NETWORK_MATCH)
            self._emit(f"{key} matched {entry} from address list")
            if not self._cache_enabled:
                return True
            if self.cache.add(key, self._clock(), generation=generation):
                record_event(constants.EVENT_CACHE_ADD)
                self._emit(f"{key} added to cache")
            elif self.cache.generation != generation:
                self._emit(f"{key} not cached, address list changed")
            return True

        record_event(constants.EVENT_NO_MATCH)
        self._emit(f"{key} does not match")
        return False

    def all(self) -> list[str]:
        """List registered networks as ``address/netmask`` strings, oldest first."""
        return [str(entry) for entry in self.registry.entries()]
