"""Aggregate stats over the catalog, cached behind a small state machine.

    EMPTY --get()--> COMPUTING --ok--> READY --invalidate()--> EMPTY
                         |
                         +--failure--> EMPTY (error raised to the caller)

``invalidate`` is registered as a write listener on the store. Edits made
outside the process are caught by comparing the store fingerprint on read.
Recompute never suspends, so an invalidation can only land mid-compute from a
re-entrant listener; such a result is returned but not cached.
"""

import enum
import logging
import time
from typing import Optional, Tuple

from catalog_browser.errors import StatsUnavailableError, StoreError
from catalog_browser.models.stats import Stats
from catalog_browser.services.store import CatalogStore

logger = logging.getLogger(__name__)


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    COMPUTING = "computing"
    READY = "ready"


class StatsCache:
    def __init__(self, store: CatalogStore) -> None:
        self._store = store
        self._state = CacheState.EMPTY
        self._stats: Optional[Stats] = None
        self._fingerprint: Optional[Tuple[int, int]] = None
        self._stale = False
        store.add_write_listener(self.invalidate)

    @property
    def state(self) -> CacheState:
        return self._state

    def invalidate(self) -> None:
        if self._state is CacheState.COMPUTING:
            self._stale = True
            return
        if self._state is CacheState.READY:
            logger.info("Stats cache invalidated")
        self._state = CacheState.EMPTY
        self._stats = None

    def get(self) -> Stats:
        if self._state is CacheState.READY and self._store.fingerprint() != self._fingerprint:
            logger.info("Catalog file changed on disk")
            self.invalidate()
        if self._state is CacheState.READY and self._stats is not None:
            return self._stats
        return self._recompute()

    def _recompute(self) -> Stats:
        self._state = CacheState.COMPUTING
        self._stale = False
        fingerprint = self._store.fingerprint()
        try:
            entries = self._store.read_all()
        except StoreError as exc:
            self._state = CacheState.EMPTY
            self._stats = None
            logger.error("Failed to calculate stats: %s", exc.message)
            raise StatsUnavailableError("Could not calculate stats.") from exc

        total = len(entries)
        average = sum(e.price for e in entries) / total if total else 0
        stats = Stats(total=total, average_price=average, timestamp=int(time.time() * 1000))

        if self._stale:
            # Invalidated mid-compute: answer this caller, but do not cache.
            self._state = CacheState.EMPTY
            self._stats = None
        else:
            self._state = CacheState.READY
            self._stats = stats
            self._fingerprint = fingerprint
            logger.info("Stats cache recalculated (%d items)", total)
        return stats
