"""
cache.py - TTL snapshot of the loaded earthquake catalog

Loading a multi-year history is expensive, so the catalog is held as an
immutable snapshot and only reloaded after the TTL expires.

Refresh semantics:
- One caller at a time refreshes; the snapshot is swapped in with a single
  assignment, so readers never see a partial load
- While a refresh is running, other callers get the previous snapshot
- Callers only wait when there is no snapshot at all yet
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from .events import Earthquake

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60


@dataclass(frozen=True)
class Snapshot:
    earthquakes: Tuple[Earthquake, ...]
    loaded_at: float


class SnapshotCache:
    """
    Time-to-live cache around an earthquake loader.

    Args:
        loader: Callable returning the full event collection
        ttl_seconds: Snapshot lifetime
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(self,
                 loader: Callable[[], Iterable[Earthquake]],
                 ttl_seconds: float = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.loader = loader
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._snapshot: Optional[Snapshot] = None
        self._expired = False
        self._generation = 0
        self._refresh_lock = threading.Lock()

    def age(self) -> Optional[float]:
        """Seconds since the current snapshot was loaded, or None if never loaded."""
        snapshot = self._snapshot
        if snapshot is None:
            return None
        return self.clock() - snapshot.loaded_at

    def is_stale(self) -> bool:
        snapshot = self._snapshot
        if snapshot is None or self._expired:
            return True
        return self.clock() - snapshot.loaded_at >= self.ttl_seconds

    def get(self) -> Tuple[Earthquake, ...]:
        """Return the current snapshot, reloading it first if stale."""
        snapshot = self._snapshot
        if snapshot is not None and not self.is_stale():
            return snapshot.earthquakes

        if snapshot is not None:
            # Someone else is already refreshing: serve the previous snapshot
            if not self._refresh_lock.acquire(blocking=False):
                return snapshot.earthquakes
        else:
            self._refresh_lock.acquire()

        try:
            # Re-check: another caller may have refreshed while we waited
            current = self._snapshot
            if current is not None and not self.is_stale():
                return current.earthquakes
            return self._refresh(current)
        finally:
            self._refresh_lock.release()

    def invalidate(self) -> None:
        """Force the next get() to reload."""
        self._generation += 1
        self._expired = True
        logger.debug("Snapshot invalidated")

    def _refresh(self, previous: Optional[Snapshot]) -> Tuple[Earthquake, ...]:
        start = self.clock()
        generation = self._generation
        try:
            earthquakes = tuple(self.loader())
        except Exception as e:
            if previous is None:
                raise
            logger.error(f"Snapshot refresh failed, serving previous snapshot: {e}")
            return previous.earthquakes

        self._snapshot = Snapshot(earthquakes=earthquakes, loaded_at=self.clock())
        # An invalidate() during the load keeps the new snapshot stale
        if self._generation == generation:
            self._expired = False
        logger.info(f"Loaded snapshot of {len(earthquakes)} earthquakes "
                    f"in {self.clock() - start:.2f}s")
        return earthquakes
