# Intel Module - Dashboard Statistics & Snapshot Cache
#
# The dashboard summary is six independent store queries gathered into
# one DashboardSnapshot. The latest snapshot is memoized in a single
# slot keyed by time range with a fixed TTL (5 minutes by default).
#
# There is exactly one slot: asking for a different time range always
# misses and replaces the cached snapshot.

import asyncio
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from .models import DashboardSnapshot, IndicatorDistribution, TimeRange, TopEntity

DEFAULT_TTL_SECONDS = 300.0


@dataclass
class CacheEntry:
    """The cached snapshot plus the clock reading and range it was built for."""

    snapshot: DashboardSnapshot
    stored_at: float
    time_range: str


class SnapshotCache:
    """Thread-safe single-slot snapshot cache with a fixed TTL (seconds).

    ``clock`` returns the current time in seconds; it defaults to
    ``time.monotonic`` and can be swapped for a fake in tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: Optional[CacheEntry] = None

    def get(self, time_range: str) -> Optional[DashboardSnapshot]:
        """Return the cached snapshot if it is fresh and for ``time_range``."""
        with self._lock:
            entry = self._entry
            if entry is None or entry.time_range != time_range:
                return None
            if self._clock() - entry.stored_at >= self.ttl:
                return None
            return entry.snapshot

    def put(self, time_range: str, snapshot: DashboardSnapshot) -> None:
        """Overwrite the slot unconditionally."""
        with self._lock:
            self._entry = CacheEntry(
                snapshot=snapshot,
                stored_at=self._clock(),
                time_range=time_range,
            )

    def clear(self) -> None:
        with self._lock:
            self._entry = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        with self._lock:
            return self._entry


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class DashboardAggregator:
    """Computes and caches the dashboard summary.

    Misses are serialized behind an ``asyncio.Lock`` so that concurrent
    requests for the same range wait for the first computation instead
    of repeating the six queries. Hits take the lock-free path.
    """

    def __init__(self, store, cache: Optional[SnapshotCache] = None):
        self._store = store
        self.cache = cache if cache is not None else SnapshotCache()
        self._lock = asyncio.Lock()

    async def get_dashboard_stats(
        self, time_range: str = TimeRange.LAST_7D.value
    ) -> DashboardSnapshot:
        if isinstance(time_range, TimeRange):
            time_range = time_range.value

        cached = self.cache.get(time_range)
        if cached is not None:
            return cached

        async with self._lock:
            cached = self.cache.get(time_range)
            if cached is not None:
                return cached

            snapshot = await self._compute(time_range)
            self.cache.put(time_range, snapshot)
            return snapshot

    async def _compute(self, time_range: str) -> DashboardSnapshot:
        store = self._store
        (
            distribution,
            new_indicators,
            active_campaigns,
            top_actors,
            recent_observations,
            top_campaigns,
        ) = await asyncio.gather(
            asyncio.to_thread(store.get_indicator_distribution),
            asyncio.to_thread(store.get_new_indicators_count, time_range),
            asyncio.to_thread(store.get_active_campaigns_count),
            asyncio.to_thread(store.get_top_threat_actors),
            asyncio.to_thread(store.get_recent_observations_count, time_range),
            asyncio.to_thread(store.get_top_campaigns),
        )

        return DashboardSnapshot(
            indicator_distribution=[IndicatorDistribution.from_row(r) for r in distribution],
            new_indicators_count=new_indicators,
            active_campaigns_count=active_campaigns,
            top_threat_actors=[TopEntity.from_row(r) for r in top_actors],
            recent_observations_count=recent_observations,
            top_campaigns=[TopEntity.from_row(r) for r in top_campaigns],
            time_range=time_range,
            generated_at=_utc_now_iso(),
        )

    def clear_cache(self) -> None:
        """Drop the cached snapshot; the next call recomputes."""
        self.cache.clear()
