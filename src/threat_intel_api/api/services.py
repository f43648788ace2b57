# API - Service container
#
# Holds the store and the read-side services built on it. The API
# layer reaches services through ``get_services`` rather than module
# globals, so tests can hand in a container wired to a temp database
# or to mocks.

import logging
from typing import Optional

from fastapi import Request

from ..config import Settings
from ..db.store import IntelStore
from ..intel.dashboard import DashboardAggregator, SnapshotCache
from ..intel.indicators import IndicatorService
from ..intel.timeline import TimelineAggregator

logger = logging.getLogger(__name__)


class AppServices:
    """Owns the store, the snapshot cache and the services that use them."""

    def __init__(self, store, cache: Optional[SnapshotCache] = None):
        self.store = store
        self.snapshot_cache = cache if cache is not None else SnapshotCache()
        self.dashboard = DashboardAggregator(store, self.snapshot_cache)
        self.timeline = TimelineAggregator(store)
        self.indicators = IndicatorService(store)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppServices":
        store = IntelStore(settings.database_path)
        cache = SnapshotCache(ttl=settings.dashboard_cache_ttl)
        logger.info(
            "Services ready (db=%s, dashboard_ttl=%.0fs)",
            settings.database_path,
            settings.dashboard_cache_ttl,
        )
        return cls(store, cache)

    def close(self) -> None:
        self.store.close()


def get_services(request: Request) -> AppServices:
    """FastAPI dependency returning the app's service container."""
    return request.app.state.services
