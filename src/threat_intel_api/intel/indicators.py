# Intel Module - Indicator Lookup & Search
#
# Point lookup joins an indicator with its threat actors, campaigns and
# related indicators. Search applies optional filters and returns one
# page plus the total match count.

import asyncio
from typing import Any, Dict

from ..core.errors import NotFoundError
from .models import SearchFilters, SearchResult
from .pagination import to_offset


class IndicatorService:
    """Read-side queries over indicators."""

    def __init__(self, store):
        self._store = store

    async def get_indicator_by_id(self, indicator_id: str) -> Dict[str, Any]:
        """Indicator row plus ``threat_actors``, ``campaigns``, ``related_indicators``.

        Raises:
            NotFoundError: if no indicator has ``indicator_id``.
        """
        store = self._store
        indicator, actors, campaigns, related = await asyncio.gather(
            asyncio.to_thread(store.get_indicator, indicator_id),
            asyncio.to_thread(store.get_indicator_threat_actors, indicator_id),
            asyncio.to_thread(store.get_indicator_campaigns, indicator_id),
            asyncio.to_thread(store.get_related_indicators, indicator_id),
        )

        if not indicator:
            raise NotFoundError("Indicator", indicator_id)

        return {
            **indicator,
            "threat_actors": actors,
            "campaigns": campaigns,
            "related_indicators": related,
        }

    async def search_indicators(
        self, filters: SearchFilters, page: int, limit: int
    ) -> SearchResult:
        window = to_offset(page, limit)
        indicators, total = await asyncio.gather(
            asyncio.to_thread(
                self._store.search_indicators, filters, window.limit, window.offset
            ),
            asyncio.to_thread(self._store.count_indicators, filters),
        )
        return SearchResult(indicators=indicators, total=total)
