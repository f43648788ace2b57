# Intel Module - Threat Intelligence Aggregation
#
# Read-side services over the threat-intel store: campaign timelines,
# dashboard statistics with a snapshot cache, indicator lookup/search,
# and pagination helpers.

from .models import (
    IndicatorType,
    TimeRange,
    GroupBy,
    IndicatorTimelineEntry,
    TimelineGroup,
    CampaignTimeline,
    IndicatorDistribution,
    TopEntity,
    DashboardSnapshot,
    SearchFilters,
    SearchResult,
    time_range_modifier,
)
from .pagination import PageWindow, PaginationMeta, to_offset, to_meta
from .timeline import TimelineAggregator, group_entries
from .dashboard import CacheEntry, DashboardAggregator, SnapshotCache
from .indicators import IndicatorService

__all__ = [
    # Data models
    "IndicatorType",
    "TimeRange",
    "GroupBy",
    "IndicatorTimelineEntry",
    "TimelineGroup",
    "CampaignTimeline",
    "IndicatorDistribution",
    "TopEntity",
    "DashboardSnapshot",
    "SearchFilters",
    "SearchResult",
    "time_range_modifier",
    # Pagination
    "PageWindow",
    "PaginationMeta",
    "to_offset",
    "to_meta",
    # Timeline
    "TimelineAggregator",
    "group_entries",
    # Dashboard
    "CacheEntry",
    "DashboardAggregator",
    "SnapshotCache",
    # Indicators
    "IndicatorService",
]
