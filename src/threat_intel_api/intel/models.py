# Intel Module - Aggregation Data Models
#
# Value types produced by the aggregation layer:
#   IndicatorTimelineEntry - one observation of one indicator in a campaign
#   TimelineGroup          - one day/week bucket of timeline entries
#   CampaignTimeline       - all buckets for a campaign
#   DashboardSnapshot      - composite dashboard statistics
#
# Entity rows (indicators, campaigns, ...) travel as plain dicts straight
# from the store; only derived structures get their own types.

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class IndicatorType(str, Enum):
    """Classification of an indicator's observable."""

    IP = "ip"
    DOMAIN = "domain"
    URL = "url"
    HASH = "hash"


class TimeRange(str, Enum):
    """Look-back window for dashboard count statistics."""

    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"


class GroupBy(str, Enum):
    """Bucket granularity for campaign timelines."""

    DAY = "day"
    WEEK = "week"


# SQLite datetime() modifiers per time range
_TIME_RANGE_MODIFIERS: Dict[str, str] = {
    "24h": "-1 days",
    "7d": "-7 days",
    "30d": "-30 days",
}


def time_range_modifier(time_range: str) -> str:
    """Map a time-range selector to a relative datetime modifier.

    Unknown selectors fall back to the 7-day window.
    """
    key = time_range.value if isinstance(time_range, TimeRange) else time_range
    return _TIME_RANGE_MODIFIERS.get(key, _TIME_RANGE_MODIFIERS["7d"])


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------


@dataclass
class IndicatorTimelineEntry:
    """An indicator observed in a campaign, pre-tagged with bucket keys."""

    id: str
    type: str
    value: str
    confidence: int = 0
    observed_at: str = ""
    day_key: Optional[str] = None   # YYYY-MM-DD
    week_key: Optional[str] = None  # YYYY-Www

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> "IndicatorTimelineEntry":
        return IndicatorTimelineEntry(
            id=row["id"],
            type=row["type"],
            value=row["value"],
            confidence=row.get("confidence", 0),
            observed_at=row.get("observed_at", ""),
            day_key=row.get("day_key"),
            week_key=row.get("week_key"),
        )


@dataclass
class TimelineGroup:
    """One time bucket of a campaign timeline."""

    period: str
    indicators: List[IndicatorTimelineEntry] = field(default_factory=list)
    counts_by_type: Dict[str, int] = field(default_factory=dict)
    total: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "indicators": [e.to_dict() for e in self.indicators],
            "counts_by_type": dict(self.counts_by_type),
            "total": self.total,
        }


@dataclass
class CampaignTimeline:
    """Campaign indicators grouped into reverse-chronological buckets."""

    campaign_id: str
    groups: List[TimelineGroup] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "campaign_id": self.campaign_id,
            "groups": [g.to_dict() for g in self.groups],
        }


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@dataclass
class IndicatorDistribution:
    """Indicator count for a single indicator type."""

    type: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> "IndicatorDistribution":
        return IndicatorDistribution(type=row["type"], count=row["count"])


@dataclass
class TopEntity:
    """A ranked entity (threat actor or campaign) with its count."""

    id: str
    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> "TopEntity":
        return TopEntity(id=row["id"], name=row["name"], count=row["count"])


@dataclass
class DashboardSnapshot:
    """Composite dashboard statistics for one time range."""

    indicator_distribution: List[IndicatorDistribution] = field(default_factory=list)
    new_indicators_count: int = 0
    active_campaigns_count: int = 0
    top_threat_actors: List[TopEntity] = field(default_factory=list)
    recent_observations_count: int = 0
    top_campaigns: List[TopEntity] = field(default_factory=list)
    time_range: str = TimeRange.LAST_7D.value
    generated_at: str = ""  # ISO 8601, UTC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "indicator_distribution": [d.to_dict() for d in self.indicator_distribution],
            "new_indicators_count": self.new_indicators_count,
            "active_campaigns_count": self.active_campaigns_count,
            "top_threat_actors": [a.to_dict() for a in self.top_threat_actors],
            "recent_observations_count": self.recent_observations_count,
            "top_campaigns": [c.to_dict() for c in self.top_campaigns],
            "time_range": self.time_range,
            "generated_at": self.generated_at,
        }


# ---------------------------------------------------------------------------
# Indicator search
# ---------------------------------------------------------------------------


@dataclass
class SearchFilters:
    """Optional, AND-combined indicator search filters."""

    type: Optional[str] = None
    value: Optional[str] = None
    threat_actor: Optional[str] = None
    campaign: Optional[str] = None
    first_seen_after: Optional[str] = None
    last_seen_before: Optional[str] = None


@dataclass
class SearchResult:
    """One page of indicator rows plus the unpaginated match count."""

    indicators: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
