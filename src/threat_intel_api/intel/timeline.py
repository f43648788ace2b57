# Intel Module - Campaign Timeline Aggregation
#
# Groups a campaign's indicator observations into day or week buckets.
# Bucket labels are zero-padded (YYYY-MM-DD, YYYY-Www) so a plain
# descending string sort is reverse-chronological. Entries without a
# bucket key land in "unknown", which is ordered by the same string
# comparison as every other label.

import asyncio
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ..core.errors import NotFoundError
from .models import CampaignTimeline, GroupBy, IndicatorTimelineEntry, TimelineGroup

UNKNOWN_PERIOD = "unknown"

_KEY_FIELDS: Dict[GroupBy, str] = {
    GroupBy.DAY: "day_key",
    GroupBy.WEEK: "week_key",
}


def group_entries(
    entries: Iterable[IndicatorTimelineEntry],
    group_by: GroupBy = GroupBy.DAY,
) -> List[TimelineGroup]:
    """Partition entries into period buckets, newest period first."""
    key_field = _KEY_FIELDS[GroupBy(group_by)]
    grouped: Dict[str, List[IndicatorTimelineEntry]] = defaultdict(list)

    for entry in entries:
        period = getattr(entry, key_field) or UNKNOWN_PERIOD
        grouped[period].append(entry)

    groups: List[TimelineGroup] = []
    for period, members in grouped.items():
        counts: Dict[str, int] = defaultdict(int)
        for entry in members:
            counts[entry.type] += 1
        groups.append(TimelineGroup(
            period=period,
            indicators=members,
            counts_by_type=dict(counts),
            total=len(members),
        ))

    return sorted(groups, key=lambda g: g.period, reverse=True)


class TimelineAggregator:
    """Builds campaign timelines from the store. Recomputes on every call."""

    def __init__(self, store):
        self._store = store

    async def get_campaign_timeline(
        self,
        campaign_id: str,
        group_by: GroupBy = GroupBy.DAY,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> CampaignTimeline:
        """Timeline for one campaign, bounded by optional inclusive dates.

        Raises:
            NotFoundError: if the campaign does not exist.
        """
        campaign = await asyncio.to_thread(self._store.get_campaign, campaign_id)
        if not campaign:
            raise NotFoundError("Campaign", campaign_id)

        rows = await asyncio.to_thread(
            self._store.get_campaign_indicators, campaign_id, start_date, end_date
        )
        entries = [IndicatorTimelineEntry.from_row(r) for r in rows]

        return CampaignTimeline(
            campaign_id=campaign_id,
            groups=group_entries(entries, group_by),
        )
