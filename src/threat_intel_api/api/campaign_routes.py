"""Campaign API routes - indicator timeline."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ..intel.models import GroupBy
from .response import success_response
from .schemas import CampaignTimelineResponse
from .services import AppServices, get_services
from .validators import iso_datetime

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


@router.get("/{campaign_id}/indicators", response_model=CampaignTimelineResponse)
async def get_campaign_timeline(
    campaign_id: UUID,
    group_by: GroupBy = Query(GroupBy.DAY),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    services: AppServices = Depends(get_services),
):
    """Campaign indicators grouped into day or week buckets, newest first."""
    timeline = await services.timeline.get_campaign_timeline(
        str(campaign_id),
        group_by,
        iso_datetime("start_date", start_date),
        iso_datetime("end_date", end_date),
    )
    return success_response(timeline.to_dict())
