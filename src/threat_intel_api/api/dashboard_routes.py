"""Dashboard API routes - cached summary statistics."""

from fastapi import APIRouter, Depends, Query

from ..intel.models import TimeRange
from .response import success_response
from .schemas import DashboardSummaryResponse
from .services import AppServices, get_services

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def get_dashboard_summary(
    time_range: TimeRange = Query(TimeRange.LAST_7D),
    services: AppServices = Depends(get_services),
):
    """Dashboard summary for a look-back window (cached for 5 minutes)."""
    snapshot = await services.dashboard.get_dashboard_stats(time_range.value)
    return success_response(snapshot.to_dict())
