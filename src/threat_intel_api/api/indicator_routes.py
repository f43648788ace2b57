"""Indicator API routes - point lookup and filtered search."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ..intel.models import IndicatorType, SearchFilters
from ..intel.pagination import to_meta
from .response import success_response
from .schemas import IndicatorDetailResponse, IndicatorSearchResponse
from .services import AppServices, get_services
from .validators import iso_datetime

router = APIRouter(prefix="/api/indicators", tags=["indicators"])


@router.get("/search", response_model=IndicatorSearchResponse)
async def search_indicators(
    indicator_type: Optional[IndicatorType] = Query(None, alias="type"),
    value: Optional[str] = Query(None),
    threat_actor: Optional[UUID] = Query(None),
    campaign: Optional[UUID] = Query(None),
    first_seen_after: Optional[str] = Query(None),
    last_seen_before: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    services: AppServices = Depends(get_services),
):
    """Search indicators with optional filters, paginated."""
    filters = SearchFilters(
        type=indicator_type.value if indicator_type else None,
        value=value,
        threat_actor=str(threat_actor) if threat_actor else None,
        campaign=str(campaign) if campaign else None,
        first_seen_after=iso_datetime("first_seen_after", first_seen_after),
        last_seen_before=iso_datetime("last_seen_before", last_seen_before),
    )
    result = await services.indicators.search_indicators(filters, page, limit)
    return success_response(
        result.indicators,
        meta={"pagination": to_meta(page, limit, result.total).to_dict()},
    )


@router.get("/{indicator_id}", response_model=IndicatorDetailResponse)
async def get_indicator(
    indicator_id: UUID,
    services: AppServices = Depends(get_services),
):
    """Indicator detail with threat actors, campaigns and related indicators."""
    indicator = await services.indicators.get_indicator_by_id(str(indicator_id))
    return success_response(indicator)
