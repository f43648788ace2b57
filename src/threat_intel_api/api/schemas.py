"""Response models for the API envelopes (used for validation and OpenAPI docs)."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    timestamp: str


# ---------------------------------------------------------------------------
# Indicators
# ---------------------------------------------------------------------------

class PaginationModel(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class SearchMeta(BaseModel):
    pagination: PaginationModel


class IndicatorSearchResponse(BaseModel):
    success: bool = True
    # Indicator rows are passed through with every stored column
    data: List[Dict[str, Any]]
    meta: SearchMeta


class IndicatorDetailResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]


# ---------------------------------------------------------------------------
# Campaign timeline
# ---------------------------------------------------------------------------

class TimelineIndicator(BaseModel):
    id: str
    type: str
    value: str
    confidence: int
    observed_at: str
    day_key: Optional[str] = None
    week_key: Optional[str] = None


class TimelineGroupModel(BaseModel):
    period: str
    indicators: List[TimelineIndicator]
    counts_by_type: Dict[str, int]
    total: int


class CampaignTimelineModel(BaseModel):
    campaign_id: str
    groups: List[TimelineGroupModel]


class CampaignTimelineResponse(BaseModel):
    success: bool = True
    data: CampaignTimelineModel


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class DistributionModel(BaseModel):
    type: str
    count: int


class TopEntityModel(BaseModel):
    id: str
    name: str
    count: int


class DashboardSummaryModel(BaseModel):
    indicator_distribution: List[DistributionModel]
    new_indicators_count: int
    active_campaigns_count: int
    top_threat_actors: List[TopEntityModel]
    recent_observations_count: int
    top_campaigns: List[TopEntityModel]
    time_range: str
    generated_at: str = Field(..., description="ISO 8601 UTC time the snapshot was computed")


class DashboardSummaryResponse(BaseModel):
    success: bool = True
    data: DashboardSummaryModel
