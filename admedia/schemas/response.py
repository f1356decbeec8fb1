"""
API response schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class UserOut(BaseModel):
    id: int
    full_name: str
    company_name: str
    email: str
    role: str
    created_at: datetime | None = None
    model_config = {"from_attributes": True}


class AdvertiserSummary(BaseModel):
    """Advertiser fields embedded in campaign listings."""

    id: int
    full_name: str
    company_name: str
    model_config = {"from_attributes": True}


class AnalyticsOut(BaseModel):
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    model_config = {"from_attributes": True}


class FormattedAnalytics(BaseModel):
    """Analytics with CTR rendered as a 2-decimal string."""

    impressions: int
    clicks: int
    ctr: str = Field(..., description="Click-through rate in percent, e.g. \"9.33\"")


class CampaignOut(BaseModel):
    id: int
    campaign_name: str
    campaign_description: str
    campaign_type: str
    headline: str
    body: str
    call_to_action: str
    image_url: str
    status: str
    analytics: AnalyticsOut
    advertiser: AdvertiserSummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = {"from_attributes": True}


class CampaignMessage(BaseModel):
    message: str
    campaign: CampaignOut


class CampaignStatusOut(BaseModel):
    id: int
    status: str


class CampaignStatusMessage(BaseModel):
    message: str
    campaign: CampaignStatusOut


class CampaignAnalyticsResponse(BaseModel):
    campaign_name: str
    analytics: FormattedAnalytics


class AnalyticsUpdateResponse(BaseModel):
    message: str
    analytics: FormattedAnalytics

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "Campaign analytics updated successfully",
                "analytics": {"impressions": 150, "clicks": 14, "ctr": "9.33"},
            }
        }
    }


class CampaignPerformance(BaseModel):
    id: int
    name: str
    type: str
    status: str
    performance: FormattedAnalytics


class DashboardStatsResponse(BaseModel):
    active_campaigns: int
    total_impressions: int
    total_clicks: int
    overall_ctr: str
    campaigns: list[CampaignPerformance] = Field(default_factory=list)


class UserMessage(BaseModel):
    message: str
    user: UserOut


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserOut


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    database: bool = Field(..., description="Database connection status")


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(None, description="Error details")
    request_id: str | None = Field(None, description="Request identifier")

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "InvariantViolationError",
                "message": "Clicks cannot be greater than impressions",
                "details": {"impressions": 10, "clicks": 25},
                "request_id": "3f1c2b9e-8a51-4d0e-9a55-0d3f7c1e2b44",
            }
        }
    }
