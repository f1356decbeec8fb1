"""
Pydantic schemas for AdMedia API requests and responses.
"""

from admedia.schemas.request import (
    AnalyticsIncrementRequest,
    CampaignDetailsUpdate,
    CampaignStatusRequest,
    LoginRequest,
    RegisterRequest,
)
from admedia.schemas.response import (
    AdvertiserSummary,
    AnalyticsOut,
    AnalyticsUpdateResponse,
    CampaignAnalyticsResponse,
    CampaignMessage,
    CampaignOut,
    CampaignPerformance,
    CampaignStatusMessage,
    CampaignStatusOut,
    DashboardStatsResponse,
    ErrorResponse,
    FormattedAnalytics,
    HealthResponse,
    MessageResponse,
    TokenResponse,
    UserMessage,
    UserOut,
)

__all__ = [
    # Request schemas
    "RegisterRequest",
    "LoginRequest",
    "AnalyticsIncrementRequest",
    "CampaignStatusRequest",
    "CampaignDetailsUpdate",
    # Response schemas
    "UserOut",
    "UserMessage",
    "TokenResponse",
    "AdvertiserSummary",
    "AnalyticsOut",
    "FormattedAnalytics",
    "CampaignOut",
    "CampaignMessage",
    "CampaignStatusOut",
    "CampaignStatusMessage",
    "CampaignAnalyticsResponse",
    "AnalyticsUpdateResponse",
    "CampaignPerformance",
    "DashboardStatsResponse",
    "MessageResponse",
    "HealthResponse",
    "ErrorResponse",
]
