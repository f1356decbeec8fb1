"""
API request schemas.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from admedia.models.base import CampaignStatus, CampaignType, UserRole


class RegisterRequest(BaseModel):
    """Account registration."""

    full_name: str = Field(..., min_length=1, max_length=255)
    company_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, description="At most 72 bytes (bcrypt limit)")
    role: UserRole = Field(UserRole.USER, description="USER or ADVERTISER")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v


class LoginRequest(BaseModel):
    """Email / password login."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class AnalyticsIncrementRequest(BaseModel):
    """
    Impressions / clicks to add to a campaign.

    Values are typed loosely on purpose: numeric and sign checks are done by
    the analytics aggregator so that every rejection is reported the same way.
    """

    impressions: Any = Field(..., description="Impressions to add (>= 0)")
    clicks: Any = Field(..., description="Clicks to add (>= 0)")

    model_config = {
        "json_schema_extra": {"example": {"impressions": 50, "clicks": 4}}
    }


class CampaignStatusRequest(BaseModel):
    """Admin status change. Validated against CampaignStatus by the service."""

    status: str = Field(..., description="PENDING, ACTIVE, PAUSED or COMPLETED")


class CampaignDetailsUpdate(BaseModel):
    """JSON partial update of a campaign. Analytics are not writable here."""

    campaign_name: str | None = Field(None, max_length=255)
    campaign_description: str | None = None
    campaign_type: CampaignType | None = None
    headline: str | None = Field(None, max_length=255)
    body: str | None = None
    call_to_action: str | None = Field(None, max_length=255)
    status: CampaignStatus | None = None

    model_config = {"extra": "ignore"}
