"""
Database models for AdMedia.
"""

from admedia.models.base import (
    Base,
    CampaignStatus,
    CampaignType,
    TimestampMixin,
    UserRole,
)
from admedia.models.campaign import Campaign, User

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Enums
    "UserRole",
    "CampaignType",
    "CampaignStatus",
    # Models
    "User",
    "Campaign",
]
