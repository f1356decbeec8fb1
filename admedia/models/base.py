"""
Base model and shared enums for the SQLAlchemy ORM.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""
    pass


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now(), nullable=False
    )


class UserRole(str, Enum):
    """Account role."""
    USER = "USER"
    ADVERTISER = "ADVERTISER"   # Owns campaigns
    ADMIN = "ADMIN"             # Moderates campaign status


class CampaignType(str, Enum):
    """Creative format of a campaign."""
    BANNER = "BANNER"
    FEATURED = "FEATURED"
    INTERACTIVE = "INTERACTIVE"


class CampaignStatus(str, Enum):
    """Campaign lifecycle status."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
