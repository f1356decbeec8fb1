"""
Account and campaign database models.

Defines: User, Campaign
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Float, ForeignKey, Integer, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from admedia.analytics import CampaignAnalytics, recompute
from admedia.models.base import (
    Base,
    CampaignStatus,
    TimestampMixin,
    UserRole,
)


class User(Base, TimestampMixin):
    """Registered account: plain user, advertiser or admin."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value, nullable=False)

    # Relationships
    campaigns: Mapped[list["Campaign"]] = relationship(
        "Campaign",
        back_populates="advertiser",
        cascade="all, delete-orphan",
    )


class Campaign(Base, TimestampMixin):
    """Advertising creative owned by an advertiser, with analytics counters."""

    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    advertiser_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Creative
    campaign_name: Mapped[str] = mapped_column(String(255), nullable=False)
    campaign_description: Mapped[str] = mapped_column(Text, nullable=False)
    campaign_type: Mapped[str] = mapped_column(String(20), nullable=False)
    headline: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    call_to_action: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default=CampaignStatus.ACTIVE.value, nullable=False, index=True
    )

    # Analytics; ctr is derived on every flush, see _derive_ctr below
    impressions: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    clicks: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    ctr: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    # Relationships
    advertiser: Mapped["User"] = relationship(
        "User", back_populates="campaigns", lazy="selectin"
    )

    @property
    def analytics(self) -> CampaignAnalytics:
        return CampaignAnalytics(
            impressions=self.impressions or 0,
            clicks=self.clicks or 0,
            ctr=self.ctr or 0.0,
        )

    @analytics.setter
    def analytics(self, value: CampaignAnalytics) -> None:
        self.impressions = value.impressions
        self.clicks = value.clicks
        self.ctr = value.ctr


@event.listens_for(Campaign, "before_insert")
@event.listens_for(Campaign, "before_update")
def _derive_ctr(mapper: Any, connection: Any, target: Campaign) -> None:
    """Keep the stored ctr in step with the stored counters."""
    target.analytics = recompute(target.impressions or 0, target.clicks or 0)
