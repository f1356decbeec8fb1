"""
Campaign management service.

CRUD on campaigns, the advertiser dashboard, and analytics updates.  All CTR
arithmetic is delegated to ``admedia.analytics``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from admedia.ad_server.middleware.metrics import (
    record_analytics_increment,
    record_analytics_rejection,
)
from admedia.ad_server.services.storage_service import ImageStorage
from admedia.analytics import CampaignAnalytics, apply_increment, format_ctr, summarize
from admedia.common.exceptions import (
    InvalidInputError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from admedia.common.logger import get_logger
from admedia.models import Campaign, CampaignStatus, CampaignType, User, UserRole
from admedia.schemas.request import CampaignDetailsUpdate
from admedia.schemas.response import (
    CampaignPerformance,
    DashboardStatsResponse,
    FormattedAnalytics,
)

logger = get_logger(__name__)

# Descriptive fields an advertiser may set on create / update
CAMPAIGN_FIELDS = (
    "campaign_name",
    "campaign_description",
    "campaign_type",
    "headline",
    "body",
    "call_to_action",
)


@dataclass
class ImageFile:
    """An uploaded image, already read into memory."""

    data: bytes
    filename: str
    content_type: str | None


def formatted(analytics: CampaignAnalytics) -> FormattedAnalytics:
    return FormattedAnalytics(**analytics.to_dict(formatted=True))


def _check_campaign_type(value: Any) -> str:
    try:
        return CampaignType(value).value
    except ValueError as e:
        raise ValidationError(
            "Invalid campaign type",
            details={"campaign_type": value, "allowed": [t.value for t in CampaignType]},
        ) from e


class CampaignService:
    """Campaign persistence and analytics workflows."""

    def __init__(self, session: AsyncSession, storage: ImageStorage | None = None):
        self.session = session
        self.storage = storage

    # ==================== Lookup ====================

    async def get(self, campaign_id: int) -> Campaign:
        result = await self.session.execute(select(Campaign).where(Campaign.id == campaign_id))
        campaign = result.scalar_one_or_none()
        if campaign is None:
            raise NotFoundError("Campaign not found", details={"campaign_id": campaign_id})
        return campaign

    async def get_owned(self, campaign_id: int, advertiser_id: int) -> Campaign:
        """A campaign of another advertiser is reported as not found."""
        result = await self.session.execute(
            select(Campaign).where(
                Campaign.id == campaign_id,
                Campaign.advertiser_id == advertiser_id,
            )
        )
        campaign = result.scalar_one_or_none()
        if campaign is None:
            raise NotFoundError("Campaign not found", details={"campaign_id": campaign_id})
        return campaign

    async def list_all(self) -> list[Campaign]:
        result = await self.session.execute(
            select(Campaign).order_by(Campaign.created_at.desc(), Campaign.id.desc())
        )
        return list(result.scalars().all())

    async def list_for_advertiser(self, advertiser_id: int) -> list[Campaign]:
        result = await self.session.execute(
            select(Campaign)
            .where(Campaign.advertiser_id == advertiser_id)
            .order_by(Campaign.created_at.desc(), Campaign.id.desc())
        )
        return list(result.scalars().all())

    # ==================== CRUD ====================

    async def _upload(self, image: ImageFile) -> str:
        if self.storage is None:
            raise RuntimeError("CampaignService was created without image storage")
        return await self.storage.upload(image.data, image.filename, image.content_type or "")

    async def create(
        self,
        advertiser: User,
        fields: dict[str, Any],
        image: ImageFile | None,
    ) -> Campaign:
        if image is None:
            raise ValidationError("Image is required")

        missing = [name for name in CAMPAIGN_FIELDS if not fields.get(name)]
        if missing:
            raise ValidationError("Missing required fields", details={"missing": missing})
        campaign_type = _check_campaign_type(fields["campaign_type"])

        image_url = await self._upload(image)

        campaign = Campaign(
            advertiser_id=advertiser.id,
            campaign_name=fields["campaign_name"],
            campaign_description=fields["campaign_description"],
            campaign_type=campaign_type,
            headline=fields["headline"],
            body=fields["body"],
            call_to_action=fields["call_to_action"],
            image_url=image_url,
            status=CampaignStatus.ACTIVE.value,
            impressions=0,
            clicks=0,
        )
        campaign.advertiser = advertiser
        self.session.add(campaign)
        await self.session.flush()
        await self.session.refresh(campaign)
        logger.info("Campaign created", campaign_id=campaign.id, advertiser_id=advertiser.id)
        return campaign

    async def update(
        self,
        campaign_id: int,
        advertiser_id: int,
        fields: dict[str, Any],
        image: ImageFile | None = None,
    ) -> Campaign:
        """Owner update of descriptive fields, optionally replacing the image."""
        campaign = await self.get_owned(campaign_id, advertiser_id)

        updates = {name: value for name, value in fields.items() if name in CAMPAIGN_FIELDS and value}
        if "campaign_type" in updates:
            updates["campaign_type"] = _check_campaign_type(updates["campaign_type"])
        if image is not None:
            updates["image_url"] = await self._upload(image)

        for name, value in updates.items():
            setattr(campaign, name, value)

        await self.session.flush()
        await self.session.refresh(campaign)
        logger.info("Campaign updated", campaign_id=campaign_id, fields=sorted(updates))
        return campaign

    async def delete(self, campaign_id: int, advertiser_id: int) -> None:
        campaign = await self.get_owned(campaign_id, advertiser_id)
        await self.session.delete(campaign)
        await self.session.flush()
        logger.info("Campaign deleted", campaign_id=campaign_id)

    async def update_details(
        self,
        campaign_id: int,
        body: CampaignDetailsUpdate,
        editor: User,
    ) -> Campaign:
        """Admins may edit any campaign, advertisers only their own."""
        if editor.role == UserRole.ADMIN.value:
            campaign = await self.get(campaign_id)
        else:
            campaign = await self.get_owned(campaign_id, editor.id)
        for name, value in body.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(campaign, name, getattr(value, "value", value))
        await self.session.flush()
        await self.session.refresh(campaign)
        logger.info("Campaign details updated", campaign_id=campaign_id)
        return campaign

    async def update_status(self, campaign_id: int, status: str) -> Campaign:
        try:
            new_status = CampaignStatus(status)
        except ValueError as e:
            raise ValidationError(
                "Invalid status value",
                details={"status": status, "allowed": [s.value for s in CampaignStatus]},
            ) from e

        campaign = await self.get(campaign_id)
        campaign.status = new_status.value
        await self.session.flush()
        await self.session.refresh(campaign)
        logger.info("Campaign status updated", campaign_id=campaign_id, status=new_status.value)
        return campaign

    # ==================== Analytics ====================

    async def update_analytics(
        self,
        campaign_id: int,
        impressions: Any,
        clicks: Any,
    ) -> CampaignAnalytics:
        """
        Increment a campaign's counters.

        The row is read with FOR UPDATE (where the backend supports it) and
        written back in the same transaction.  A rejected increment leaves
        the stored counters untouched.
        """
        result = await self.session.execute(
            select(Campaign).where(Campaign.id == campaign_id).with_for_update()
        )
        campaign = result.scalar_one_or_none()
        if campaign is None:
            raise NotFoundError("Campaign not found", details={"campaign_id": campaign_id})

        current = campaign.analytics
        try:
            updated = apply_increment(current, impressions, clicks)
        except InvariantViolationError:
            record_analytics_rejection("clicks_exceed_impressions")
            raise
        except InvalidInputError:
            record_analytics_rejection("invalid_input")
            raise

        campaign.analytics = updated
        await self.session.flush()
        await self.session.refresh(campaign)

        record_analytics_increment(
            updated.impressions - current.impressions,
            updated.clicks - current.clicks,
        )
        logger.info(
            "Campaign analytics updated",
            campaign_id=campaign_id,
            impressions=updated.impressions,
            clicks=updated.clicks,
            ctr=format_ctr(updated.ctr),
        )
        return campaign.analytics

    async def dashboard_stats(self, advertiser_id: int) -> DashboardStatsResponse:
        campaigns = await self.list_for_advertiser(advertiser_id)
        totals = summarize(c.analytics for c in campaigns)
        active = sum(1 for c in campaigns if c.status == CampaignStatus.ACTIVE.value)

        return DashboardStatsResponse(
            active_campaigns=active,
            total_impressions=totals.impressions,
            total_clicks=totals.clicks,
            overall_ctr=format_ctr(totals.ctr),
            campaigns=[
                CampaignPerformance(
                    id=c.id,
                    name=c.campaign_name,
                    type=c.campaign_type,
                    status=c.status,
                    performance=formatted(c.analytics),
                )
                for c in campaigns
            ],
        )
