"""
Tests for the campaign model's derived CTR.
"""

from typing import Any, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from admedia.analytics import CampaignAnalytics
from admedia.models import Campaign, User


@pytest.mark.asyncio
async def test_ctr_derived_on_insert(
    advertiser: User,
    make_campaign: Callable[..., Any],
) -> None:
    campaign = await make_campaign(advertiser, impressions=150, clicks=14)
    assert campaign.ctr == pytest.approx(9.3333, rel=1e-4)


@pytest.mark.asyncio
async def test_ctr_zero_without_impressions(
    advertiser: User,
    make_campaign: Callable[..., Any],
) -> None:
    campaign = await make_campaign(advertiser)
    assert campaign.analytics == CampaignAnalytics(0, 0, 0.0)


@pytest.mark.asyncio
async def test_ctr_rederived_on_update(
    test_db: AsyncSession,
    advertiser: User,
    make_campaign: Callable[..., Any],
) -> None:
    campaign = await make_campaign(advertiser, impressions=100, clicks=10)

    campaign.clicks = 40
    campaign.ctr = 1.0  # overwritten on flush
    await test_db.flush()
    await test_db.refresh(campaign)

    assert campaign.ctr == 40.0


@pytest.mark.asyncio
async def test_ctr_rederived_when_other_fields_change(
    test_db: AsyncSession,
    advertiser: User,
    make_campaign: Callable[..., Any],
) -> None:
    campaign = await make_campaign(advertiser, impressions=50, clicks=5)
    campaign.ctr = 77.0
    campaign.headline = "Changed"
    await test_db.flush()

    stored = await test_db.get(Campaign, campaign.id)
    assert stored.ctr == 10.0


@pytest.mark.asyncio
async def test_analytics_property(
    advertiser: User,
    make_campaign: Callable[..., Any],
) -> None:
    campaign = await make_campaign(advertiser, impressions=8, clicks=2)

    campaign.analytics = CampaignAnalytics(impressions=10, clicks=3, ctr=30.0)

    assert (campaign.impressions, campaign.clicks, campaign.ctr) == (10, 3, 30.0)
    assert campaign.analytics.to_dict(formatted=True)["ctr"] == "30.00"
