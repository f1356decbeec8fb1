"""
Campaign router – campaign CRUD, dashboard and analytics.

Endpoints:
    POST   /api/campaigns                    – Create campaign (advertiser, multipart + image)
    GET    /api/campaigns                    – List all campaigns
    GET    /api/campaigns/dashboard/stats    – Advertiser dashboard
    GET    /api/campaigns/{id}               – Get campaign
    PUT    /api/campaigns/{id}               – Update own campaign (multipart, optional image)
    DELETE /api/campaigns/{id}               – Delete own campaign
    GET    /api/campaigns/{id}/analytics     – Own campaign analytics
    PUT    /api/campaigns/{id}/analytics     – Increment impressions / clicks
    PUT    /api/campaigns/{id}/status        – Change status (admin)
    PUT    /api/campaigns/{id}/details       – JSON update (advertiser / admin)
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from admedia.ad_server.dependencies import get_current_user, require_roles
from admedia.ad_server.services.campaign_service import CampaignService, ImageFile, formatted
from admedia.ad_server.services.storage_service import ImageStorage, get_image_storage
from admedia.common.database import get_session
from admedia.common.logger import get_logger
from admedia.models import CampaignType, User, UserRole
from admedia.schemas.request import (
    AnalyticsIncrementRequest,
    CampaignDetailsUpdate,
    CampaignStatusRequest,
)
from admedia.schemas.response import (
    AnalyticsUpdateResponse,
    CampaignAnalyticsResponse,
    CampaignMessage,
    CampaignOut,
    CampaignStatusMessage,
    CampaignStatusOut,
    DashboardStatsResponse,
    MessageResponse,
)

logger = get_logger(__name__)
router = APIRouter()


# ---------------------------------------------------------------------------
# Dependency
# ---------------------------------------------------------------------------

def _get_campaign_service(
    session: AsyncSession = Depends(get_session),
    storage: ImageStorage = Depends(get_image_storage),
) -> CampaignService:
    return CampaignService(session, storage)


async def _read_image(image: UploadFile | None) -> ImageFile | None:
    if image is None or not image.filename:
        return None
    data = await image.read()
    return ImageFile(data=data, filename=image.filename, content_type=image.content_type)


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=CampaignMessage,
    status_code=201,
    summary="Create a new campaign",
)
async def create_campaign(
    campaign_name: str = Form(...),
    campaign_description: str = Form(...),
    campaign_type: CampaignType = Form(...),
    headline: str = Form(...),
    body: str = Form(...),
    call_to_action: str = Form(...),
    image: UploadFile | None = File(None, description="Campaign image (image/*, max 5 MB)"),
    user: User = Depends(require_roles(UserRole.ADVERTISER)),
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    campaign = await service.create(
        user,
        {
            "campaign_name": campaign_name,
            "campaign_description": campaign_description,
            "campaign_type": campaign_type.value,
            "headline": headline,
            "body": body,
            "call_to_action": call_to_action,
        },
        await _read_image(image),
    )
    return CampaignMessage(
        message="Campaign created successfully",
        campaign=CampaignOut.model_validate(campaign),
    )


@router.get("", response_model=list[CampaignOut], summary="Get all campaigns")
async def list_campaigns(
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    campaigns = await service.list_all()
    return [CampaignOut.model_validate(c) for c in campaigns]


@router.get(
    "/dashboard/stats",
    response_model=DashboardStatsResponse,
    summary="Get dashboard statistics",
)
async def dashboard_stats(
    user: User = Depends(require_roles(UserRole.ADVERTISER)),
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    return await service.dashboard_stats(user.id)


# ---------------------------------------------------------------------------
# Single campaign
# ---------------------------------------------------------------------------

@router.get("/{campaign_id}", response_model=CampaignOut, summary="Get campaign details")
async def get_campaign(
    campaign_id: int,
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    return CampaignOut.model_validate(await service.get(campaign_id))


@router.put("/{campaign_id}", response_model=CampaignMessage, summary="Update own campaign")
async def update_campaign(
    campaign_id: int,
    campaign_name: str | None = Form(None),
    campaign_description: str | None = Form(None),
    campaign_type: CampaignType | None = Form(None),
    headline: str | None = Form(None),
    body: str | None = Form(None),
    call_to_action: str | None = Form(None),
    image: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    fields = {
        "campaign_name": campaign_name,
        "campaign_description": campaign_description,
        "campaign_type": campaign_type.value if campaign_type else None,
        "headline": headline,
        "body": body,
        "call_to_action": call_to_action,
    }
    campaign = await service.update(campaign_id, user.id, fields, await _read_image(image))
    return CampaignMessage(
        message="Campaign updated successfully",
        campaign=CampaignOut.model_validate(campaign),
    )


@router.delete("/{campaign_id}", response_model=MessageResponse, summary="Delete own campaign")
async def delete_campaign(
    campaign_id: int,
    user: User = Depends(get_current_user),
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    await service.delete(campaign_id, user.id)
    return MessageResponse(message="Campaign deleted successfully")


@router.get(
    "/{campaign_id}/analytics",
    response_model=CampaignAnalyticsResponse,
    summary="Get campaign analytics",
)
async def get_campaign_analytics(
    campaign_id: int,
    user: User = Depends(get_current_user),
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    campaign = await service.get_owned(campaign_id, user.id)
    return CampaignAnalyticsResponse(
        campaign_name=campaign.campaign_name,
        analytics=formatted(campaign.analytics),
    )


@router.put(
    "/{campaign_id}/analytics",
    response_model=AnalyticsUpdateResponse,
    summary="Update campaign analytics",
    description=(
        "Adds the given impressions and clicks to the campaign's counters and "
        "re-derives the CTR.  Rejects non-numeric or negative increments and "
        "any update that would leave more clicks than impressions."
    ),
)
async def update_campaign_analytics(
    campaign_id: int,
    body: AnalyticsIncrementRequest,
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    analytics = await service.update_analytics(campaign_id, body.impressions, body.clicks)
    return AnalyticsUpdateResponse(
        message="Campaign analytics updated successfully",
        analytics=formatted(analytics),
    )


@router.put(
    "/{campaign_id}/status",
    response_model=CampaignStatusMessage,
    summary="Update campaign status (Admin only)",
)
async def update_campaign_status(
    campaign_id: int,
    body: CampaignStatusRequest,
    user: User = Depends(require_roles(UserRole.ADMIN)),
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    campaign = await service.update_status(campaign_id, body.status)
    return CampaignStatusMessage(
        message="Campaign status updated successfully",
        campaign=CampaignStatusOut(id=campaign.id, status=campaign.status),
    )


@router.put(
    "/{campaign_id}/details",
    response_model=CampaignMessage,
    summary="Update campaign details (JSON, no image)",
)
async def update_campaign_details(
    campaign_id: int,
    body: CampaignDetailsUpdate,
    user: User = Depends(require_roles(UserRole.ADVERTISER, UserRole.ADMIN)),
    service: CampaignService = Depends(_get_campaign_service),
) -> Any:
    campaign = await service.update_details(campaign_id, body, user)
    return CampaignMessage(
        message="Campaign details updated successfully",
        campaign=CampaignOut.model_validate(campaign),
    )
