"""
Business services behind the API routers.
"""

from admedia.ad_server.services.auth_service import AuthService
from admedia.ad_server.services.campaign_service import CampaignService, ImageFile
from admedia.ad_server.services.storage_service import ImageStorage, get_image_storage

__all__ = [
    "AuthService",
    "CampaignService",
    "ImageFile",
    "ImageStorage",
    "get_image_storage",
]
