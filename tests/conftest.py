"""
Pytest configuration and fixtures.
"""

import os

os.environ.setdefault("ADMEDIA_ENV", "test")

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from admedia.ad_server.main import app
from admedia.ad_server.services.storage_service import ImageStorage, get_image_storage
from admedia.common.config import StorageSettings
from admedia.common.database import get_session
from admedia.common.security import JWTHandler, hash_password
from admedia.models import Base, Campaign, CampaignStatus, CampaignType, User, UserRole

# One shared in-memory SQLite connection per test
TEST_DATABASE_URL = "sqlite+aiosqlite://"

UPLOADED_IMAGE_URL = "https://res.cloudinary.com/test-cloud/image/upload/v1/campaigns/banner.png"


@pytest_asyncio.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def storage_settings() -> StorageSettings:
    return StorageSettings(
        cloud_name="test-cloud",
        api_key="123456",
        api_secret="test-secret",
        max_file_size=1024,
    )


@pytest.fixture
def upload_requests() -> list[httpx.Request]:
    """Requests seen by the fake Cloudinary endpoint."""
    return []


@pytest.fixture
def cloudinary_transport(upload_requests: list[httpx.Request]) -> httpx.MockTransport:
    """Fake Cloudinary upload API that always succeeds."""

    def handler(request: httpx.Request) -> httpx.Response:
        upload_requests.append(request)
        return httpx.Response(200, json={"secure_url": UPLOADED_IMAGE_URL, "public_id": "campaigns/banner"})

    return httpx.MockTransport(handler)


@pytest.fixture
def image_storage(
    storage_settings: StorageSettings,
    cloudinary_transport: httpx.MockTransport,
) -> ImageStorage:
    return ImageStorage(settings=storage_settings, transport=cloudinary_transport)


@pytest_asyncio.fixture(scope="function")
async def client(
    test_db: AsyncSession,
    image_storage: ImageStorage,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database and storage overrides."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        yield test_db

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_image_storage] = lambda: image_storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Accounts and campaigns
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(test_db: AsyncSession) -> Callable[..., Any]:
    """Factory inserting a user straight into the database."""

    async def _make_user(
        email: str = "advertiser@example.com",
        role: UserRole = UserRole.ADVERTISER,
        password: str = "secret123",
    ) -> User:
        user = User(
            full_name="Ada Lovelace",
            company_name="Analytical Ads",
            email=email,
            password_hash=hash_password(password, rounds=4),
            role=role.value,
        )
        test_db.add(user)
        await test_db.flush()
        await test_db.refresh(user)
        return user

    return _make_user


@pytest_asyncio.fixture
async def advertiser(make_user: Callable[..., Any]) -> User:
    return await make_user()


@pytest_asyncio.fixture
async def admin(make_user: Callable[..., Any]) -> User:
    return await make_user(email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Bearer header for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = JWTHandler().create_access_token(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def make_campaign(test_db: AsyncSession) -> Callable[..., Any]:
    """Factory inserting a campaign straight into the database."""

    async def _make_campaign(
        owner: User,
        name: str = "Spring Sale",
        impressions: int = 0,
        clicks: int = 0,
        status: CampaignStatus = CampaignStatus.ACTIVE,
    ) -> Campaign:
        campaign = Campaign(
            advertiser_id=owner.id,
            campaign_name=name,
            campaign_description="Seasonal discount banner",
            campaign_type=CampaignType.BANNER.value,
            headline="Up to 50% off",
            body="Everything must go.",
            call_to_action="Shop now",
            image_url="https://res.cloudinary.com/test-cloud/image/upload/v1/campaigns/old.png",
            status=status.value,
            impressions=impressions,
            clicks=clicks,
        )
        test_db.add(campaign)
        await test_db.flush()
        await test_db.refresh(campaign)
        return campaign

    return _make_campaign


@pytest.fixture
def campaign_form() -> dict[str, str]:
    """Multipart form fields for campaign creation."""
    return {
        "campaign_name": "Summer Launch",
        "campaign_description": "New product line",
        "campaign_type": "FEATURED",
        "headline": "Meet the new line",
        "body": "Fresh designs for summer.",
        "call_to_action": "Learn more",
    }


@pytest.fixture
def png_image() -> tuple[str, bytes, str]:
    return ("banner.png", b"\x89PNG\r\n\x1a\nfake-image-bytes", "image/png")
