"""
Tests for registration, login and bearer authentication.
"""

from typing import Any, Callable

import pytest
from httpx import AsyncClient

from admedia.common.config import AuthSettings
from admedia.common.security import JWTHandler
from admedia.models import User, UserRole


@pytest.fixture
def register_payload() -> dict[str, Any]:
    return {
        "full_name": "Grace Hopper",
        "company_name": "Compiler Media",
        "email": "Grace@Example.com",
        "password": "hunter22",
        "role": "ADVERTISER",
    }


@pytest.mark.asyncio
async def test_register(client: AsyncClient, register_payload: dict[str, Any]) -> None:
    response = await client.post("/api/auth/register", json=register_payload)

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "grace@example.com"
    assert user["role"] == "ADVERTISER"
    assert "password" not in user
    assert "password_hash" not in user


@pytest.mark.asyncio
async def test_register_defaults_to_user_role(
    client: AsyncClient,
    register_payload: dict[str, Any],
) -> None:
    register_payload.pop("role")
    response = await client.post("/api/auth/register", json=register_payload)
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "USER"


@pytest.mark.asyncio
async def test_register_duplicate_email(
    client: AsyncClient,
    register_payload: dict[str, Any],
) -> None:
    await client.post("/api/auth/register", json=register_payload)
    register_payload["email"] = "grace@example.com"
    response = await client.post("/api/auth/register", json=register_payload)

    assert response.status_code == 409
    assert response.json()["error"] == "ConflictError"


@pytest.mark.asyncio
async def test_register_cannot_claim_admin(
    client: AsyncClient,
    register_payload: dict[str, Any],
) -> None:
    register_payload["role"] = "ADMIN"
    response = await client.post("/api/auth/register", json=register_payload)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_login_and_me(client: AsyncClient, register_payload: dict[str, Any]) -> None:
    await client.post("/api/auth/register", json=register_payload)

    response = await client.post(
        "/api/auth/login",
        json={"email": "grace@example.com", "password": "hunter22"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["expires_in"] > 0

    me = await client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["email"] == "grace@example.com"


@pytest.mark.asyncio
async def test_login_wrong_password(
    client: AsyncClient,
    make_user: Callable[..., Any],
) -> None:
    await make_user(email="ada@example.com")
    response = await client.post(
        "/api/auth/login",
        json={"email": "ada@example.com", "password": "not-the-password"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": "whatever"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_rejects_bad_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_expired_token(client: AsyncClient, advertiser: User) -> None:
    handler = JWTHandler(
        AuthSettings(
            jwt_secret_key="test-secret-key-with-at-least-32-bytes",
            access_token_expire_minutes=-1,
        )
    )
    token = handler.create_access_token(advertiser.id, advertiser.email, advertiser.role)

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


@pytest.mark.asyncio
async def test_me_with_fixture_token(
    client: AsyncClient,
    advertiser: User,
    auth_headers: Callable[[User], dict[str, str]],
) -> None:
    response = await client.get("/api/auth/me", headers=auth_headers(advertiser))
    assert response.status_code == 200
    assert response.json()["role"] == UserRole.ADVERTISER.value
