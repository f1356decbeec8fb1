"""
Auth router – registration, login and the current account.

Endpoints:
    POST /api/auth/register   – Create account (USER or ADVERTISER)
    POST /api/auth/login      – Exchange email / password for a bearer token
    GET  /api/auth/me         – Current account
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from admedia.ad_server.dependencies import get_current_user
from admedia.ad_server.services.auth_service import AuthService
from admedia.common.database import get_session
from admedia.models import User
from admedia.schemas.request import LoginRequest, RegisterRequest
from admedia.schemas.response import TokenResponse, UserMessage, UserOut

router = APIRouter()


def _get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(session)


@router.post("/register", response_model=UserMessage, status_code=201, summary="Register")
async def register(
    body: RegisterRequest,
    service: AuthService = Depends(_get_auth_service),
) -> Any:
    user = await service.register(body)
    return UserMessage(message="User registered successfully", user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenResponse, summary="Login")
async def login(
    body: LoginRequest,
    service: AuthService = Depends(_get_auth_service),
) -> Any:
    user, token = await service.login(body)
    return TokenResponse(
        access_token=token,
        expires_in=service.jwt.expires_in,
        user=UserOut.model_validate(user),
    )


@router.get("/me", response_model=UserOut, summary="Current account")
async def me(user: User = Depends(get_current_user)) -> Any:
    return UserOut.model_validate(user)
