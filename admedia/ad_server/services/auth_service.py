"""
Account registration and login.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from admedia.common.exceptions import AuthenticationError, ConflictError, PermissionDeniedError
from admedia.common.logger import get_logger
from admedia.common.security import JWTHandler, hash_password, verify_password
from admedia.models import User, UserRole
from admedia.schemas.request import LoginRequest, RegisterRequest

logger = get_logger(__name__)

# Roles an account may pick for itself at registration
SELF_ASSIGNABLE_ROLES = {UserRole.USER, UserRole.ADVERTISER}


class AuthService:
    """Registers accounts and issues access tokens."""

    def __init__(self, session: AsyncSession, jwt_handler: JWTHandler | None = None):
        self.session = session
        self.jwt = jwt_handler or JWTHandler()

    async def get_user(self, user_id: int) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def register(self, body: RegisterRequest) -> User:
        if body.role not in SELF_ASSIGNABLE_ROLES:
            raise PermissionDeniedError(
                "Role cannot be self-assigned",
                details={"role": body.role.value},
            )
        if await self.get_user_by_email(body.email) is not None:
            raise ConflictError("User already exists", details={"email": body.email})

        user = User(
            full_name=body.full_name,
            company_name=body.company_name,
            email=body.email,
            password_hash=hash_password(body.password),
            role=body.role.value,
        )
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        logger.info("User registered", user_id=user.id, role=user.role)
        return user

    async def login(self, body: LoginRequest) -> tuple[User, str]:
        """Return the user and a fresh access token."""
        user = await self.get_user_by_email(body.email)
        if user is None or not verify_password(body.password, user.password_hash):
            logger.info("Login failed", email=body.email)
            raise AuthenticationError("Invalid credentials")

        token = self.jwt.create_access_token(user.id, user.email, user.role)
        logger.info("User logged in", user_id=user.id)
        return user, token
