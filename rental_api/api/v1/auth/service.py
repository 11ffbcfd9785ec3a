import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.auth.schemas import LoginRequest, RegisterRequest
from rental_api.api.v1.users.schemas import UserCreate
from rental_api.api.v1.users.service import UserService
from rental_api.core.config import settings
from rental_api.core.security import create_access_token, verify_password
from rental_api.models.enums import Role
from rental_api.models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

    async def register(self, data: RegisterRequest) -> User:
        user = await self.user_service.create_user(
            UserCreate(
                name=data.name,
                email=data.email,
                password=data.password,
                role=Role.customer,
                is_verified_by_admin=False,
            )
        )
        logger.info("Customer %s registered", user.id)
        return user

    async def authenticate(self, data: LoginRequest) -> Optional[User]:
        user = await self.user_service.get_user_by_email(data.email)
        if not user or not user.is_active:
            return None
        if not verify_password(data.password, user.password_hash):
            return None
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(
            data={"sub": str(user.id), "role": user.role},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
