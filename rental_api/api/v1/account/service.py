import logging

from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.account.schemas import ProfileUpdate
from rental_api.api.v1.users.service import UserService
from rental_api.core.exceptions import ConflictError
from rental_api.core.security import get_password_hash
from rental_api.models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AccountService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        if data.email != user.email:
            existing = await self.user_service.get_user_by_email(data.email)
            if existing and existing.id != user.id:
                raise ConflictError("Email is already used by another user")

        user.name = data.name
        user.email = data.email
        if data.password and len(data.password) >= MIN_PASSWORD_LENGTH:
            user.password_hash = get_password_hash(data.password)

        await self.db.commit()
        await self.db.refresh(user)
        logger.info("User %s updated their profile", user.id)
        return user
