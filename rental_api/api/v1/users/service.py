import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from rental_api.api.v1.users.schemas import UserCreate, UserUpdate
from rental_api.core.exceptions import ConflictError, NotFoundError
from rental_api.core.security import get_password_hash
from rental_api.models.enums import Role
from rental_api.models.order import Order
from rental_api.models.user import User
from rental_api.models.vehicle import Vehicle

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).filter(User.email == email))
        return result.scalars().first()

    async def get_users(self, role: Optional[Role] = None, skip: int = 0, limit: int = 100) -> List[User]:
        query = select(User)
        if role:
            query = query.where(User.role == role.value)
        query = query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_user(self, user_data: UserCreate) -> User:
        if await self.get_user_by_email(user_data.email):
            raise ConflictError("Email already registered")

        new_user = User(
            **user_data.model_dump(exclude={"password", "role"}),
            role=user_data.role.value,
            password_hash=get_password_hash(user_data.password),
        )
        self.db.add(new_user)
        await self.db.commit()
        await self.db.refresh(new_user)
        logger.info("User %s created with role %s", new_user.id, new_user.role)
        return new_user

    async def update_user(self, user_id: int, user_data: UserUpdate) -> User:
        db_user = await self.get_user_by_id(user_id)
        if not db_user:
            raise NotFoundError("User not found")

        update_data = user_data.model_dump(exclude_unset=True)
        new_email = update_data.get("email")
        if new_email and new_email != db_user.email:
            existing = await self.get_user_by_email(new_email)
            if existing and existing.id != db_user.id:
                raise ConflictError("Email already exists")

        password = update_data.pop("password", None)
        if password:
            db_user.password_hash = get_password_hash(password)
        if update_data.get("role") is not None:
            update_data["role"] = Role(update_data["role"]).value

        for key, value in update_data.items():
            if value is not None:
                setattr(db_user, key, value)

        await self.db.commit()
        await self.db.refresh(db_user)
        return db_user

    async def delete_user(self, user_id: int) -> None:
        db_user = await self.get_user_by_id(user_id)
        if not db_user:
            raise NotFoundError("User not found")

        order_result = await self.db.execute(select(Order.id).where(Order.user_id == user_id).limit(1))
        if order_result.scalar_one_or_none() is not None:
            raise ConflictError("Cannot delete user that has orders")

        vehicle_result = await self.db.execute(select(Vehicle.id).where(Vehicle.owner_id == user_id).limit(1))
        if vehicle_result.scalar_one_or_none() is not None:
            raise ConflictError("Cannot delete user that owns vehicles")

        await self.db.delete(db_user)
        await self.db.commit()
        logger.info("User %s deleted", user_id)
