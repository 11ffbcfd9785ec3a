from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.users.schemas import UserCreate, UserResponse, UserUpdate
from rental_api.api.v1.users.service import UserService
from rental_api.core.deps import get_db, get_current_staff_user
from rental_api.core.exceptions import AppException
from rental_api.models.enums import Role


router = APIRouter(dependencies=[Depends(get_current_staff_user)])


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    new_user = await user_service.create_user(user_data)
    return UserResponse.model_validate(new_user)


@router.get(
    "/",
    response_model=List[UserResponse],
    summary="Get all users",
    description="List users, newest first. Optionally filter by role.",
)
async def get_users(
    role: Optional[Role] = Query(None, description="Filter by role (ADMIN/OWNER/CUSTOMER)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    users = await user_service.get_users(role=role, skip=skip, limit=limit)
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user by ID",
)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    user = await user_service.get_user_by_id(user_id)
    if not user:
        AppException().raise_404("User not found")
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user by ID",
)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    updated_user = await user_service.update_user(user_id, user_data)
    return UserResponse.model_validate(updated_user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete a user by ID",
    description="Users that still have orders or own vehicles cannot be deleted.",
)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    await user_service.delete_user(user_id)
    return {"message": "User deleted successfully"}
