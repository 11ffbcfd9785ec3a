from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.account.schemas import ProfileUpdate
from rental_api.api.v1.account.service import AccountService
from rental_api.api.v1.orders.schemas import OrderResponse
from rental_api.api.v1.orders.service import OrderService
from rental_api.api.v1.users.schemas import UserResponse
from rental_api.core.deps import get_db, get_current_user
from rental_api.models.user import User

router = APIRouter()


@router.get(
    "/current",
    response_model=UserResponse,
    summary="Get the logged-in user",
)
async def get_current_account(
    current_user: User = Depends(get_current_user),
):
    return UserResponse.model_validate(current_user)


@router.get(
    "/orders",
    response_model=List[OrderResponse],
    summary="List my orders",
    description="Orders placed by the logged-in user, newest first.",
)
async def get_my_orders(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    orders = await order_service.list_orders(user_id=current_user.id)
    return [OrderResponse.model_validate(order) for order in orders]


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update my profile",
)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    account_service = AccountService(db)
    user = await account_service.update_profile(current_user, data)
    return UserResponse.model_validate(user)
