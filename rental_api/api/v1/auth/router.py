from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.auth.schemas import LoginRequest, RegisterRequest, RegisterResponse, TokenResponse
from rental_api.api.v1.auth.service import AuthService
from rental_api.api.v1.users.schemas import UserResponse
from rental_api.core.deps import get_db
from rental_api.core.exceptions import AppException

router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a customer account",
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    auth_service = AuthService(db)
    user = await auth_service.register(data)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in with email and password",
    description="Returns a bearer token carrying the user's id and role.",
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    auth_service = AuthService(db)
    user = await auth_service.authenticate(data)
    if not user:
        AppException().raise_401("Incorrect email or password")
    return TokenResponse(access_token=auth_service.issue_token(user))
