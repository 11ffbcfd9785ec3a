from pydantic import BaseModel, EmailStr, Field

from rental_api.api.v1.users.schemas import UserResponse


class RegisterRequest(BaseModel):
    """Self-service sign-up. New accounts are CUSTOMERs awaiting admin verification."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterResponse(BaseModel):
    message: str = "Registration successful"
    user: UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
