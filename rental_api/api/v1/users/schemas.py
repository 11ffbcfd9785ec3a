from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from rental_api.models.enums import Role


class UserBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    role: Role = Role.customer
    is_verified_by_admin: bool = False
    is_active: bool = True


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    is_verified_by_admin: Optional[bool] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6, description="New password; re-hashed when given")


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    image: Optional[str] = None
    role: Role
    is_verified_by_admin: bool
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
