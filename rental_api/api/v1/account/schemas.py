from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ProfileUpdate(BaseModel):
    """Self-service profile edit. Short or empty passwords leave the current one unchanged."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: Optional[str] = None
