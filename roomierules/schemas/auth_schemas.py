from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from roomierules.models.role import UserRole

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    """Schema for creating an account"""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str
    role: UserRole
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return value


class LoginRequest(BaseModel):
    """Schema for exchanging credentials for a token"""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)"""

    model_config = {"from_attributes": True}

    id: int
    email: str
    name: str
    phone: Optional[str]
    role: UserRole
    house_id: Optional[int]
    bank_account: Optional[str]
    created_at: datetime


class UserPayload(BaseModel):
    user: UserResponse


class LoginPayload(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"
