from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from roomierules.schemas.auth_schemas import UserResponse


class HouseCreate(BaseModel):
    """Create a house (hosts only)"""

    name: str = Field(..., min_length=1, max_length=255)
    bank_account: str = Field(..., min_length=1, max_length=50)

    @field_validator("name", "bank_account")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("House name and bank account are required")
        return value


class HouseUpdate(BaseModel):
    """Rename the house (owning host only)"""

    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("House name cannot be empty")
        return value


class HouseJoinRequest(BaseModel):
    """Join a house with its code (roommates only)"""

    house_code: str = Field(..., min_length=1, max_length=10)

    @field_validator("house_code")
    @classmethod
    def normalize(cls, value: str) -> str:
        return value.strip().upper()


class HouseResponse(BaseModel):
    """House details response"""

    id: int
    name: str
    house_code: str
    host_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class HousePayload(BaseModel):
    house: HouseResponse


class HouseDetailPayload(BaseModel):
    """The caller's house (null when not in one) with its members"""

    house: Optional[HouseResponse]
    members: list[UserResponse] = []
    is_host: bool = False


class HouseMembersPayload(BaseModel):
    members: list[UserResponse]
