from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class HouseRuleCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Rule title is required")
        return value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class HouseRuleUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Rule title cannot be empty")
        return value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None


class HouseRuleResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    house_id: int
    title: str
    description: Optional[str]
    created_by: int
    created_at: datetime


class HouseRulePayload(BaseModel):
    rule: HouseRuleResponse


class HouseRuleListPayload(BaseModel):
    rules: list[HouseRuleResponse]
