from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from roomierules.models.role import BillType, BillStatus
from roomierules.schemas.auth_schemas import UserResponse
from roomierules.schemas.payment_schemas import PaymentResponse


def _check_bill_type(value):
    if isinstance(value, BillType):
        return value
    try:
        return BillType(value)
    except ValueError:
        raise ValueError("Invalid bill type")


class BillCreate(BaseModel):
    """Schema for creating a new bill"""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    amount: float = Field(..., allow_inf_nan=False)
    type: BillType
    due_date: Optional[date] = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Amount must be greater than 0")
        return value

    @field_validator("type", mode="before")
    @classmethod
    def valid_type(cls, value):
        return _check_bill_type(value)


class BillUpdate(BaseModel):
    """
    Schema for updating a bill.

    Changing the amount does not touch existing payment obligations.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    amount: Optional[float] = Field(None, allow_inf_nan=False)
    due_date: Optional[date] = None
    status: Optional[BillStatus] = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("Amount must be greater than 0")
        return value


class BillResponse(BaseModel):
    """Schema for bill response"""

    model_config = {"from_attributes": True}

    id: int
    title: str
    description: Optional[str]
    amount: float = Field(..., allow_inf_nan=False)
    type: BillType
    house_id: int
    created_by: int
    split_amount: Optional[float]
    due_date: Optional[date]
    status: BillStatus
    created_at: datetime


class BillPayload(BaseModel):
    bill: BillResponse


class BillListPayload(BaseModel):
    bills: list[BillResponse]


class BillDetailPayload(BaseModel):
    """A bill with its obligations and the current house roster"""

    bill: BillResponse
    payments: list[PaymentResponse]
    members: list[UserResponse]
