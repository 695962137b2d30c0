from datetime import date, datetime
from pydantic import BaseModel
from typing import Optional

from roomierules.models.role import BillType, PaymentStatus


class PaymentResponse(BaseModel):
    """Schema for a payment obligation"""

    model_config = {"from_attributes": True}

    id: int
    bill_id: int
    user_id: int
    amount_owed: float
    receipt_url: Optional[str]
    status: PaymentStatus
    paid_at: Optional[datetime]
    created_at: datetime


class UserPaymentResponse(PaymentResponse):
    """Obligation listed for its owner, with the bill it belongs to"""

    bill_title: str
    bill_type: BillType
    bill_amount: float
    bill_due_date: Optional[date] = None


class PaymentTotals(BaseModel):
    """Sums over the filtered obligation list"""

    pending: float = 0.0
    paid: float = 0.0
    total: float = 0.0


class PaymentListPayload(BaseModel):
    payments: list[UserPaymentResponse]
    totals: PaymentTotals


class PaymentPayload(BaseModel):
    payment: PaymentResponse
