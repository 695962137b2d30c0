from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal, Optional

from roomierules.models.role import BillType, BillStatus, PaymentStatus, UserRole


class BillsSummary(BaseModel):
    total: int = 0
    active: int = 0
    total_amount: float = 0.0
    active_amount: float = 0.0


class TypeBreakdown(BaseModel):
    type: BillType
    count: int
    total: float


class CurrentMonthSummary(BaseModel):
    bills: list[TypeBreakdown]
    total: float = 0.0
    count: int = 0


class MonthTotals(BaseModel):
    total: float = 0.0
    count: int = 0


class UserPaymentSummary(BaseModel):
    total: int = 0
    total_owed: float = 0.0
    total_paid: float = 0.0
    total_pending: float = 0.0


class RecentBill(BaseModel):
    id: int
    title: str
    amount: float
    type: BillType
    created_at: datetime
    created_by_name: Optional[str]
    user_payment_status: Optional[PaymentStatus]


class MonthlyTrendPoint(BaseModel):
    month: str = Field(..., description="Label such as 'Mar 2026'")
    amount: float = 0.0
    count: int = 0


class HouseInfo(BaseModel):
    member_count: int


class Analytics(BaseModel):
    """Dashboard rollups for the caller's house"""

    bills: BillsSummary
    current_month: CurrentMonthSummary
    last_month: MonthTotals
    user_payments: UserPaymentSummary
    recent_activity: list[RecentBill]
    monthly_trend: list[MonthlyTrendPoint]
    house_info: HouseInfo


class AnalyticsPayload(BaseModel):
    analytics: Analytics


SearchType = Literal["bills", "payments", "members"]


class BillSearchResult(BaseModel):
    id: int
    title: str
    description: Optional[str]
    amount: float
    type: BillType
    status: BillStatus
    created_at: datetime
    created_by_name: Optional[str]
    result_type: Literal["bill"] = "bill"


class PaymentSearchResult(BaseModel):
    id: int
    amount_owed: float
    status: PaymentStatus
    paid_at: Optional[datetime]
    created_at: datetime
    bill_title: str
    bill_amount: float
    bill_type: BillType
    result_type: Literal["payment"] = "payment"


class MemberSearchResult(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime
    result_type: Literal["member"] = "member"


class SearchPayload(BaseModel):
    bills: list[BillSearchResult] = []
    payments: list[PaymentSearchResult] = []
    members: list[MemberSearchResult] = []
    total: int = 0
