"""
Read-only rollups for the dashboard and the search page.

Nothing here writes; every call re-reads the database.
"""

from collections import defaultdict
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.orm import Session

from roomierules.models.house_context import HouseContext
from roomierules.repositories.bill_repository import BillRepository
from roomierules.repositories.bill_payment_repository import BillPaymentRepository
from roomierules.repositories.user_repository import UserRepository

TREND_MONTHS = 6
RECENT_BILLS = 5
SEARCH_BILL_LIMIT = 20
SEARCH_PAYMENT_LIMIT = 20
SEARCH_MEMBER_LIMIT = 10


def month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1, tzinfo=UTC)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by delta months"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class AnalyticsService:
    """Dashboard aggregation and search across a house"""

    def __init__(self, db: Session):
        self.db = db
        self.bill_repo = BillRepository(db)
        self.payment_repo = BillPaymentRepository(db)
        self.user_repo = UserRepository(db)

    def _month_bills(self, house_id: int, year: int, month: int):
        next_year, next_month = shift_month(year, month, 1)
        return self.bill_repo.get_created_between(
            house_id, month_start(year, month), month_start(next_year, next_month)
        )

    def get_analytics(self, context: HouseContext, now: Optional[datetime] = None) -> dict:
        """
        Build the dashboard summary for the caller's house.

        Args:
            context: Caller and their house
            now: Reference time (defaults to the current UTC time)

        Returns:
            Dict matching the Analytics schema
        """
        now = now or datetime.now(UTC)
        house_id = context.house.id

        current = self._month_bills(house_id, now.year, now.month)
        by_type: dict = defaultdict(lambda: {"count": 0, "total": 0.0})
        for bill in current:
            by_type[bill.type]["count"] += 1
            by_type[bill.type]["total"] += float(bill.amount)
        type_rows = [
            {"type": bill_type, "count": row["count"], "total": row["total"]}
            for bill_type, row in sorted(by_type.items(), key=lambda item: item[0].value)
        ]

        last_year, last_month = shift_month(now.year, now.month, -1)
        previous = self._month_bills(house_id, last_year, last_month)

        trend = []
        for offset in range(TREND_MONTHS - 1, -1, -1):
            year, month = shift_month(now.year, now.month, -offset)
            bills = self._month_bills(house_id, year, month)
            trend.append(
                {
                    "month": month_start(year, month).strftime("%b %Y"),
                    "amount": sum(float(b.amount) for b in bills),
                    "count": len(bills),
                }
            )

        recent = self.bill_repo.get_recent(house_id, limit=RECENT_BILLS)
        statuses = self.payment_repo.get_user_status_by_bill(
            context.user.id, [bill.id for bill in recent]
        )

        return {
            "bills": self.bill_repo.get_summary(house_id),
            "current_month": {
                "bills": type_rows,
                "total": sum(row["total"] for row in type_rows),
                "count": sum(row["count"] for row in type_rows),
            },
            "last_month": {
                "total": sum(float(b.amount) for b in previous),
                "count": len(previous),
            },
            "user_payments": self.payment_repo.get_user_totals_in_house(context.user.id, house_id),
            "recent_activity": [
                {
                    "id": bill.id,
                    "title": bill.title,
                    "amount": float(bill.amount),
                    "type": bill.type,
                    "created_at": bill.created_at,
                    "created_by_name": bill.creator.name if bill.creator else None,
                    "user_payment_status": statuses.get(bill.id),
                }
                for bill in recent
            ],
            "monthly_trend": trend,
            "house_info": {"member_count": self.user_repo.count_house_members(house_id)},
        }

    def search(self, context: HouseContext, query: Optional[str], result_type: Optional[str] = None) -> dict:
        """
        Case-insensitive search over bills, the caller's payments and members.

        Args:
            context: Caller and their house
            query: Search term; blank returns empty results
            result_type: Restrict to 'bills', 'payments' or 'members'

        Returns:
            Dict with bills, payments, members and total
        """
        results: dict = {"bills": [], "payments": [], "members": [], "total": 0}
        term = (query or "").strip()
        if not term:
            return results

        house_id = context.house.id

        if result_type in (None, "bills"):
            results["bills"] = [
                {
                    "id": bill.id,
                    "title": bill.title,
                    "description": bill.description,
                    "amount": float(bill.amount),
                    "type": bill.type,
                    "status": bill.status,
                    "created_at": bill.created_at,
                    "created_by_name": bill.creator.name if bill.creator else None,
                }
                for bill in self.bill_repo.search(house_id, term, limit=SEARCH_BILL_LIMIT)
            ]

        if result_type in (None, "payments"):
            results["payments"] = [
                {
                    "id": payment.id,
                    "amount_owed": float(payment.amount_owed),
                    "status": payment.status,
                    "paid_at": payment.paid_at,
                    "created_at": payment.created_at,
                    "bill_title": payment.bill.title,
                    "bill_amount": float(payment.bill.amount),
                    "bill_type": payment.bill.type,
                }
                for payment in self.payment_repo.search_for_user(
                    context.user.id, house_id, term, limit=SEARCH_PAYMENT_LIMIT
                )
            ]

        if result_type in (None, "members"):
            results["members"] = [
                {
                    "id": member.id,
                    "name": member.name,
                    "email": member.email,
                    "role": member.role,
                    "created_at": member.created_at,
                }
                for member in self.user_repo.search_house_members(
                    house_id, term, limit=SEARCH_MEMBER_LIMIT
                )
            ]

        results["total"] = len(results["bills"]) + len(results["payments"]) + len(results["members"])
        return results
