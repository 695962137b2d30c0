from datetime import datetime
from typing import Optional
from sqlalchemy import String, case, cast, func, or_
from sqlalchemy.orm import Session

from roomierules.models.bill import Bill
from roomierules.models.bill_payment import BillPayment
from roomierules.models.role import BillStatus


class BillRepository:
    """Repository for Bill data access"""

    def __init__(self, db: Session):
        self.db = db

    def create_with_payments(self, bill: Bill, payments: list[BillPayment]) -> Bill:
        """
        Insert a bill together with its payment obligations in one commit.

        Either the bill and every obligation are stored, or nothing is.
        """
        try:
            self.db.add(bill)
            self.db.flush()  # Assign bill.id without committing
            for payment in payments:
                payment.bill_id = bill.id
            self.db.add_all(payments)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(bill)
        return bill

    def get_by_id(self, bill_id: int) -> Optional[Bill]:
        """Get bill by ID"""
        return self.db.query(Bill).filter(Bill.id == bill_id).first()

    def get_by_house(self, house_id: int) -> list[Bill]:
        """Get all bills for a house, newest first"""
        return (
            self.db.query(Bill)
            .filter(Bill.house_id == house_id)
            .order_by(Bill.created_at.desc(), Bill.id.desc())
            .all()
        )

    def update(self, bill: Bill) -> Bill:
        """Update a bill"""
        self.db.commit()
        self.db.refresh(bill)
        return bill

    def delete(self, bill: Bill) -> None:
        """Delete a bill (cascades to its payment obligations)"""
        self.db.delete(bill)
        self.db.commit()

    def search(self, house_id: int, term: str, limit: int = 20) -> list[Bill]:
        """Case-insensitive substring search over title, description and type"""
        pattern = f"%{term.lower()}%"
        return (
            self.db.query(Bill)
            .filter(
                Bill.house_id == house_id,
                or_(
                    func.lower(Bill.title).like(pattern),
                    func.lower(func.coalesce(Bill.description, "")).like(pattern),
                    func.lower(cast(Bill.type, String)).like(pattern),
                ),
            )
            .order_by(Bill.created_at.desc(), Bill.id.desc())
            .limit(limit)
            .all()
        )

    def get_summary(self, house_id: int) -> dict:
        """Count and sum all bills of a house, split by active status"""
        is_active = Bill.status == BillStatus.ACTIVE
        row = (
            self.db.query(
                func.count(Bill.id),
                func.sum(case((is_active, 1), else_=0)),
                func.sum(Bill.amount),
                func.sum(case((is_active, Bill.amount), else_=0)),
            )
            .filter(Bill.house_id == house_id)
            .one()
        )
        return {
            "total": row[0] or 0,
            "active": int(row[1] or 0),
            "total_amount": float(row[2] or 0),
            "active_amount": float(row[3] or 0),
        }

    def get_created_between(self, house_id: int, start: datetime, end: datetime) -> list[Bill]:
        """Bills created in [start, end)"""
        return (
            self.db.query(Bill)
            .filter(
                Bill.house_id == house_id,
                Bill.created_at >= start,
                Bill.created_at < end,
            )
            .all()
        )

    def get_recent(self, house_id: int, limit: int = 5) -> list[Bill]:
        """Most recently created bills of a house"""
        return (
            self.db.query(Bill)
            .filter(Bill.house_id == house_id)
            .order_by(Bill.created_at.desc(), Bill.id.desc())
            .limit(limit)
            .all()
        )
