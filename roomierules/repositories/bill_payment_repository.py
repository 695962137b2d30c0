from typing import Optional
from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import Session, joinedload

from roomierules.models.bill import Bill
from roomierules.models.bill_payment import BillPayment
from roomierules.models.role import PaymentStatus


class BillPaymentRepository:
    """Repository for payment obligation data access"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, payment_id: int) -> Optional[BillPayment]:
        """Get payment obligation by ID"""
        return self.db.query(BillPayment).filter(BillPayment.id == payment_id).first()

    def get_by_bill(self, bill_id: int) -> list[BillPayment]:
        """Get all obligations of a bill"""
        return (
            self.db.query(BillPayment)
            .filter(BillPayment.bill_id == bill_id)
            .order_by(BillPayment.id)
            .all()
        )

    def get_by_user(
        self,
        user_id: int,
        status: Optional[PaymentStatus] = None,
        limit: Optional[int] = None,
    ) -> list[BillPayment]:
        """
        Get a user's obligations, newest first.

        Args:
            user_id: Owing user
            status: Optional status filter
            limit: Optional maximum number of rows

        Returns:
            Obligations with their bill eagerly loaded
        """
        query = (
            self.db.query(BillPayment)
            .options(joinedload(BillPayment.bill))
            .filter(BillPayment.user_id == user_id)
        )
        if status is not None:
            query = query.filter(BillPayment.status == status)

        query = query.order_by(BillPayment.created_at.desc(), BillPayment.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update(self, payment: BillPayment) -> BillPayment:
        """Update a payment obligation"""
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def get_user_totals_in_house(self, user_id: int, house_id: int) -> dict:
        """Count and sum a user's obligations on bills of one house"""
        rows = (
            self.db.query(BillPayment.amount_owed, BillPayment.status)
            .join(Bill, BillPayment.bill_id == Bill.id)
            .filter(BillPayment.user_id == user_id, Bill.house_id == house_id)
            .all()
        )
        total_owed = sum(float(amount) for amount, _ in rows)
        total_paid = sum(
            float(amount) for amount, status in rows if status == PaymentStatus.PAID
        )
        return {
            "total": len(rows),
            "total_owed": total_owed,
            "total_paid": total_paid,
            "total_pending": total_owed - total_paid,
        }

    def get_user_status_by_bill(self, user_id: int, bill_ids: list[int]) -> dict[int, PaymentStatus]:
        """Map bill id -> the user's obligation status for the given bills"""
        if not bill_ids:
            return {}
        rows = (
            self.db.query(BillPayment.bill_id, BillPayment.status)
            .filter(BillPayment.user_id == user_id, BillPayment.bill_id.in_(bill_ids))
            .all()
        )
        return {bill_id: status for bill_id, status in rows}

    def search_for_user(
        self, user_id: int, house_id: int, term: str, limit: int = 20
    ) -> list[BillPayment]:
        """Search a user's obligations by bill title, bill type or status"""
        pattern = f"%{term.lower()}%"
        return (
            self.db.query(BillPayment)
            .join(Bill, BillPayment.bill_id == Bill.id)
            .options(joinedload(BillPayment.bill))
            .filter(
                Bill.house_id == house_id,
                BillPayment.user_id == user_id,
                or_(
                    func.lower(Bill.title).like(pattern),
                    func.lower(cast(Bill.type, String)).like(pattern),
                    func.lower(cast(BillPayment.status, String)).like(pattern),
                ),
            )
            .order_by(BillPayment.created_at.desc(), BillPayment.id.desc())
            .limit(limit)
            .all()
        )
