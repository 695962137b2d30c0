from datetime import datetime, UTC
from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roomierules.config import settings
from roomierules.models.bill_payment import BillPayment
from roomierules.models.role import PaymentStatus
from roomierules.models.user import User
from roomierules.repositories.bill_payment_repository import BillPaymentRepository
from roomierules.storage.receipts import ReceiptStorage
from roomierules.core.exceptions import (
    NotFoundException,
    ForbiddenException,
    ValidationException,
    InternalException,
)

logger = structlog.get_logger(__name__)


class PaymentService:
    """Service layer for payment obligations and their settlement"""

    def __init__(self, db: Session, storage: ReceiptStorage | None = None):
        self.db = db
        self.payment_repo = BillPaymentRepository(db)
        self.storage = storage or ReceiptStorage(settings.UPLOAD_DIR, settings.MAX_RECEIPT_SIZE)

    def list_user_payments(
        self,
        user: User,
        status: Optional[PaymentStatus] = None,
        limit: Optional[int] = None,
    ) -> tuple[list[dict], dict]:
        """
        Get the caller's obligations with sums over the filtered set.

        Args:
            user: Authenticated user
            status: Only return obligations in this status
            limit: Return at most this many (newest first)

        Returns:
            Tuple of (obligation rows with bill info, {pending, paid, total})
        """
        payments = self.payment_repo.get_by_user(user.id, status=status, limit=limit)

        rows = []
        totals = {"pending": 0.0, "paid": 0.0, "total": 0.0}
        for payment in payments:
            amount = float(payment.amount_owed)
            totals["total"] += amount
            totals[payment.status.value] += amount
            rows.append(
                {
                    "id": payment.id,
                    "bill_id": payment.bill_id,
                    "user_id": payment.user_id,
                    "amount_owed": amount,
                    "receipt_url": payment.receipt_url,
                    "status": payment.status,
                    "paid_at": payment.paid_at,
                    "created_at": payment.created_at,
                    "bill_title": payment.bill.title,
                    "bill_type": payment.bill.type,
                    "bill_amount": float(payment.bill.amount),
                    "bill_due_date": payment.bill.due_date,
                }
            )
        return rows, totals

    def get_payment(self, payment_id: int, user: User) -> BillPayment:
        """
        Get one obligation visible to the caller.

        Raises:
            NotFoundException: If the obligation does not exist
            ForbiddenException: If it belongs to a bill of another house
        """
        payment = self.payment_repo.get_by_id(payment_id)
        if not payment:
            raise NotFoundException("Payment not found")
        if payment.user_id != user.id and payment.bill.house_id != user.house_id:
            raise ForbiddenException("Access denied")
        return payment

    def submit_receipt(
        self,
        payment_id: int,
        user: User,
        data: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> BillPayment:
        """
        Settle an obligation by attaching a receipt image.

        The image is stored first; the obligation is only marked paid once
        the file is in place. If the row update fails the stored file is
        removed again.

        Args:
            payment_id: Obligation to settle
            user: Caller, must be the owing user
            data: Raw image bytes
            filename: Original filename (used for the extension)
            content_type: Declared MIME type of the upload

        Returns:
            Updated obligation

        Raises:
            NotFoundException: Unknown obligation
            ForbiddenException: Caller does not owe this obligation
            ValidationException: Already paid, or an unacceptable file
            InternalException: Storage or database failure
        """
        payment = self.payment_repo.get_by_id(payment_id)
        if not payment:
            raise NotFoundException("Payment not found")

        if payment.user_id != user.id:
            raise ForbiddenException("You can only mark your own payments as paid")

        if payment.is_paid:
            raise ValidationException("Payment has already been marked as paid")

        self.storage.validate(content_type, len(data))

        try:
            receipt = self.storage.save(data, filename, content_type)
        except OSError as e:
            logger.error("receipt_store_failed", payment_id=payment_id, error=str(e))
            raise InternalException("Failed to upload receipt")

        payment.receipt_url = receipt.url
        payment.status = PaymentStatus.PAID
        payment.paid_at = datetime.now(UTC)
        try:
            payment = self.payment_repo.update(payment)
        except SQLAlchemyError as e:
            self.db.rollback()
            self.storage.remove(receipt)
            logger.error("payment_update_failed", payment_id=payment_id, error=str(e))
            raise InternalException("Failed to record payment")

        logger.info(
            "payment_settled",
            payment_id=payment.id,
            bill_id=payment.bill_id,
            user_id=user.id,
            receipt_url=payment.receipt_url,
        )
        return payment
