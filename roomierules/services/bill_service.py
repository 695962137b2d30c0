import structlog
from sqlalchemy.orm import Session

from roomierules.config import settings
from roomierules.models.bill import Bill
from roomierules.models.bill_payment import BillPayment
from roomierules.models.house_context import HouseContext
from roomierules.models.role import BillType, BillStatus, PaymentStatus
from roomierules.models.user import User
from roomierules.repositories.bill_repository import BillRepository
from roomierules.repositories.bill_payment_repository import BillPaymentRepository
from roomierules.repositories.user_repository import UserRepository
from roomierules.schemas.bill_schemas import BillCreate, BillUpdate
from roomierules.services.split import SplitPolicy, split_evenly, to_cents
from roomierules.core.exceptions import (
    NotFoundException,
    ForbiddenException,
    ValidationException,
)

logger = structlog.get_logger(__name__)


class BillService:
    """Service layer for bills and the obligations derived from them"""

    def __init__(
        self,
        db: Session,
        split_policy: SplitPolicy | None = None,
        split_bill_types: set[str] | None = None,
    ):
        self.db = db
        self.bill_repo = BillRepository(db)
        self.payment_repo = BillPaymentRepository(db)
        self.user_repo = UserRepository(db)
        self.split_policy = split_policy or SplitPolicy(settings.SPLIT_POLICY)
        self.split_bill_types = (
            split_bill_types if split_bill_types is not None else settings.split_bill_types
        )

    def generates_obligations(self, bill_type: BillType) -> bool:
        """Whether bills of this type are split into per-member obligations"""
        return bill_type.value in self.split_bill_types

    def create_bill(self, data: BillCreate, context: HouseContext) -> Bill:
        """
        Create a bill in the caller's house and split it if its type requires.

        Housing bills may only be created by a host. For split types every
        current member gets one pending obligation; the bill and all its
        obligations are committed together.

        Args:
            data: Bill creation data
            context: Caller and their house

        Returns:
            Created bill

        Raises:
            ValidationException: Non-positive amount or a house without members
            ForbiddenException: Non-host creating a housing bill
        """
        amount = to_cents(data.amount)
        if amount <= 0:
            raise ValidationException("Amount must be greater than 0")

        if data.type == BillType.HOUSING and not context.user.is_host:
            raise ForbiddenException("Only hosts can create housing bills")

        bill = Bill(
            title=data.title,
            description=data.description,
            amount=amount,
            type=data.type,
            house_id=context.house.id,
            created_by=context.user.id,
            due_date=data.due_date,
            status=BillStatus.ACTIVE,
        )

        payments: list[BillPayment] = []
        if self.generates_obligations(data.type):
            members = self.user_repo.get_house_members(context.house.id)
            if not members:
                raise ValidationException("No members found in house")

            split = split_evenly(
                amount,
                [member.id for member in members],
                creator_id=context.user.id,
                policy=self.split_policy,
            )
            bill.split_amount = split.split_amount
            payments = [
                BillPayment(user_id=user_id, amount_owed=share, status=PaymentStatus.PENDING)
                for user_id, share in split.shares.items()
            ]

        bill = self.bill_repo.create_with_payments(bill, payments)
        logger.info(
            "bill_created",
            bill_id=bill.id,
            house_id=bill.house_id,
            bill_type=bill.type.value,
            amount=str(bill.amount),
            obligations=len(payments),
        )
        return bill

    def list_bills(self, context: HouseContext) -> list[Bill]:
        """Get all bills of the caller's house, newest first"""
        return self.bill_repo.get_by_house(context.house.id)

    def get_bill(self, bill_id: int, user: User) -> Bill:
        """
        Get a bill visible to the caller.

        Raises:
            NotFoundException: If the bill does not exist
            ForbiddenException: If the bill belongs to another house
        """
        bill = self.bill_repo.get_by_id(bill_id)
        if not bill:
            raise NotFoundException("Bill not found")
        if user.house_id != bill.house_id:
            raise ForbiddenException("Access denied")
        return bill

    def get_bill_detail(self, bill_id: int, user: User) -> dict:
        """
        Get a bill with its obligations and the current house roster.

        Returns:
            Dict with bill, payments and members
        """
        bill = self.get_bill(bill_id, user)
        return {
            "bill": bill,
            "payments": self.payment_repo.get_by_bill(bill.id),
            "members": self.user_repo.get_house_members(bill.house_id),
        }

    def _get_own_bill(self, bill_id: int, user: User, action: str) -> Bill:
        bill = self.bill_repo.get_by_id(bill_id)
        if not bill:
            raise NotFoundException("Bill not found")
        if bill.created_by != user.id:
            raise ForbiddenException(f"Only the bill creator can {action} this bill")
        return bill

    def update_bill(self, bill_id: int, data: BillUpdate, user: User) -> Bill:
        """
        Update bill fields (creator only).

        Obligations keep the amounts they were created with.
        """
        bill = self._get_own_bill(bill_id, user, "update")

        if data.title is not None:
            bill.title = data.title
        if data.description is not None:
            bill.description = data.description
        if data.amount is not None:
            amount = to_cents(data.amount)
            if amount <= 0:
                raise ValidationException("Amount must be greater than 0")
            bill.amount = amount
        if data.due_date is not None:
            bill.due_date = data.due_date
        if data.status is not None:
            bill.status = data.status

        return self.bill_repo.update(bill)

    def delete_bill(self, bill_id: int, user: User) -> None:
        """Delete a bill and its obligations (creator only)"""
        bill = self._get_own_bill(bill_id, user, "delete")
        self.bill_repo.delete(bill)
        logger.info("bill_deleted", bill_id=bill_id, user_id=user.id)
