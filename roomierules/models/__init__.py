"""ORM models. Importing this package registers every table on Base.metadata."""

from roomierules.models.base import Base, TimestampMixin
from roomierules.models.role import UserRole, BillType, BillStatus, PaymentStatus
from roomierules.models.user import User
from roomierules.models.house import House
from roomierules.models.bill import Bill
from roomierules.models.bill_payment import BillPayment
from roomierules.models.house_rule import HouseRule

__all__ = [
    "Base",
    "TimestampMixin",
    "UserRole",
    "BillType",
    "BillStatus",
    "PaymentStatus",
    "User",
    "House",
    "Bill",
    "BillPayment",
    "HouseRule",
]
