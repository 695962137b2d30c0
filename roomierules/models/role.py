"""User roles and ledger enums."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    The two account roles, fixed at registration.

    - HOST: creates and owns exactly one house, manages its rules and
      is the only role allowed to create housing bills
    - ROOMMATE: joins an existing house with its join code
    """

    HOST = "host"
    ROOMMATE = "roommate"


class BillType(str, PyEnum):
    HOUSING = "housing"
    GROCERY = "grocery"
    EAT_OUT = "eat-out"
    OTHER = "other"


class BillStatus(str, PyEnum):
    ACTIVE = "active"
    CLOSED = "closed"


class PaymentStatus(str, PyEnum):
    PENDING = "pending"
    PAID = "paid"
