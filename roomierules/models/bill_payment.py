from datetime import datetime
from decimal import Decimal
from sqlalchemy import String, Integer, Numeric, ForeignKey, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from roomierules.models.base import Base, TimestampMixin
from roomierules.models.role import PaymentStatus

if TYPE_CHECKING:
    from roomierules.models.bill import Bill
    from roomierules.models.user import User


class BillPayment(Base, TimestampMixin):
    """
    One member's obligation towards one bill.

    amount_owed is fixed when the bill is created and never re-split.
    Status only moves pending -> paid, through a receipt upload by the
    owing user.
    """

    __tablename__ = "bill_payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bill_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("bills.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    amount_owed: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)
    receipt_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    bill: Mapped["Bill"] = relationship("Bill", back_populates="payments")
    user: Mapped["User"] = relationship("User")

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID
