from datetime import date
from decimal import Decimal
from sqlalchemy import String, Integer, Numeric, ForeignKey, Date, Text, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from roomierules.models.base import Base, TimestampMixin
from roomierules.models.role import BillType, BillStatus

if TYPE_CHECKING:
    from roomierules.models.house import House
    from roomierules.models.user import User
    from roomierules.models.bill_payment import BillPayment


class Bill(Base, TimestampMixin):
    """
    Shared expense scoped to a house.

    split_amount is only set for bill types that generate per-member
    payment obligations (housing by default).
    """

    __tablename__ = "bills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)
    type: Mapped[BillType] = mapped_column(
        Enum(BillType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    house_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("houses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    split_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=10, scale=2), nullable=True
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[BillStatus] = mapped_column(
        Enum(BillStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=BillStatus.ACTIVE,
    )

    # Relationships
    house: Mapped["House"] = relationship("House", back_populates="bills")
    creator: Mapped["User"] = relationship("User", foreign_keys=[created_by])
    payments: Mapped[list["BillPayment"]] = relationship(
        "BillPayment",
        back_populates="bill",
        cascade="all, delete-orphan",  # Delete obligations if bill deleted
        order_by="BillPayment.id",
    )

    __table_args__ = (Index("ix_bills_house_created", "house_id", "created_at"),)
