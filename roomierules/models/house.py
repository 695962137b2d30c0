"""House model: the sharing boundary for bills and rules."""

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from roomierules.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from roomierules.models.user import User
    from roomierules.models.bill import Bill
    from roomierules.models.house_rule import HouseRule


class House(Base, TimestampMixin):
    """
    A shared household owned by exactly one host.

    Members are all users whose house_id points here. Roommates find the
    house through its six-character house_code. Bills and rules belong to
    the house and go away with it; members are detached instead.
    """

    __tablename__ = "houses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    house_code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False, index=True)
    host_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    host: Mapped["User"] = relationship("User", foreign_keys=[host_id])
    members: Mapped[list["User"]] = relationship(
        "User",
        back_populates="house",
        foreign_keys="User.house_id",
        order_by="User.id",
    )
    bills: Mapped[list["Bill"]] = relationship(
        "Bill",
        back_populates="house",
        cascade="all, delete-orphan",
    )
    rules: Mapped[list["HouseRule"]] = relationship(
        "HouseRule",
        back_populates="house",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<House(id={self.id}, name='{self.name}', code='{self.house_code}')>"
