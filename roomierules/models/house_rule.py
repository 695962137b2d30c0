from sqlalchemy import String, Integer, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from roomierules.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from roomierules.models.house import House


class HouseRule(Base, TimestampMixin):
    """Free-text rule posted by the host on the house board."""

    __tablename__ = "house_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    house_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("houses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    house: Mapped["House"] = relationship("House", back_populates="rules")
