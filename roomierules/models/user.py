from sqlalchemy import String, Integer, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from roomierules.models.base import Base, TimestampMixin
from roomierules.models.role import UserRole

if TYPE_CHECKING:
    from roomierules.models.house import House


class User(Base, TimestampMixin):
    """
    Registered account.

    A user belongs to at most one house through house_id. The back-reference
    is nulled (not deleted) when the house goes away.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=UserRole.ROOMMATE,
    )
    house_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("houses.id", use_alter=True, name="fk_users_house_id"),
        nullable=True,
        index=True,
    )
    # Only meaningful for hosts: where roommates send their share
    bank_account: Mapped[str | None] = mapped_column(String(50), nullable=True)

    house: Mapped["House | None"] = relationship(
        "House", back_populates="members", foreign_keys=[house_id]
    )

    @property
    def is_host(self) -> bool:
        return self.role == UserRole.HOST

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
