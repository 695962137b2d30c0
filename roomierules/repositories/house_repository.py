"""Repository for House model operations."""

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from roomierules.models.house import House
from roomierules.models.user import User
from roomierules.models.bill import Bill
from roomierules.models.bill_payment import BillPayment
from roomierules.models.house_rule import HouseRule


class HouseRepository:
    """Repository for House model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, house_id: int) -> House | None:
        """
        Get house by ID.

        Args:
            house_id: House ID

        Returns:
            House object or None if not found
        """
        return self.db.query(House).filter(House.id == house_id).first()

    def get_by_code(self, house_code: str) -> House | None:
        """
        Get house by its join code.

        Args:
            house_code: Six-character join code (already normalized)

        Returns:
            House object or None if no house uses the code
        """
        return self.db.query(House).filter(House.house_code == house_code).first()

    def code_exists(self, house_code: str) -> bool:
        return self.get_by_code(house_code) is not None

    def create_for_host(self, house: House, host: User, bank_account: str) -> House:
        """
        Create a house and attach its host in one commit.

        Args:
            house: House object to create
            host: Host user; gets house_id and bank_account set
            bank_account: Where roommates send their share

        Returns:
            Created House object with ID populated
        """
        self.db.add(house)
        self.db.flush()  # Assign house.id without committing
        host.house_id = house.id
        host.bank_account = bank_account
        self.db.commit()
        self.db.refresh(house)
        return house

    def update(self, house: House) -> House:
        """
        Update an existing house.

        Args:
            house: House object with updated fields

        Returns:
            Updated House object
        """
        self.db.commit()
        self.db.refresh(house)
        return house

    def delete_with_contents(self, house: House) -> None:
        """
        Delete a house and everything it owns in a single transaction.

        Order: detach members, delete obligations of the house's bills,
        delete bills, delete rules, delete the house. Nothing is committed
        unless every step succeeds; on any error the session is rolled
        back and the error re-raised.

        Args:
            house: House object to delete
        """
        house_id = house.id
        try:
            self._detach_members(house_id)
            self._delete_payments(house_id)
            self._delete_bills(house_id)
            self._delete_rules(house_id)
            self.db.execute(delete(House).where(House.id == house_id))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expunge(house)

    def _detach_members(self, house_id: int) -> None:
        self.db.execute(
            update(User)
            .where(User.house_id == house_id)
            .values(house_id=None)
            .execution_options(synchronize_session="fetch")
        )

    def _delete_payments(self, house_id: int) -> None:
        bill_ids = select(Bill.id).where(Bill.house_id == house_id)
        self.db.execute(
            delete(BillPayment)
            .where(BillPayment.bill_id.in_(bill_ids))
            .execution_options(synchronize_session=False)
        )

    def _delete_bills(self, house_id: int) -> None:
        self.db.execute(
            delete(Bill)
            .where(Bill.house_id == house_id)
            .execution_options(synchronize_session=False)
        )

    def _delete_rules(self, house_id: int) -> None:
        self.db.execute(
            delete(HouseRule)
            .where(HouseRule.house_id == house_id)
            .execution_options(synchronize_session=False)
        )
