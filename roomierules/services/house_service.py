import secrets
import string

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roomierules.models.house import House
from roomierules.models.user import User
from roomierules.models.role import UserRole
from roomierules.repositories.house_repository import HouseRepository
from roomierules.repositories.user_repository import UserRepository
from roomierules.schemas.house_schemas import HouseCreate, HouseUpdate, HouseJoinRequest
from roomierules.core.exceptions import (
    NotFoundException,
    ForbiddenException,
    ValidationException,
    InternalException,
)

logger = structlog.get_logger(__name__)

HOUSE_CODE_LENGTH = 6
HOUSE_CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 10


def generate_house_code(length: int = HOUSE_CODE_LENGTH) -> str:
    """Random join code such as 'K7Q2ZD'"""
    return "".join(secrets.choice(HOUSE_CODE_ALPHABET) for _ in range(length))


class HouseService:
    """Service layer for house management business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.house_repo = HouseRepository(db)
        self.user_repo = UserRepository(db)

    def get_user_house(self, user: User) -> dict:
        """
        Get the caller's house with its members.

        Returns:
            Dict with house (None when not in a house), members and is_host
        """
        if not user.house_id:
            return {"house": None, "members": [], "is_host": False}

        house = self.house_repo.get_by_id(user.house_id)
        if not house:
            return {"house": None, "members": [], "is_host": False}

        return {
            "house": house,
            "members": self.user_repo.get_house_members(house.id),
            "is_host": house.host_id == user.id,
        }

    def _unique_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_house_code()
            if not self.house_repo.code_exists(code):
                return code
        logger.error("house_code_exhausted", attempts=MAX_CODE_ATTEMPTS)
        raise InternalException("Could not generate unique house code")

    def create_house(self, data: HouseCreate, user: User) -> House:
        """
        Create a house owned by the caller.

        Args:
            data: House name and the host's bank account
            user: Authenticated user, must be a host without a house

        Returns:
            Created house

        Raises:
            ForbiddenException: If user is not a host
            ValidationException: If the host already has a house
            InternalException: If no free house code could be found
        """
        if user.role != UserRole.HOST:
            raise ForbiddenException("Only hosts can create houses")
        if user.house_id:
            raise ValidationException("You have already created a house")

        house = House(name=data.name, house_code=self._unique_code(), host_id=user.id)
        house = self.house_repo.create_for_host(house, user, data.bank_account)
        logger.info("house_created", house_id=house.id, host_id=user.id)
        return house

    def join_house(self, data: HouseJoinRequest, user: User) -> House:
        """
        Join a house by its code.

        Raises:
            ForbiddenException: If user is not a roommate
            ValidationException: If user already belongs to a house
            NotFoundException: If no house has this code
        """
        if user.role != UserRole.ROOMMATE:
            raise ForbiddenException("Only roommates can join houses")
        if user.house_id:
            raise ValidationException("You have already joined a house")

        house = self.house_repo.get_by_code(data.house_code)
        if not house:
            raise NotFoundException("Invalid house code")

        user.house_id = house.id
        self.user_repo.update(user)
        logger.info("house_joined", house_id=house.id, user_id=user.id)
        return house

    def _get_owned_house(self, user: User, action: str) -> House:
        if not user.house_id:
            raise NotFoundException("House not found")
        house = self.house_repo.get_by_id(user.house_id)
        if not house:
            raise NotFoundException("House not found")
        if house.host_id != user.id:
            raise ForbiddenException(f"Only the house host can {action} the house")
        return house

    def update_house(self, data: HouseUpdate, user: User) -> House:
        """
        Rename the caller's house (owning host only).

        Raises:
            NotFoundException: If the caller has no house
            ForbiddenException: If the caller is not its host
        """
        house = self._get_owned_house(user, "update")
        house.name = data.name
        return self.house_repo.update(house)

    def delete_house(self, user: User) -> None:
        """
        Delete the caller's house and everything in it (owning host only).

        Members are detached, not deleted. Runs as one transaction: on any
        database error nothing changes.

        Raises:
            NotFoundException: If the caller has no house
            ForbiddenException: If the caller is not its host
            InternalException: If the transaction fails and was rolled back
        """
        house = self._get_owned_house(user, "delete")
        house_id = house.id
        try:
            self.house_repo.delete_with_contents(house)
        except SQLAlchemyError as e:
            logger.error("house_delete_failed", house_id=house_id, error=str(e))
            raise InternalException("Failed to delete house")
        logger.info("house_deleted", house_id=house_id, host_id=user.id)

    def get_members(self, house_id: int, user: User) -> list[User]:
        """
        List members of a house the caller belongs to.

        Raises:
            ForbiddenException: If the caller is not a member of the house
        """
        if user.house_id != house_id:
            raise ForbiddenException("Access denied")
        return self.user_repo.get_house_members(house_id)
