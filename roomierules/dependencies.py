from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from roomierules.config import settings
from roomierules.core.security import extract_user_id
from roomierules.core.exceptions import (
    UnauthorizedException,
    NotFoundException,
    ValidationException,
)
from roomierules.database import get_db
from roomierules.models.house_context import HouseContext
from roomierules.models.user import User
from roomierules.repositories.house_repository import HouseRepository
from roomierules.repositories.user_repository import UserRepository
from roomierules.storage.receipts import ReceiptStorage

# auto_error=False so a missing header goes through our own 401 envelope
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency to validate the JWT and load the caller.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using SECRET_KEY
    3. Read the user id from the 'sub' claim
    4. Load the User row

    Raises:
        UnauthorizedException: Missing, invalid or expired token (401)
        NotFoundException: The token's user no longer exists (404)
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Authorization token required")

    user_id = extract_user_id(credentials.credentials)

    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise NotFoundException("User not found")
    return user


async def get_house_context(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> HouseContext:
    """
    FastAPI dependency for routes that only make sense inside a house.

    Raises:
        ValidationException: The caller has not created or joined a house
    """
    if not user.house_id:
        raise ValidationException("User is not part of any house")

    house = HouseRepository(db).get_by_id(user.house_id)
    if not house:
        raise ValidationException("User is not part of any house")

    return HouseContext(user=user, house=house)


def get_receipt_storage() -> ReceiptStorage:
    """Receipt storage rooted at UPLOAD_DIR"""
    return ReceiptStorage(settings.UPLOAD_DIR, settings.MAX_RECEIPT_SIZE)
