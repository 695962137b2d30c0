from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from roomierules.database import get_db
from roomierules.dependencies import get_current_user
from roomierules.models.user import User
from roomierules.services.house_service import HouseService
from roomierules.schemas.common import ApiResponse, MessagePayload
from roomierules.schemas.house_schemas import (
    HouseCreate,
    HouseUpdate,
    HouseJoinRequest,
    HousePayload,
    HouseDetailPayload,
    HouseMembersPayload,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[HouseDetailPayload])
def get_house(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Get the caller's house.

    Returns `house: null` when the caller has not created or joined one.
    """
    service = HouseService(db)
    return {"success": True, "data": service.get_user_house(user)}


@router.post(
    "",
    response_model=ApiResponse[HousePayload],
    status_code=status.HTTP_201_CREATED,
)
def create_house(
    data: HouseCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a house.

    - **Hosts only**, one house per host
    - A six-character join code is generated for roommates
    """
    service = HouseService(db)
    house = service.create_house(data, user)
    return {"success": True, "data": {"house": house}}


@router.put("", response_model=ApiResponse[HousePayload])
def update_house(
    data: HouseUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename the house (**owning host only**)"""
    service = HouseService(db)
    house = service.update_house(data, user)
    return {"success": True, "data": {"house": house}}


@router.delete("", response_model=ApiResponse[MessagePayload])
def delete_house(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete the house (**owning host only**).

    - Removes all bills, payment obligations and rules
    - Members stay registered but no longer belong to a house
    - All or nothing: a failure leaves everything in place
    """
    service = HouseService(db)
    service.delete_house(user)
    return {"success": True, "data": {"message": "House deleted successfully"}}


@router.post("/join", response_model=ApiResponse[HousePayload])
def join_house(
    data: HouseJoinRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Join a house with its code (**roommates only**)"""
    service = HouseService(db)
    house = service.join_house(data, user)
    return {"success": True, "data": {"house": house}}


@router.get("/{house_id}/members", response_model=ApiResponse[HouseMembersPayload])
def list_members(
    house_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List members of the caller's own house"""
    service = HouseService(db)
    members = service.get_members(house_id, user)
    return {"success": True, "data": {"members": members}}
