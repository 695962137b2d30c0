from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from roomierules.database import get_db
from roomierules.dependencies import get_current_user, get_house_context
from roomierules.models.house_context import HouseContext
from roomierules.models.user import User
from roomierules.services.bill_service import BillService
from roomierules.schemas.common import ApiResponse, MessagePayload
from roomierules.schemas.bill_schemas import (
    BillCreate,
    BillUpdate,
    BillPayload,
    BillListPayload,
    BillDetailPayload,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[BillListPayload])
def list_bills(
    context: HouseContext = Depends(get_house_context),
    db: Session = Depends(get_db),
):
    """List bills of the caller's house, newest first"""
    service = BillService(db)
    return {"success": True, "data": {"bills": service.list_bills(context)}}


@router.post(
    "",
    response_model=ApiResponse[BillPayload],
    status_code=status.HTTP_201_CREATED,
)
def create_bill(
    data: BillCreate,
    context: HouseContext = Depends(get_house_context),
    db: Session = Depends(get_db),
):
    """
    Create a bill in the caller's house.

    - Types: housing, grocery, eat-out, other
    - **Only hosts** can create housing bills
    - Housing bills are split across the current members: one pending
      payment per member, leftover cents go to the creator
    """
    service = BillService(db)
    bill = service.create_bill(data, context)
    return {"success": True, "data": {"bill": bill}}


@router.get("/{bill_id}", response_model=ApiResponse[BillDetailPayload])
def get_bill(
    bill_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get a bill with its payments and the house members.

    - Returns 403 for bills of another house
    """
    service = BillService(db)
    return {"success": True, "data": service.get_bill_detail(bill_id, user)}


@router.put("/{bill_id}", response_model=ApiResponse[BillPayload])
def update_bill(
    bill_id: int,
    data: BillUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update a bill (**creator only**).

    - Only provided fields are updated
    - Existing payment amounts are not re-split
    """
    service = BillService(db)
    bill = service.update_bill(bill_id, data, user)
    return {"success": True, "data": {"bill": bill}}


@router.delete("/{bill_id}", response_model=ApiResponse[MessagePayload])
def delete_bill(
    bill_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a bill and its payments (**creator only**)"""
    service = BillService(db)
    service.delete_bill(bill_id, user)
    return {"success": True, "data": {"message": "Bill deleted successfully"}}
