from typing import Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from roomierules.database import get_db
from roomierules.dependencies import get_current_user, get_receipt_storage
from roomierules.models.role import PaymentStatus
from roomierules.models.user import User
from roomierules.services.payment_service import PaymentService
from roomierules.storage.receipts import ReceiptStorage
from roomierules.schemas.common import ApiResponse
from roomierules.schemas.payment_schemas import PaymentListPayload, PaymentPayload

router = APIRouter()


@router.get("", response_model=ApiResponse[PaymentListPayload])
def list_payments(
    status: Optional[PaymentStatus] = Query(None, description="pending or paid"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Max results"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List the caller's payments, newest first.

    Totals (pending, paid, total) are summed over the filtered list.
    """
    service = PaymentService(db)
    payments, totals = service.list_user_payments(user, status=status, limit=limit)
    return {"success": True, "data": {"payments": payments, "totals": totals}}


@router.get("/{payment_id}", response_model=ApiResponse[PaymentPayload])
def get_payment(
    payment_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a payment of the caller's house"""
    service = PaymentService(db)
    return {"success": True, "data": {"payment": service.get_payment(payment_id, user)}}


@router.put("/{payment_id}", response_model=ApiResponse[PaymentPayload])
def submit_receipt(
    payment_id: int,
    receipt: UploadFile = File(..., description="JPEG, PNG or WebP image, max 5MB"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: ReceiptStorage = Depends(get_receipt_storage),
):
    """
    Mark a payment as paid by uploading its receipt.

    - Only the member who owes the payment can settle it
    - A payment can only be settled once
    - multipart/form-data with a `receipt` file field
    """
    # Read one byte past the limit so oversized files are detected without
    # loading an arbitrarily large body
    data = receipt.file.read(storage.max_size + 1)

    service = PaymentService(db, storage=storage)
    payment = service.submit_receipt(
        payment_id,
        user,
        data=data,
        filename=receipt.filename,
        content_type=receipt.content_type,
    )
    return {"success": True, "data": {"payment": payment}}
