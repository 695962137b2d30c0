from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from roomierules.database import get_db
from roomierules.dependencies import get_current_user
from roomierules.models.user import User
from roomierules.services.auth_service import AuthService
from roomierules.schemas.common import ApiResponse
from roomierules.schemas.auth_schemas import (
    RegisterRequest,
    LoginRequest,
    UserPayload,
    LoginPayload,
)

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[UserPayload],
    status_code=status.HTTP_201_CREATED,
)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create an account.

    - Role is either "host" or "roommate" and cannot be changed later
    - Password must be at least 6 characters
    """
    service = AuthService(db)
    user = service.register(data)
    return {"success": True, "data": {"user": user}}


@router.post("/login", response_model=ApiResponse[LoginPayload])
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    service = AuthService(db)
    user, token = service.login(data)
    return {"success": True, "data": {"user": user, "token": token}}


@router.get("/me", response_model=ApiResponse[UserPayload])
async def me(user: User = Depends(get_current_user)):
    """Get the authenticated user"""
    return {"success": True, "data": {"user": user}}
