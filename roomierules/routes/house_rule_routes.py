from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from roomierules.database import get_db
from roomierules.dependencies import get_current_user, get_house_context
from roomierules.models.house_context import HouseContext
from roomierules.models.user import User
from roomierules.services.house_rule_service import HouseRuleService
from roomierules.schemas.common import ApiResponse, MessagePayload
from roomierules.schemas.house_rule_schemas import (
    HouseRuleCreate,
    HouseRuleUpdate,
    HouseRulePayload,
    HouseRuleListPayload,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[HouseRuleListPayload])
def list_rules(
    context: HouseContext = Depends(get_house_context),
    db: Session = Depends(get_db),
):
    """List the rules of the caller's house"""
    service = HouseRuleService(db)
    return {"success": True, "data": {"rules": service.list_rules(context)}}


@router.post(
    "",
    response_model=ApiResponse[HouseRulePayload],
    status_code=status.HTTP_201_CREATED,
)
def create_rule(
    data: HouseRuleCreate,
    context: HouseContext = Depends(get_house_context),
    db: Session = Depends(get_db),
):
    """Post a rule (**host only**)"""
    service = HouseRuleService(db)
    return {"success": True, "data": {"rule": service.create_rule(data, context)}}


@router.get("/{rule_id}", response_model=ApiResponse[HouseRulePayload])
def get_rule(
    rule_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = HouseRuleService(db)
    return {"success": True, "data": {"rule": service.get_rule(rule_id, user)}}


@router.put("/{rule_id}", response_model=ApiResponse[HouseRulePayload])
def update_rule(
    rule_id: int,
    data: HouseRuleUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit a rule (**host only**)"""
    service = HouseRuleService(db)
    return {"success": True, "data": {"rule": service.update_rule(rule_id, data, user)}}


@router.delete("/{rule_id}", response_model=ApiResponse[MessagePayload])
def delete_rule(
    rule_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove a rule (**host only**)"""
    service = HouseRuleService(db)
    service.delete_rule(rule_id, user)
    return {"success": True, "data": {"message": "House rule deleted successfully"}}
