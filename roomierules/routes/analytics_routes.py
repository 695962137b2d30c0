from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from roomierules.database import get_db
from roomierules.dependencies import get_house_context
from roomierules.models.house_context import HouseContext
from roomierules.services.analytics_service import AnalyticsService
from roomierules.schemas.common import ApiResponse
from roomierules.schemas.analytics_schemas import AnalyticsPayload, SearchPayload, SearchType

router = APIRouter()


@router.get("/analytics", response_model=ApiResponse[AnalyticsPayload])
def get_analytics(
    context: HouseContext = Depends(get_house_context),
    db: Session = Depends(get_db),
):
    """
    Dashboard rollups for the caller's house.

    - Bill totals, this month by type, last month, a six-month trend
    - The caller's own payment totals and the five latest bills
    """
    service = AnalyticsService(db)
    return {"success": True, "data": {"analytics": service.get_analytics(context)}}


@router.get("/search", response_model=ApiResponse[SearchPayload])
def search(
    q: Optional[str] = Query(None, description="Search term (case-insensitive)"),
    type: Optional[SearchType] = Query(None, description="bills, payments or members"),
    context: HouseContext = Depends(get_house_context),
    db: Session = Depends(get_db),
):
    """
    Search bills, the caller's payments and house members.

    - An empty query returns empty results
    """
    service = AnalyticsService(db)
    return {"success": True, "data": service.search(context, q, type)}
