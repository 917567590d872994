"""Analytics and dashboard router."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from analytics import build_dashboard, build_report
from app.config import settings
from app.dependencies import CurrentUser, Store
from common.schemas.analytics import AnalyticsReport, DashboardSummary, TimeRange

router = APIRouter(prefix="/api/v1", tags=["Analytics"])

TIME_RANGE_CHOICES = [r.value for r in TimeRange]


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(
    user_id: CurrentUser,
    store: Store,
    months: Optional[int] = Query(None, description=f"Lookback window, one of {TIME_RANGE_CHOICES}"),
):
    """Visit statistics, chart series and insights for the selected window."""
    if months is None:
        months = settings.DEFAULT_TIME_RANGE_MONTHS
    try:
        time_range = TimeRange(months)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"months must be one of {TIME_RANGE_CHOICES}",
        )

    visits = await store.list_for_user(user_id)
    return build_report(visits, time_range)


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(user_id: CurrentUser, store: Store):
    """Overview: totals, recent visits and upcoming follow-ups."""
    return build_dashboard(await store.list_for_user(user_id))
