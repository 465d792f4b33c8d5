"""
Analytics API endpoints.

Dashboard reports for profile owners. Event recording happens on the
public profile routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.middleware.auth import get_current_user
from api.dependencies import get_analytics_service
from shared.models import AuthenticatedUser

from .interfaces import IAnalyticsService
from .models import AnalyticsReport, ProfileAnalyticsSummary

router = APIRouter()


@router.get("/dashboard", response_model=AnalyticsReport)
async def get_dashboard(
    window_days: Optional[int] = Query(default=None, ge=1, le=366, description="Days in the views trend"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAnalyticsService = Depends(get_analytics_service),
) -> AnalyticsReport:
    """
    Get the dashboard report across all of the user's profiles.

    Includes a daily views trend, device breakdown, profile ranking and
    engagement metrics. Fails as a whole if any data cannot be loaded.
    """
    return await service.get_dashboard(user, window_days)


@router.get("/profiles/{profile_id}/summary", response_model=ProfileAnalyticsSummary)
async def get_profile_summary(
    profile_id: str,
    time_range: str = Query(default="30d", description="24h, 7d, 30d, 90d, week, month or year"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAnalyticsService = Depends(get_analytics_service),
) -> ProfileAnalyticsSummary:
    """Get totals, sources and trend for one profile."""
    return await service.get_profile_summary(user, profile_id, time_range)
