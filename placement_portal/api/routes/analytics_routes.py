"""
Analytics Routes

GET /analytics - Placement statistics (TPO/admin)
"""

from fastapi import APIRouter, Depends

from placement_portal.api.deps import get_analytics_service
from placement_portal.core.auth import require_roles
from placement_portal.schemas.schemas import AnalyticsResponse, STAFF_ROLES
from placement_portal.services import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    """
    Placement overview: student/placed counts and percentage, package
    highs/averages, per-branch breakdown and application counts by status.
    """
    return analytics.summary()
