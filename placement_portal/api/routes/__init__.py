"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_portal.api.routes.auth_routes import router as auth_router
from placement_portal.api.routes.user_routes import router as user_router
from placement_portal.api.routes.company_routes import router as company_router
from placement_portal.api.routes.application_routes import router as application_router
from placement_portal.api.routes.analytics_routes import router as analytics_router
from placement_portal.schemas.schemas import ErrorResponse

# Main API router; every error body is {"detail", "error"}
ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (400, 401, 403, 404, 409, 422)
}
api_router = APIRouter(responses=ERROR_RESPONSES)

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(company_router)
api_router.include_router(application_router)
api_router.include_router(analytics_router)
