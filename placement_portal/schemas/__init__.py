"""
Schemas module - Request/Response schemas for API endpoints.

Schemas are the API contract (what the client sends/receives); services
work with plain dicts straight from MongoDB.
"""

from placement_portal.schemas.schemas import (
    ApplicationStatus,
    Branch,
    RoundType,
    STAFF_ROLES,
    UserRole,
)

__all__ = ["ApplicationStatus", "Branch", "RoundType", "STAFF_ROLES", "UserRole"]
