"""
Application Routes

POST /applications - Apply to a company (student only)
GET /applications/me - My applications (student only)
GET /applications - All applications (TPO/admin)
GET /applications/company/{company_id} - Applications for a company (TPO/admin)
PUT /applications/{application_id}/status - Update status / round / remarks (TPO/admin)
"""

from fastapi import APIRouter, Depends
from typing import List

from placement_portal.api.deps import get_application_service
from placement_portal.core.auth import require_roles
from placement_portal.schemas.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate, STAFF_ROLES, UserRole
)
from placement_portal.services import ApplicationService

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_company(
    data: ApplicationCreate,
    student: dict = Depends(require_roles(UserRole.student)),
    applications: ApplicationService = Depends(get_application_service),
):
    """
    Apply to a company. Students only.

    Fails if the company is missing, the student's CGPA or branch does not
    qualify, or the student already applied.
    """
    return applications.apply(student, data.company_id)


@router.get("/me", response_model=List[ApplicationResponse])
async def get_my_applications(
    student: dict = Depends(require_roles(UserRole.student)),
    applications: ApplicationService = Depends(get_application_service),
):
    """Current student's applications, newest first."""
    return applications.for_student(student["id"])


@router.get("", response_model=List[ApplicationResponse])
async def get_all_applications(
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    applications: ApplicationService = Depends(get_application_service),
):
    return applications.list_all()


@router.get("/company/{company_id}", response_model=List[ApplicationResponse])
async def get_company_applications(
    company_id: str,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    applications: ApplicationService = Depends(get_application_service),
):
    return applications.for_company(company_id)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    applications: ApplicationService = Depends(get_application_service),
):
    """
    Update status of an application.

    Selected marks the student placed; Rejected un-marks them unless
    another of their applications is Selected.
    """
    return applications.update_status(
        application_id,
        update.status,
        current_round=update.current_round,
        remarks=update.remarks,
    )
