"""
Company Routes

GET /companies - List companies (students see only those they are eligible for)
POST /companies - Create company listing (TPO/admin)
GET /companies/{company_id} - Get company details
PUT /companies/{company_id} - Update company (TPO/admin)
DELETE /companies/{company_id} - Delete company (TPO/admin)
GET /companies/{company_id}/eligible-students - Eligible students (TPO/admin)
"""

from fastapi import APIRouter, Depends
from typing import List

from placement_portal.api.deps import get_company_service
from placement_portal.core.auth import get_current_user, require_roles
from placement_portal.schemas.schemas import (
    CompanyCreate, CompanyResponse, CompanyUpdate, MessageResponse, STAFF_ROLES, UserResponse
)
from placement_portal.services import CompanyService

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.get("", response_model=List[CompanyResponse])
async def list_companies(
    user: dict = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    """
    List company listings, newest first.

    Students get only listings where min_cgpa <= their CGPA and their branch
    is eligible. TPOs and admins get all listings.
    """
    return companies.list_for(user)


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(
    data: CompanyCreate,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    companies: CompanyService = Depends(get_company_service),
):
    """Create a company listing. The caller is recorded as its creator."""
    return companies.create(data.model_dump(), created_by=user["id"])


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: str,
    user: dict = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    return companies.get(company_id)


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    update: CompanyUpdate,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    companies: CompanyService = Depends(get_company_service),
):
    """Update a company listing. Only fields sent in the body change."""
    return companies.update(company_id, update.model_dump(exclude_unset=True))


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(
    company_id: str,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    companies: CompanyService = Depends(get_company_service),
):
    """Delete a company listing. Existing applications are kept."""
    companies.delete(company_id)
    return MessageResponse(message="Company deleted successfully")


@router.get("/{company_id}/eligible-students", response_model=List[UserResponse])
async def eligible_students(
    company_id: str,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    companies: CompanyService = Depends(get_company_service),
):
    """Students whose CGPA and branch satisfy this listing's criteria."""
    return companies.eligible_students(company_id)
