"""
User Routes

GET /users/me - Get own account
PUT /users/me - Update own profile (name, branch, cgpa, skills)
POST /users/me/resume - Upload resume (PDF/DOC/DOCX, students only)
GET /users - List users (TPO/admin), filter by role and name
GET /users/{user_id} - Get user (TPO/admin)
DELETE /users/{user_id} - Delete user (admin; admins cannot be deleted)
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile
from typing import List, Optional

from placement_portal.api.deps import get_account_service
from placement_portal.core.auth import get_app_settings, get_current_user, require_roles
from placement_portal.core.config import Settings
from placement_portal.schemas.schemas import (
    MessageResponse, ResumeUploadResponse, STAFF_ROLES, UserResponse, UserRole, UserUpdate
)
from placement_portal.services import AccountService
from placement_portal.utils.file_upload import save_resume

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's account."""
    return user


@router.put("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    user: dict = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Update own profile. Only provided fields are updated; email and role are fixed."""
    return accounts.update_profile(
        user["id"],
        name=data.name,
        branch=data.branch,
        cgpa=data.cgpa,
        skills=data.skills,
    )


@router.post("/me/resume", response_model=ResumeUploadResponse)
async def upload_resume(
    resume: UploadFile = File(..., description="Resume file (PDF, DOC or DOCX)"),
    user: dict = Depends(require_roles(UserRole.student)),
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
):
    """Upload a resume. Replaces the previous reference on the account."""
    filename = await save_resume(resume, user["id"], settings.upload_dir, settings.max_resume_size_mb)
    accounts.set_resume(user["id"], filename)
    return ResumeUploadResponse(message="Resume uploaded successfully", resume=filename)


@router.get("", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive name search"),
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    accounts: AccountService = Depends(get_account_service),
):
    """List users, newest first."""
    return accounts.list_users(role=role, search=search)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.get(user_id)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    user: dict = Depends(require_roles(UserRole.admin)),
    accounts: AccountService = Depends(get_account_service),
):
    """Delete a user. Admin accounts cannot be deleted."""
    accounts.delete(user_id)
    return MessageResponse(message="User deleted successfully")
