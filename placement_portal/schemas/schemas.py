"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Dict, Union
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    tpo = "tpo"
    admin = "admin"


class Branch(str, Enum):
    CSE = "CSE"
    ECE = "ECE"
    EEE = "EEE"
    ME = "ME"
    CE = "CE"
    IT = "IT"
    Other = "Other"


class RoundType(str, Enum):
    aptitude = "Aptitude"
    technical = "Technical"
    hr = "HR"
    group_discussion = "Group Discussion"
    coding = "Coding"


class ApplicationStatus(str, Enum):
    applied = "Applied"
    aptitude = "Aptitude"
    technical = "Technical"
    hr = "HR"
    selected = "Selected"
    rejected = "Rejected"


DEFAULT_BRANCH = Branch.CSE

# Roles allowed to manage companies, applicants and analytics
STAFF_ROLES = (UserRole.tpo, UserRole.admin)


def split_skills(value: Union[str, List[str], None]) -> Optional[List[str]]:
    """Accept skills as a list or as a comma-separated string."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list):
        items = value
    else:
        # let pydantic report the type error
        return value
    cleaned = []
    for skill in items:
        if isinstance(skill, str):
            skill = skill.strip()
            if not skill:
                continue
        cleaned.append(skill)
    return cleaned


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    branch: Branch = DEFAULT_BRANCH
    cgpa: float = Field(0, ge=0, le=10)
    skills: List[str] = []

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, v):
        return split_skills(v) or []


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ============================================================
# USER SCHEMAS
# ============================================================

class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    branch: Branch = DEFAULT_BRANCH
    cgpa: float = 0
    skills: List[str] = []
    resume: str = ""
    is_placed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(UserResponse):
    token: str
    token_type: str = "bearer"


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    branch: Optional[Branch] = None
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: Optional[List[str]] = None

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, v):
        return split_skills(v)


class ResumeUploadResponse(BaseModel):
    message: str
    resume: str


# ============================================================
# COMPANY (LISTING) SCHEMAS
# ============================================================

class InterviewRound(BaseModel):
    name: str
    type: RoundType


class CompanyCreate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    role: str = Field(..., min_length=1, max_length=200)
    package: float = Field(..., ge=0, description="Package in LPA")
    description: str = ""
    location: str = ""
    min_cgpa: float = Field(..., ge=0, le=10)
    eligible_branches: List[Branch] = []
    required_skills: List[str] = []
    rounds: List[InterviewRound] = []
    application_deadline: Optional[datetime] = None


class CompanyUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    role: Optional[str] = Field(None, min_length=1, max_length=200)
    package: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    location: Optional[str] = None
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    eligible_branches: Optional[List[Branch]] = None
    required_skills: Optional[List[str]] = None
    rounds: Optional[List[InterviewRound]] = None
    application_deadline: Optional[datetime] = None


class CreatorSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class CompanyResponse(BaseModel):
    id: str
    company_name: str
    role: str
    package: float
    description: str = ""
    location: str = ""
    min_cgpa: float
    eligible_branches: List[Branch] = []
    required_skills: List[str] = []
    rounds: List[InterviewRound] = []
    application_deadline: Optional[datetime] = None
    created_by: Optional[CreatorSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    company_id: str = Field(..., min_length=1)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    current_round: Optional[str] = None
    remarks: Optional[str] = None


class StudentSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    branch: Optional[Branch] = None
    cgpa: Optional[float] = None
    skills: Optional[List[str]] = None
    is_placed: Optional[bool] = None


class CompanySummary(BaseModel):
    id: str
    company_name: Optional[str] = None
    role: Optional[str] = None
    package: Optional[float] = None
    location: Optional[str] = None
    rounds: Optional[List[InterviewRound]] = None


class ApplicationResponse(BaseModel):
    id: str
    student_id: str
    company_id: str
    status: ApplicationStatus
    current_round: str = ""
    remarks: str = ""
    applied_at: datetime
    updated_at: Optional[datetime] = None
    student: Optional[StudentSummary] = None
    company: Optional[CompanySummary] = None


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class BranchStats(BaseModel):
    branch: Branch
    total: int
    placed: int


class AnalyticsResponse(BaseModel):
    total_students: int
    placed_students: int
    unplaced_students: int
    placement_percentage: float
    highest_package: float
    average_package: float
    total_companies: int
    total_applications: int
    branch_wise: List[BranchStats]
    applications_by_status: Dict[str, int]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
    error: str
