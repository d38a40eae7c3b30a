"""
Authentication Routes

POST /auth/register - Register new student account (returns JWT)
POST /auth/login - Login and get JWT token
"""

from fastapi import APIRouter, Depends, Request

from placement_portal.api.deps import get_account_service
from placement_portal.core.auth import get_app_settings, issue_token
from placement_portal.core.config import Settings
from placement_portal.core.rate_limit import AUTH_RATE_LIMIT, limiter
from placement_portal.schemas.schemas import AuthResponse, LoginRequest, RegisterRequest, UserRole
from placement_portal.services import AccountService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(AUTH_RATE_LIMIT)
async def register(
    request: Request,
    data: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Register a new account.

    Self-registration always creates a student; TPO and admin accounts are
    provisioned by the seed script.
    """
    user = accounts.create(
        name=data.name,
        email=data.email,
        password=data.password,
        role=UserRole.student,
        branch=data.branch,
        cgpa=data.cgpa,
        skills=data.skills,
    )
    return AuthResponse(**user, token=issue_token(user, settings))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = accounts.authenticate(credentials.email, credentials.password)
    return AuthResponse(**user, token=issue_token(user, settings))
