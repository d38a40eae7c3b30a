"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes and role gating
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from bson import ObjectId
from bson.errors import InvalidId
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from placement_portal.core.config import Settings
from placement_portal.core.errors import AuthenticationError, ForbiddenError
from placement_portal.db.mongodb import MongoStore, get_store, serialize_doc
from placement_portal.schemas.schemas import UserRole

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (missing header is reported by get_current_user)
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # malformed or missing stored hash
        return False


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def issue_token(user: dict, settings: Settings) -> str:
    """Token for a serialized user document."""
    return create_access_token({"sub": user["id"], "role": user["role"]}, settings)


def decode_token(token: str, settings: Settings) -> Optional[dict]:
    """Decode and verify JWT token. None if signature or expiry check fails."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency - settings the app was built with."""
    return request.app.state.settings


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: MongoStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """
    FastAPI dependency - Get current authenticated user (password omitted).

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(credentials.credentials, settings)
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token")

    try:
        user_id = ObjectId(payload["sub"])
    except (InvalidId, TypeError):
        raise AuthenticationError("Invalid or expired token")

    user = store.users.find_one({"_id": user_id}, {"password": 0})
    if not user:
        # token outlived its account
        raise AuthenticationError("Invalid or expired token")

    return serialize_doc(user)


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that admits only the given roles.

    Authentication runs first, so a missing/invalid token is always reported
    as 401 before a role mismatch is reported as 403.

    Usage:
        @router.get("/analytics")
        async def route(user: dict = Depends(require_roles(UserRole.tpo, UserRole.admin))):
            ...
    """
    allowed = frozenset(UserRole(r) for r in roles)

    async def role_checker(user: dict = Depends(get_current_user)) -> dict:
        if UserRole(user["role"]) not in allowed:
            logger.info("Role %s denied (allowed: %s)", user["role"], sorted(r.value for r in allowed))
            raise ForbiddenError("Insufficient permissions")
        return user

    return role_checker
