"""
Account Service - users collection.

Handles registration, login, self-service profile edits and the
TPO/admin views of the user directory.
"""

import logging
import re
from datetime import datetime
from typing import List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from placement_portal.core.auth import hash_password, verify_password
from placement_portal.core.errors import (
    AuthenticationError, ConflictError, ForbiddenError, NotFoundError, ValidationError
)
from placement_portal.db.mongodb import MongoStore, parse_object_id, serialize_doc, serialize_docs
from placement_portal.schemas.schemas import Branch, DEFAULT_BRANCH, UserRole

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_TAKEN = "User already exists with this email"

# Never leaves the service
HIDE_PASSWORD = {"password": 0}

MIN_CGPA, MAX_CGPA = 0.0, 10.0


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def check_cgpa(cgpa) -> float:
    try:
        value = float(cgpa)
    except (TypeError, ValueError):
        raise ValidationError("cgpa must be a number")
    if not MIN_CGPA <= value <= MAX_CGPA:
        raise ValidationError("cgpa must be between 0 and 10")
    return value


class AccountService:
    """Operations on user accounts of every role."""

    def __init__(self, store: MongoStore):
        self.collection = store.users

    def create(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.student,
        branch: Branch = DEFAULT_BRANCH,
        cgpa: float = 0,
        skills: Optional[List[str]] = None,
        is_placed: bool = False,
    ) -> dict:
        """
        Create an account and return it without the password hash.

        Registration always passes role=student; the seed script provisions
        TPOs and admins through the same path.
        """
        name = (name or "").strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")

        if self.collection.find_one({"email": email}, {"_id": 1}):
            raise ConflictError(EMAIL_TAKEN)

        now = datetime.utcnow()
        doc = {
            "name": name,
            "email": email,
            "password": hash_password(password),
            "role": UserRole(role).value,
            "branch": Branch(branch or DEFAULT_BRANCH).value,
            "cgpa": check_cgpa(cgpa or 0),
            "skills": list(skills or []),
            "resume": "",
            "is_placed": bool(is_placed),
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            # lost a race with a concurrent registration
            raise ConflictError(EMAIL_TAKEN)

        doc["_id"] = result.inserted_id
        doc.pop("password")
        logger.info("Registered %s account %s", doc["role"], email)
        return serialize_doc(doc)

    def authenticate(self, email: str, password: str) -> dict:
        """Return the account for valid credentials; any mismatch is the same error."""
        email = normalize_email(email)
        doc = self.collection.find_one({"email": email})
        if not doc or not password or not verify_password(password, doc.get("password", "")):
            logger.info("Failed login for %s", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        doc.pop("password", None)
        return serialize_doc(doc)

    def get(self, user_id) -> dict:
        oid = parse_object_id(user_id, USER_NOT_FOUND)
        doc = self.collection.find_one({"_id": oid}, HIDE_PASSWORD)
        if not doc:
            raise NotFoundError(USER_NOT_FOUND)
        return serialize_doc(doc)

    def update_profile(
        self,
        user_id,
        name: Optional[str] = None,
        branch: Optional[Branch] = None,
        cgpa: Optional[float] = None,
        skills: Optional[List[str]] = None,
    ) -> dict:
        """Self-service edit. Email and role cannot be changed here."""
        oid = parse_object_id(user_id, USER_NOT_FOUND)
        updates = {}

        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be blank")
            updates["name"] = name.strip()
        if branch:
            updates["branch"] = Branch(branch).value
        if cgpa is not None:
            updates["cgpa"] = check_cgpa(cgpa)
        if skills is not None:
            updates["skills"] = list(skills)

        updates["updated_at"] = datetime.utcnow()
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            projection=HIDE_PASSWORD,
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError(USER_NOT_FOUND)
        return serialize_doc(doc)

    def set_resume(self, user_id, filename: str) -> dict:
        oid = parse_object_id(user_id, USER_NOT_FOUND)
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"resume": filename, "updated_at": datetime.utcnow()}},
            projection=HIDE_PASSWORD,
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError(USER_NOT_FOUND)
        return serialize_doc(doc)

    def set_placed(self, user_id, is_placed: bool) -> None:
        """Placement flag write used by application status changes."""
        self.collection.update_one(
            {"_id": parse_object_id(user_id, USER_NOT_FOUND)},
            {"$set": {"is_placed": bool(is_placed), "updated_at": datetime.utcnow()}}
        )

    def list_users(self, role: Optional[UserRole] = None, search: Optional[str] = None) -> List[dict]:
        """All accounts newest first, optionally by role and name substring (case-insensitive)."""
        query = {}
        if role:
            query["role"] = UserRole(role).value
        if search:
            query["name"] = {"$regex": re.escape(search), "$options": "i"}

        cursor = self.collection.find(query, HIDE_PASSWORD).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        return serialize_docs(cursor)

    def delete(self, user_id) -> None:
        """Delete an account. Admin accounts can never be deleted."""
        oid = parse_object_id(user_id, USER_NOT_FOUND)
        doc = self.collection.find_one({"_id": oid}, {"role": 1, "email": 1})
        if not doc:
            raise NotFoundError(USER_NOT_FOUND)
        if doc.get("role") == UserRole.admin.value:
            raise ForbiddenError("Cannot delete admin users")

        self.collection.delete_one({"_id": oid})
        logger.info("Deleted user %s (%s)", doc.get("email"), user_id)
