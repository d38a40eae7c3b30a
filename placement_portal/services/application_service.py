"""
Application Service - applications collection.

One document per (student, company) pair. This module owns the apply rules
(eligibility + no duplicates) and the status updates that keep each
student's `is_placed` flag in step with their Selected applications.

Status changes are deliberately unrestricted: a TPO can move an application
from any status to any other, including out of Selected/Rejected.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from placement_portal.core.errors import ConflictError, EligibilityError, NotFoundError
from placement_portal.db.mongodb import MongoStore, parse_object_id, serialize_doc
from placement_portal.schemas.schemas import ApplicationStatus
from placement_portal.services.account_service import AccountService
from placement_portal.services.company_service import CompanyService

logger = logging.getLogger(__name__)

APPLICATION_NOT_FOUND = "Application not found"
ALREADY_APPLIED = "You have already applied to this company"
CGPA_TOO_LOW = "You do not meet the minimum CGPA requirement"
BRANCH_NOT_ELIGIBLE = "Your branch is not eligible for this company"

NEWEST_FIRST = [("applied_at", DESCENDING), ("_id", DESCENDING)]

# Summary fields attached on each read path
STUDENT_BASIC = ("name", "email", "branch", "cgpa")
STUDENT_DETAILED = STUDENT_BASIC + ("skills", "is_placed")
COMPANY_BASIC = ("company_name", "role", "package")
COMPANY_DETAILED = COMPANY_BASIC + ("location", "rounds")
COMPANY_MINIMAL = ("company_name", "role")


class ApplicationService:
    """Apply, read and status-update operations on applications."""

    def __init__(self, store: MongoStore):
        self.collection = store.applications
        self.users = store.users
        self.companies = store.companies
        self.accounts = AccountService(store)
        self.company_service = CompanyService(store)

    # ------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------

    def _lookup(self, collection, ids: Iterable[ObjectId], fields: tuple) -> Dict[ObjectId, dict]:
        ids = list({i for i in ids if i is not None})
        if not ids:
            return {}
        projection = {f: 1 for f in fields}
        return {doc["_id"]: doc for doc in collection.find({"_id": {"$in": ids}}, projection)}

    @staticmethod
    def _summary(ref: ObjectId, docs: Dict[ObjectId, dict], fields: tuple) -> Optional[dict]:
        doc = docs.get(ref)
        if doc is None:
            # dangling reference (account or company deleted)
            return None
        summary = {"id": str(ref)}
        summary.update({f: doc.get(f) for f in fields})
        return serialize_doc(summary)

    def _attach(
        self,
        apps: List[dict],
        student_fields: Optional[tuple] = None,
        company_fields: Optional[tuple] = None,
    ) -> List[dict]:
        """Serialize applications and attach student/company summaries."""
        students = self._lookup(self.users, (a["student_id"] for a in apps), student_fields) if student_fields else {}
        companies = self._lookup(self.companies, (a["company_id"] for a in apps), company_fields) if company_fields else {}

        out = []
        for app in apps:
            item = serialize_doc(app)
            if student_fields:
                item["student"] = self._summary(app["student_id"], students, student_fields)
            if company_fields:
                item["company"] = self._summary(app["company_id"], companies, company_fields)
            out.append(item)
        return out

    # ------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------

    def _existing_application(self, student_id: ObjectId, company_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"student_id": student_id, "company_id": company_id}, {"_id": 1})

    def apply(self, student: dict, company_id) -> dict:
        """
        Apply `student` (a serialized user) to a company.

        Checks run in order and each has its own error:
        company exists -> CGPA -> branch -> not already applied.
        The unique (student_id, company_id) index backs up the last check.
        """
        company = self.company_service.get_raw(company_id)

        if float(student.get("cgpa") or 0) < float(company.get("min_cgpa") or 0):
            raise EligibilityError(CGPA_TOO_LOW)
        if student.get("branch") not in company.get("eligible_branches", []):
            raise EligibilityError(BRANCH_NOT_ELIGIBLE)

        student_oid = parse_object_id(student["id"], "User not found")
        if self._existing_application(student_oid, company["_id"]):
            raise ConflictError(ALREADY_APPLIED)

        now = datetime.utcnow()
        doc = {
            "student_id": student_oid,
            "company_id": company["_id"],
            "status": ApplicationStatus.applied.value,
            "current_round": "",
            "remarks": "",
            "applied_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            # concurrent apply won the race
            raise ConflictError(ALREADY_APPLIED)

        doc["_id"] = result.inserted_id
        logger.info("Student %s applied to %s (%s)", student["id"], company.get("company_name"), company["_id"])
        return self._attach([doc], STUDENT_BASIC, COMPANY_BASIC)[0]

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def for_student(self, student_id) -> List[dict]:
        oid = parse_object_id(student_id, "User not found")
        apps = list(self.collection.find({"student_id": oid}).sort(NEWEST_FIRST))
        return self._attach(apps, company_fields=COMPANY_DETAILED)

    def for_company(self, company_id) -> List[dict]:
        company = self.company_service.get_raw(company_id)
        apps = list(self.collection.find({"company_id": company["_id"]}).sort(NEWEST_FIRST))
        return self._attach(apps, student_fields=STUDENT_DETAILED)

    def list_all(self) -> List[dict]:
        apps = list(self.collection.find({}).sort(NEWEST_FIRST))
        return self._attach(apps, STUDENT_BASIC, COMPANY_BASIC)

    # ------------------------------------------------------------
    # Status updates
    # ------------------------------------------------------------

    def _has_other_selected(self, student_id: ObjectId, application_id: ObjectId) -> bool:
        return self.collection.find_one({
            "student_id": student_id,
            "status": ApplicationStatus.selected.value,
            "_id": {"$ne": application_id},
        }, {"_id": 1}) is not None

    def update_status(
        self,
        application_id,
        status: ApplicationStatus,
        current_round: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> dict:
        """
        Set status (and optionally round/remarks) verbatim, then reconcile
        the student's placement flag:

        - Selected: is_placed = True
        - Rejected: is_placed = True only if another application is Selected
        - anything else: flag untouched

        The flag write is a second, independent write; it is not rolled
        back into the status write if it fails.
        """
        oid = parse_object_id(application_id, APPLICATION_NOT_FOUND)
        status = ApplicationStatus(status)

        updates = {"status": status.value, "updated_at": datetime.utcnow()}
        if current_round is not None:
            updates["current_round"] = current_round
        if remarks is not None:
            updates["remarks"] = remarks

        app = self.collection.find_one({"_id": oid})
        if not app:
            raise NotFoundError(APPLICATION_NOT_FOUND)

        self.collection.update_one({"_id": oid}, {"$set": updates})
        app.update(updates)
        logger.info("Application %s -> %s", application_id, status.value)

        student_id = app["student_id"]
        if status == ApplicationStatus.selected:
            self.accounts.set_placed(student_id, True)
            logger.info("Student %s marked placed", student_id)
        elif status == ApplicationStatus.rejected:
            still_placed = self._has_other_selected(student_id, oid)
            if not still_placed:
                self.accounts.set_placed(student_id, False)
            logger.info("Student %s placement after rejection: %s", student_id, still_placed)

        return self._attach([app], STUDENT_BASIC, COMPANY_MINIMAL)[0]
