"""
Company Service - companies collection (job listings).

Each document is one opening: company, role, package, the eligibility
criteria (min CGPA + eligible branches) and the interview rounds.
"""

import logging
from datetime import datetime
from typing import List

from pymongo import DESCENDING, ReturnDocument

from placement_portal.core.errors import NotFoundError, ValidationError
from placement_portal.db.mongodb import MongoStore, parse_object_id, serialize_doc
from placement_portal.schemas.schemas import UserRole

logger = logging.getLogger(__name__)

COMPANY_NOT_FOUND = "Company not found"

REQUIRED_FIELDS = ("company_name", "role", "package", "min_cgpa")
MUTABLE_FIELDS = (
    "company_name", "role", "package", "description", "location", "min_cgpa",
    "eligible_branches", "required_skills", "rounds", "application_deadline",
)


def _enum_values(items) -> list:
    return [getattr(item, "value", item) for item in items or []]


def _round_docs(rounds) -> list:
    docs = []
    for r in rounds or []:
        if hasattr(r, "model_dump"):
            r = r.model_dump()
        docs.append({"name": r.get("name"), "type": getattr(r.get("type"), "value", r.get("type"))})
    return docs


def _clean_fields(data: dict) -> dict:
    """Store enums as plain strings and rounds as plain dicts."""
    out = dict(data)
    if "eligible_branches" in out:
        out["eligible_branches"] = _enum_values(out["eligible_branches"])
    if "rounds" in out:
        out["rounds"] = _round_docs(out["rounds"])
    for field in ("package", "min_cgpa"):
        if field in out and out[field] is not None:
            if out[field] < 0:
                raise ValidationError(f"{field} must be non-negative")
            out[field] = float(out[field])
    return out


class CompanyService:
    """CRUD and eligibility queries for job listings."""

    def __init__(self, store: MongoStore):
        self.collection = store.companies
        self.users = store.users

    def _attach_creators(self, docs: List[dict]) -> List[dict]:
        """Replace created_by ObjectIds with {id, name, email} summaries."""
        creator_ids = {d.get("created_by") for d in docs if d.get("created_by")}
        creators = {
            u["_id"]: u for u in self.users.find({"_id": {"$in": list(creator_ids)}}, {"name": 1, "email": 1})
        } if creator_ids else {}

        out = []
        for doc in docs:
            item = serialize_doc(doc)
            creator_id = doc.get("created_by")
            if creator_id is None:
                item["created_by"] = None
            else:
                creator = creators.get(creator_id, {})
                item["created_by"] = {
                    "id": str(creator_id),
                    "name": creator.get("name"),
                    "email": creator.get("email"),
                }
            out.append(item)
        return out

    def get_raw(self, company_id) -> dict:
        """Raw listing document (ObjectIds intact) or NotFoundError."""
        oid = parse_object_id(company_id, COMPANY_NOT_FOUND)
        doc = self.collection.find_one({"_id": oid})
        if not doc:
            raise NotFoundError(COMPANY_NOT_FOUND)
        return doc

    def create(self, data: dict, created_by) -> dict:
        """Create a listing. `data` follows CompanyCreate; arrays default to empty."""
        missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, "")]
        if missing:
            raise ValidationError("Company name, role, package, and min_cgpa are required")

        creator_id = parse_object_id(created_by, "Creator not found")
        if not self.users.find_one({"_id": creator_id}, {"_id": 1}):
            raise ValidationError("Creator account does not exist")

        now = datetime.utcnow()
        doc = _clean_fields({
            "company_name": data["company_name"],
            "role": data["role"],
            "package": data["package"],
            "description": data.get("description") or "",
            "location": data.get("location") or "",
            "min_cgpa": data["min_cgpa"],
            "eligible_branches": data.get("eligible_branches") or [],
            "required_skills": list(data.get("required_skills") or []),
            "rounds": data.get("rounds") or [],
            "application_deadline": data.get("application_deadline"),
        })
        doc.update({"created_by": creator_id, "created_at": now, "updated_at": now})

        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Company %s (%s) created by %s", doc["company_name"], doc["role"], created_by)
        return self._attach_creators([doc])[0]

    def list_for(self, user: dict) -> List[dict]:
        """
        Listings newest first.

        Students only see listings they are eligible for (min CGPA at most
        their CGPA and their branch among the eligible ones); TPOs and admins
        see everything.
        """
        query = {}
        if user["role"] == UserRole.student.value:
            query = {
                "min_cgpa": {"$lte": user.get("cgpa", 0)},
                "eligible_branches": user.get("branch"),
            }

        docs = list(self.collection.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)]))
        return self._attach_creators(docs)

    def get(self, company_id) -> dict:
        return self._attach_creators([self.get_raw(company_id)])[0]

    def update(self, company_id, fields: dict) -> dict:
        """Partial update: only the keys present in `fields` are written."""
        oid = parse_object_id(company_id, COMPANY_NOT_FOUND)
        # None means "leave as is", except for the deadline which may be cleared
        updates = _clean_fields({
            k: v for k, v in fields.items()
            if k in MUTABLE_FIELDS and (v is not None or k == "application_deadline")
        })
        updates["updated_at"] = datetime.utcnow()

        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError(COMPANY_NOT_FOUND)
        return self._attach_creators([doc])[0]

    def delete(self, company_id) -> None:
        """Delete a listing. Its applications are left in place."""
        doc = self.get_raw(company_id)
        self.collection.delete_one({"_id": doc["_id"]})
        logger.info("Deleted company %s (%s)", doc.get("company_name"), company_id)

    def eligible_students(self, company_id) -> List[dict]:
        """Students with CGPA >= min_cgpa whose branch is one of the eligible branches."""
        company = self.get_raw(company_id)
        cursor = self.users.find(
            {
                "role": UserRole.student.value,
                "cgpa": {"$gte": company.get("min_cgpa", 0)},
                "branch": {"$in": company.get("eligible_branches", [])},
            },
            {"password": 0},
        ).sort([("name", 1)])
        return [serialize_doc(d) for d in cursor]
