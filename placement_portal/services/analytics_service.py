"""
Analytics Service - placement statistics for the TPO/admin dashboards.

Always computed from the live collections; nothing is cached. Every ratio
and average falls back to 0 on empty data.
"""

from typing import Dict

from placement_portal.db.mongodb import MongoStore
from placement_portal.schemas.schemas import Branch, UserRole

STUDENT = UserRole.student.value


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0


class AnalyticsService:

    def __init__(self, store: MongoStore):
        self.users = store.users
        self.companies = store.companies
        self.applications = store.applications

    def applications_by_status(self) -> Dict[str, int]:
        """{status: count} for statuses that occur at least once."""
        pipeline = [{"$group": {"_id": "$status", "count": {"$sum": 1}}}]
        return {row["_id"]: row["count"] for row in self.applications.aggregate(pipeline)}

    def branch_wise(self) -> list:
        rows = []
        for branch in Branch:
            total = self.users.count_documents({"role": STUDENT, "branch": branch.value})
            if total == 0:
                continue
            placed = self.users.count_documents({"role": STUDENT, "branch": branch.value, "is_placed": True})
            rows.append({"branch": branch.value, "total": total, "placed": placed})
        return rows

    def summary(self) -> dict:
        total_students = self.users.count_documents({"role": STUDENT})
        placed_students = self.users.count_documents({"role": STUDENT, "is_placed": True})

        packages = [c.get("package") or 0 for c in self.companies.find({}, {"package": 1})]
        highest_package = max(packages) if packages else 0
        average_package = round(sum(packages) / len(packages), 2) if packages else 0

        return {
            "total_students": total_students,
            "placed_students": placed_students,
            "unplaced_students": total_students - placed_students,
            "placement_percentage": _percent(placed_students, total_students),
            "highest_package": highest_package,
            "average_package": average_package,
            "total_companies": len(packages),
            "total_applications": self.applications.count_documents({}),
            "branch_wise": self.branch_wise(),
            "applications_by_status": self.applications_by_status(),
        }
