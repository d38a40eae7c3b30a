"""
MongoDB Store Handle

MongoDB stores:
- users: accounts of every role (student, tpo, admin)
- companies: job listings with eligibility criteria and interview rounds
- applications: one document per (student, company) pair

The store is an explicit object opened at startup and closed at shutdown.
Request handlers get it through the get_store() dependency instead of a
module-level client.
"""
import logging
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from placement_portal.core.errors import NotFoundError

logger = logging.getLogger(__name__)


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
    "applications": "applications",
}


class MongoStore:
    """
    Owns the MongoClient and hands out collections.

    Pass `client` to reuse an existing client (tests pass a mongomock client).
    """

    def __init__(self, uri: str, db_name: str, client: Optional[MongoClient] = None):
        self.uri = uri
        self.db_name = db_name
        self._client = client
        self._db: Optional[Database] = None

    def open(self) -> "MongoStore":
        if self._db is None:
            if self._client is None:
                self._client = MongoClient(self.uri)
            self._db = self._client[self.db_name]
            logger.info("MongoDB store opened (database=%s)", self.db_name)
        return self

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB store closed")
        self._client = None
        self._db = None

    @property
    def db(self) -> Database:
        if self._db is None:
            raise RuntimeError("MongoStore is not open")
        return self._db

    def collection(self, name: str) -> Collection:
        return self.db[COLLECTIONS[name]]

    @property
    def users(self) -> Collection:
        return self.collection("users")

    @property
    def companies(self) -> Collection:
        return self.collection("companies")

    @property
    def applications(self) -> Collection:
        return self.collection("applications")

    def ping(self) -> bool:
        """
        Test if MongoDB is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            self.db.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False

    def init_indexes(self) -> None:
        """
        Create indexes. Safe to call on every startup.

        The two unique indexes are the storage-level guarantees:
        one account per email, one application per (student, company).
        """
        self.users.create_index("email", unique=True)
        self.users.create_index("role")

        self.companies.create_index([("created_at", DESCENDING)])

        self.applications.create_index(
            [("student_id", ASCENDING), ("company_id", ASCENDING)],
            unique=True
        )
        self.applications.create_index([("applied_at", DESCENDING)])

        logger.info("MongoDB indexes created")

    def drop_all(self) -> None:
        """Drop every collection (used by the seed script)."""
        for name in COLLECTIONS.values():
            self.db.drop_collection(name)


def get_store(request: Request) -> MongoStore:
    """FastAPI dependency - the store opened by the app at startup."""
    return request.app.state.store


# ============================================================
# HELPERS: ObjectId parsing and JSON-friendly documents
# ============================================================

def parse_object_id(value: Any, not_found_message: str = "Not found") -> ObjectId:
    """Turn a path/body id into an ObjectId; malformed ids cannot resolve."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(not_found_message)


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    return value


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert a MongoDB document to a JSON-friendly dict with `id` instead of `_id`."""
    if doc is None:
        return None
    out = {k: _serialize_value(v) for k, v in doc.items() if k != "_id"}
    if "_id" in doc:
        out["id"] = str(doc["_id"])
    return out


def serialize_docs(docs) -> list:
    return [serialize_doc(doc) for doc in docs]
