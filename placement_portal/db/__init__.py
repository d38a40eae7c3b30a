"""
Database module - MongoDB store handle and document helpers.
"""
from placement_portal.db.mongodb import (
    COLLECTIONS,
    MongoStore,
    get_store,
    parse_object_id,
    serialize_doc,
    serialize_docs,
)

__all__ = [
    "COLLECTIONS",
    "MongoStore",
    "get_store",
    "parse_object_id",
    "serialize_doc",
    "serialize_docs",
]
