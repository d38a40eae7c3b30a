#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB is reachable and see collection sizes.
Usage: python scripts/check_connection.py
"""
import sys
sys.path.insert(0, '.')

from placement_portal.core.config import get_settings
from placement_portal.db.mongodb import COLLECTIONS, MongoStore


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT PORTAL - CONNECTION CHECK")
    print("=" * 50)

    print(f"\nURI: {settings.mongodb_uri}")
    print(f"Database: {settings.mongodb_db}")

    store = MongoStore(settings.mongodb_uri, settings.mongodb_db).open()
    try:
        if not store.ping():
            print("MongoDB: FAILED")
            sys.exit(1)
        print("MongoDB: CONNECTED")
        for name in COLLECTIONS:
            print(f"  {name}: {store.collection(name).count_documents({})} documents")
    finally:
        store.close()


if __name__ == "__main__":
    main()
