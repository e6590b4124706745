#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the MongoDB connection and indexes.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from careerhub.db.mongodb import test_mongo_connection, init_mongo_indexes
from careerhub.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("CAREERHUB - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        sys.exit(1)
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Creating indexes...")
    init_mongo_indexes()
    print("    ✅ Indexes in place")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
