"""Create an admin API key and print the raw key once.

Usage: python scripts/create_admin_key.py "ops dashboard"
"""

import sys

from foodcare.core.database import SessionLocal
from foodcare.repositories.api_key_repository import ApiKeyRepository
from foodcare.schemas.api_key import ApiKeyCreate


def main(name: str) -> str:
    db = SessionLocal()
    try:
        api_key, raw_key = ApiKeyRepository(db).create(ApiKeyCreate(name=name))
        print(f"Created API key {api_key.key_prefix}... ({api_key.id})", file=sys.stderr)
        return raw_key
    finally:
        db.close()


if __name__ == "__main__":
    print(main(sys.argv[1] if len(sys.argv) > 1 else "admin"))
