#!/usr/bin/env python3
"""
Give an existing account the admin role.

Usage:
  python scripts/make_admin.py user@example.com

Uses SQLALCHEMY_DATABASE_URL (or the default SQLite file) like the API.
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend"))

from app.database import get_db_session  # noqa: E402
from app.services.admin_bootstrap import promote_to_admin  # noqa: E402


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__.strip())
        return 2
    with get_db_session() as db:
        user = promote_to_admin(db, argv[1])
    if user is None:
        print(f"User with email {argv[1]} not found")
        return 1
    print(f"User {user.full_name} ({user.email}) is now an admin (id={user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
