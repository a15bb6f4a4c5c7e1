#!/usr/bin/env python3
"""
Create (or promote) a back-office user.

Usage:
    python scripts/seed_admin.py --email admin@example.org --name "Site Admin" [--role admin]

Reads DATABASE_URL from the environment or .env, like the API does.
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from database import SessionLocal, init_db  # noqa: E402
from models.admin_user import AdminUser  # noqa: E402
from utils.logger_factory import new_logger  # noqa: E402
from utils.permissions import Role  # noqa: E402
from utils.validation import require_email  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Create or promote a back-office user.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--role", default=Role.ADMIN.value, choices=[r.value for r in Role])
    args = parser.parse_args()

    log = new_logger("seed_admin")
    email = require_email(args.email)
    init_db()
    db = SessionLocal()
    try:
        user = db.query(AdminUser).filter(AdminUser.email == email).first()
        if user is None:
            user = AdminUser(name=args.name, email=email, role=args.role)
            db.add(user)
            action = "created"
        else:
            user.role = args.role
            action = "updated"
        db.commit()
        db.refresh(user)
        log.info(f"User {user.id} <{user.email}> {action} with role {user.role}")
    except Exception:
        db.rollback()
        log.exception("Failed to seed admin user")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
