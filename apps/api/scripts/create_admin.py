"""
Create an ADMIN user, or promote an existing user to ADMIN (ops script).

Signup always creates USER accounts, so this is how the first admin is made.

SECURITY:
- No password via CLI args (shell history). Read password from an env var.
- DRY_RUN by default; use --commit to persist.

Usage (inside api container):
  export FITSTACK_ADMIN_PASSWORD="change-me"
  python scripts/create_admin.py --email admin@example.com --name "Site Admin" --commit

  # promote an existing account (password untouched)
  python scripts/create_admin.py --email coach@example.com --commit
"""

from __future__ import annotations

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import get_db_sync  # noqa: E402
from core.security import hash_password  # noqa: E402
from services import storage  # noqa: E402


MIN_PASSWORD_LENGTH = 8


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or promote an ADMIN user")
    parser.add_argument("--email", required=True, help="admin email")
    parser.add_argument("--name", default="Admin", help="display name for a new account")
    parser.add_argument(
        "--password-env",
        default="FITSTACK_ADMIN_PASSWORD",
        help="env var name containing the password for a new account (default: FITSTACK_ADMIN_PASSWORD)",
    )
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Persist the change. Default is dry-run.",
    )
    args = parser.parse_args()

    db = get_db_sync()
    try:
        user = storage.get_user_by_email(db, args.email)

        if user is not None:
            if user.role == "ADMIN":
                print(f"OK: {args.email} is already an admin")
                return 0
            if not args.commit:
                print(f"DRY_RUN: would promote {args.email} from {user.role} to ADMIN")
                return 0
            storage.update_user(db, user.id, {"role": "ADMIN"})
            print(f"OK: promoted {args.email} to ADMIN")
            return 0

        password = os.getenv(args.password_env)
        if not password:
            print(f"ERROR: missing env var {args.password_env} (password for new admin)")
            return 2
        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"ERROR: password must be at least {MIN_PASSWORD_LENGTH} characters")
            return 2

        if not args.commit:
            print(f"DRY_RUN: would create ADMIN user email={args.email}")
            return 0

        user = storage.create_user(db, {
            "email": args.email,
            "password": hash_password(password),
            "name": args.name,
            "role": "ADMIN",
        })
        print(f"OK: created ADMIN user id={user.id} email={args.email}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
