"""
Seed the starter exercise library.

Does nothing when the exercises table already has rows, same as
POST /api/seed/exercises.

Usage (inside api container):
  python scripts/seed_exercises.py
  python scripts/seed_exercises.py --create-tables   # local SQLite / fresh dev DB
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import get_db_sync, init_db  # noqa: E402
from services.exercise_catalog import seed_exercises  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the starter exercise library")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables from the models first (use Alembic for real deployments)",
    )
    args = parser.parse_args()

    if args.create_tables:
        init_db()

    db = get_db_sync()
    try:
        created, count = seed_exercises(db)
    finally:
        db.close()

    if created:
        print(f"OK: seeded {count} exercises")
    else:
        print(f"SKIP: library already has {count} exercises")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
