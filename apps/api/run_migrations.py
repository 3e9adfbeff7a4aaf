#!/usr/bin/env python3
"""Database bootstrap: wait for the database, then run Alembic migrations.

- Always run `alembic upgrade head` before the API starts.
- If migrations fail, fail fast (don't start with an unknown schema).
- `create_all` is only a fallback for an empty database, and is followed by
  `alembic stamp head` so later upgrades apply cleanly.
"""

import os
import sys
import time
from dotenv import load_dotenv

load_dotenv()

MAX_RETRIES = 30


def _get_alembic_config():
    """Load Alembic config for programmatic migrations."""
    from alembic.config import Config

    here = os.path.dirname(os.path.abspath(__file__))
    cfg = Config(os.path.join(here, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(here, "alembic"))
    return cfg


def alembic_upgrade_head() -> None:
    """Apply all pending migrations."""
    from alembic import command

    command.upgrade(_get_alembic_config(), "head")


def alembic_stamp_head() -> None:
    """Stamp alembic_version as head (no schema changes)."""
    from alembic import command

    command.stamp(_get_alembic_config(), "head")


def create_schema_directly():
    """Fallback: create tables from the SQLAlchemy models on an empty database."""
    from sqlalchemy import inspect
    from core.database import engine, init_db

    if inspect(engine).has_table("users"):
        raise RuntimeError("Refusing direct schema creation on a database that already has tables")

    print("Creating schema directly from models...")
    init_db()
    alembic_stamp_head()
    print("Schema created successfully!")


def main():
    from core.database import check_db_connection

    print("Waiting for database to be ready...")
    for attempt in range(1, MAX_RETRIES + 1):
        if check_db_connection():
            print("Database is ready!")
            break
        print(f"Database is unavailable - sleeping (attempt {attempt}/{MAX_RETRIES})")
        time.sleep(1)
    else:
        print("ERROR: Database is not ready after maximum retries")
        sys.exit(1)

    try:
        alembic_upgrade_head()
        print("Migrations completed successfully!")
        return
    except Exception as e:
        print(f"ERROR: Alembic upgrade failed: {e}")

    try:
        create_schema_directly()
    except Exception as e:
        print(f"ERROR: Schema bootstrap failed: {e}")
        sys.exit(1)
    print("Schema bootstrap completed via create_all fallback.")


if __name__ == '__main__':
    main()
