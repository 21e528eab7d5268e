"""
Create the rent_requests and rent_request_events tables.

For a NEW database: not needed; app startup already runs create_all() with all models.
Run once when the service is deployed with startup table creation unavailable (e.g. read-only app role):
  python scripts/create_tables.py
"""
import os
import sys

# Project root
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sqlalchemy import inspect  # noqa: E402
from app.database import Base, engine  # noqa: E402
from app import models  # noqa: F401,E402


def main():
    Base.metadata.create_all(bind=engine)
    tables = inspect(engine).get_table_names()
    for name in ("rent_requests", "rent_request_events"):
        print(f"  {'OK  ' if name in tables else 'MISSING'} {name}")


if __name__ == "__main__":
    main()
