# init_db.py (in backend folder)

import argparse

from sqlalchemy import inspect

from saivd.infra.postgres import Base, check_connection, engine, init_db
from saivd.utils.logger import setup_logger


def main(drop: bool = False):
    """Create the profiles and videos tables, optionally dropping them first"""
    setup_logger()
    if not check_connection():
        raise SystemExit(1)

    if drop:
        print("⚠️  Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
        print("✓ Tables dropped")

    print("📦 Creating tables...")
    init_db()
    print("✅ Database initialized successfully!")

    inspector = inspect(engine)
    for table in inspector.get_table_names():
        print(f"\n{table}:")
        for col in inspector.get_columns(table):
            print(f"  - {col['name']}: {col['type']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the SAIVD database")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    main(drop=parser.parse_args().drop)
