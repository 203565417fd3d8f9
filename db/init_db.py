"""
Database initialization script for Brand Tracker

This script initializes the database by creating tables and verifying the setup.
"""

import logging
import sys

from sqlalchemy import inspect

from db import Base, engine
from db import models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)

EXPECTED_TABLES = ["brands", "mentions"]


def create_tables(bind=None):
    """Create all tables using SQLAlchemy"""
    try:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating tables: {e}")
        raise


def verify_database(bind=None) -> bool:
    """Verify that the expected tables exist"""
    logger.info("Verifying database setup...")

    inspector = inspect(bind or engine)
    tables = inspector.get_table_names()

    missing = [table for table in EXPECTED_TABLES if table not in tables]
    for table in EXPECTED_TABLES:
        if table in missing:
            logger.warning(f"Table '{table}' not found")
        else:
            logger.info(f"Table '{table}' exists")

    return not missing


def main():
    """Main initialization function"""
    logger.info("Starting Brand Tracker database initialization...")

    try:
        create_tables()

        if not verify_database():
            sys.exit(1)

        logger.info("Database initialization completed successfully!")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    main()
