"""
Database initialization and schema creation.
"""

import logging
from typing import Optional
from sqlalchemy import inspect

from graphrec.database.connection import DatabaseManager, get_db_manager
from graphrec.database.models import Base

logger = logging.getLogger(__name__)


def init_database(database_url: Optional[str] = None, reset: bool = False) -> DatabaseManager:
    """
    Initialize the database and create all tables.

    Args:
        database_url: SQLAlchemy URL (default: SQLite file under data/)
        reset: If True, drop existing tables before creating new ones

    Returns:
        DatabaseManager instance
    """
    db_manager = get_db_manager(database_url=database_url)

    if reset:
        logger.info("Resetting database (dropping all tables)...")
        db_manager.reset_database()
    else:
        db_manager.create_tables()
    logger.info("Database tables ready")

    return db_manager


def verify_schema(db_manager: DatabaseManager) -> bool:
    """
    Verify that every node and edge table exists in the database.

    Args:
        db_manager: DatabaseManager instance

    Returns:
        True if all tables exist, False otherwise
    """
    inspector = inspect(db_manager.engine)
    existing_tables = set(inspector.get_table_names())

    expected_tables = set(Base.metadata.tables.keys())
    missing_tables = expected_tables - existing_tables

    if missing_tables:
        logger.error(f"Missing tables: {sorted(missing_tables)}")
        return False

    logger.info(f"All tables exist: {sorted(expected_tables)}")
    return True
