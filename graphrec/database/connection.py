"""
Database connection management using SQLAlchemy.

This module handles engine creation, session management, and the read-only
transactional scope that graph traversals run in.
"""

import os
from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from graphrec.database.models import Base


# Default database path
DEFAULT_DB_PATH = "data/graph.db"


def get_database_url(db_path: str = DEFAULT_DB_PATH) -> str:
    """
    Get SQLite database URL for a file path.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy database URL
    """
    # Ensure directory exists
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)

    abs_path = os.path.abspath(db_path)
    return f"sqlite:///{abs_path}"


def _is_in_memory(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """
    Enable foreign key constraints for SQLite.

    SQLite disables foreign key constraints by default.
    """
    if type(dbapi_conn).__module__.startswith("sqlite3"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _reject_writes(session, flush_context, instances):
    raise RuntimeError("Attempted to write inside a read-only graph transaction")


class DatabaseManager:
    """
    Database connection manager.

    Handles engine creation, session management, and schema creation.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        """
        Initialize database manager.

        Args:
            database_url: SQLAlchemy URL. Defaults to the SQLite file at DEFAULT_DB_PATH.
            echo: If True, log all SQL statements (useful for debugging)
        """
        self.database_url = database_url or get_database_url(DEFAULT_DB_PATH)

        engine_kwargs = {"echo": echo}
        if self.database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases live on a single connection
            if _is_in_memory(self.database_url):
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.database_url, **engine_kwargs)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def create_tables(self):
        """Create all tables defined in the models if they don't exist."""
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self):
        """
        Drop all tables defined in the models.

        WARNING: This will delete all data in the database!
        """
        Base.metadata.drop_all(bind=self.engine)

    def reset_database(self):
        """
        Drop and recreate all tables.

        WARNING: This will delete all data in the database!
        """
        self.drop_tables()
        self.create_tables()

    def get_session(self) -> Session:
        """Get a new database session. The caller must close it."""
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Context manager for read-write sessions.

        Automatically commits on success and rolls back on failure.

        Usage:
            with db_manager.session_scope() as session:
                session.add(movie)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def open_read_only_session(self) -> Session:
        """
        Open a session that refuses to flush changes.

        Pair with close_read_only_session(); read_only_scope() does both.
        """
        session = self.SessionLocal()
        event.listen(session, "before_flush", _reject_writes)
        return session

    @staticmethod
    def close_read_only_session(session: Session) -> None:
        """Roll back the (read-only) transaction and release the connection."""
        try:
            session.rollback()
        finally:
            session.close()

    @contextmanager
    def read_only_scope(self) -> Generator[Session, None, None]:
        """
        Context manager for read-only sessions.

        The transaction is always rolled back and the connection released,
        whether the block succeeds or raises.
        """
        session = self.open_read_only_session()
        try:
            yield session
        finally:
            self.close_read_only_session(session)

    def close(self):
        """Close the database engine and all connections."""
        self.engine.dispose()


# Global database manager instance (singleton pattern)
_db_manager = None


def get_db_manager(database_url: Optional[str] = None, echo: bool = False) -> DatabaseManager:
    """
    Get or create the global database manager instance.

    Args:
        database_url: SQLAlchemy URL (used only on first call)
        echo: If True, log all SQL statements

    Returns:
        DatabaseManager instance
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(database_url=database_url, echo=echo)
    return _db_manager


def reset_db_manager() -> None:
    """Dispose and forget the global database manager."""
    global _db_manager
    if _db_manager is not None:
        _db_manager.close()
    _db_manager = None
