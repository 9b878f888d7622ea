"""
API configuration loaded from environment or defaults.
"""

import os
from pathlib import Path


def get_database_url() -> str:
    """Get graph database URL from env or default SQLite file."""
    return os.getenv("GRAPH_DATABASE_URL", "") or "sqlite:///" + str(
        Path(__file__).resolve().parents[2] / "data" / "graph.db"
    )


def get_log_level() -> str:
    """Get log level from env or default."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_file() -> str | None:
    """Get optional log file name (under logs/)."""
    return os.getenv("LOG_FILE") or None


def get_api_host() -> str:
    """Get API host for binding."""
    return os.getenv("API_HOST", "0.0.0.0")


def get_api_port() -> int:
    """Get API port."""
    return int(os.getenv("API_PORT", "8000"))
