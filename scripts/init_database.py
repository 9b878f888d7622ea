#!/usr/bin/env python
"""
Graph database initialization script.

Creates the node/edge schema and imports a CSV graph dump
(see graphrec/database/loader.py for the expected files).

Usage:
    # Fresh import
    python scripts/init_database.py --data-dir data/movies --reset

    # Append to an existing database
    python scripts/init_database.py --data-dir data/movies

    # Custom database
    python scripts/init_database.py --data-dir data/movies --db-url postgresql://...
"""

import sys
import time
import logging
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from graphrec.api.config import get_database_url
from graphrec.database import init_database, verify_schema, crud
from graphrec.database.connection import get_database_url as sqlite_url
from graphrec.database.loader import load_graph_from_csv
from graphrec.utils.logging_config import configure_script_logging

logger = logging.getLogger("init_database")


def parse_args():
    parser = argparse.ArgumentParser(description="Initialize the movie graph database")
    parser.add_argument("--data-dir", required=True, help="Directory containing the CSV graph dump")
    parser.add_argument("--db-url", default=None, help="SQLAlchemy URL (default: GRAPH_DATABASE_URL or data/graph.db)")
    parser.add_argument("--reset", action="store_true", help="Drop existing tables first")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main():
    args = parse_args()
    configure_script_logging(debug=args.debug)

    database_url = args.db_url or get_database_url()
    if database_url.startswith("sqlite:///"):
        # Make sure the parent directory exists
        database_url = sqlite_url(database_url[len("sqlite:///"):])

    start_time = time.time()
    db_manager = init_database(database_url=database_url, reset=args.reset)
    if not verify_schema(db_manager):
        sys.exit(1)

    with db_manager.session_scope() as session:
        stats = load_graph_from_csv(session, args.data_dir)
        counts = crud.get_node_counts(session)

    logger.info(f"Imported {stats} in {time.time() - start_time:.2f}s")
    logger.info(f"Graph now holds {counts}")


if __name__ == "__main__":
    main()
