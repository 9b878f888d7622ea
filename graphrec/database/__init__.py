"""
Database module for the movie graph.

This module provides the node/edge ORM models, connection management, CRUD
helpers and the CSV graph loader.
"""

from graphrec.database.models import (
    Base, Movie, Person, Genre, User, ActedIn, Directed, Rated, Favorite, in_genre
)
from graphrec.database.connection import DatabaseManager, get_db_manager, reset_db_manager
from graphrec.database.init_db import init_database, verify_schema
from graphrec.database import crud

__all__ = [
    # Nodes
    'Base',
    'Movie',
    'Person',
    'Genre',
    'User',
    # Edges
    'ActedIn',
    'Directed',
    'Rated',
    'Favorite',
    'in_genre',
    # Connection
    'DatabaseManager',
    'get_db_manager',
    'reset_db_manager',
    # Initialization
    'init_database',
    'verify_schema',
    # CRUD module
    'crud',
]
