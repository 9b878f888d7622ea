"""
FastAPI dependency injection for the graph store and recommendation service.
"""

import logging
from fastapi import Depends

from graphrec.api.config import get_database_url
from graphrec.core.graph.store import GraphStore
from graphrec.core.similarity.engine import RecommendationService
from graphrec.database.connection import get_db_manager

logger = logging.getLogger(__name__)


# Singleton graph store (shares the engine's connection pool across requests)
_graph_store: GraphStore | None = None


def get_graph_store() -> GraphStore:
    """Get or create singleton GraphStore."""
    global _graph_store
    if _graph_store is None:
        database_url = get_database_url()
        logger.info(f"Connecting graph store to {database_url}")
        _graph_store = GraphStore(get_db_manager(database_url=database_url))
    return _graph_store


def get_recommendation_service(
    store: GraphStore = Depends(get_graph_store),
) -> RecommendationService:
    """Build a RecommendationService for the request."""
    return RecommendationService(store)
