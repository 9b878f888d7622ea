"""
System API endpoints (health).
"""

import logging
from fastapi import APIRouter, Depends

from graphrec.api.dependencies import get_graph_store
from graphrec.api.models.system import HealthResponse
from graphrec.core.errors import BackendUnavailable
from graphrec.core.graph.store import GraphStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health_check(store: GraphStore = Depends(get_graph_store)):
    """Health check: graph store reachable, with node counts."""
    try:
        counts = await store.node_counts()
    except BackendUnavailable as e:
        logger.warning(f"Health check failed: {e}")
        return HealthResponse(status="unhealthy", graph_store=str(e))
    return HealthResponse(status="healthy", graph_store="connected", **counts)
