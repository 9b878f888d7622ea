"""
Async facade over the graph store.

Traversals are synchronous SQLAlchemy work; they run in a worker thread so
that request handlers can await them. Every request gets its own read-only
transaction scope, released on every exit path.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from anyio import CancelScope, to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from graphrec.core.errors import BackendUnavailable
from graphrec.core.graph.traversals import NODE_COUNTS, TraversalQuery
from graphrec.database.connection import DatabaseManager

logger = logging.getLogger(__name__)


class ReadTransaction:
    """A read-only transactional scope on the graph store."""

    def __init__(self, session: Session):
        self._session = session

    async def run(
        self,
        query: TraversalQuery,
        parameters: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Run a traversal query and return its rows.

        Raises:
            BackendUnavailable: If the store fails to execute the query
        """
        params = dict(parameters or {})
        logger.debug(f"Running traversal {query.name}")
        try:
            rows = await to_thread.run_sync(query.execute, self._session, params)
        except SQLAlchemyError as e:
            logger.error(f"Traversal {query.name} failed: {e}")
            raise BackendUnavailable(f"Graph traversal '{query.name}' failed", query=query.name) from e
        logger.debug(f"Traversal {query.name} returned {len(rows)} rows")
        return rows


class GraphStore:
    """
    Entry point to the graph store.

    Usage:
        store = GraphStore(db_manager)
        async with store.read_transaction() as tx:
            rows = await tx.run(WEIGHTED_CONTENT, {"seed_id": "603"})
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    @asynccontextmanager
    async def read_transaction(self) -> AsyncIterator[ReadTransaction]:
        """Open a read-only session; it is rolled back and closed on exit."""
        try:
            session = await to_thread.run_sync(self.db_manager.open_read_only_session)
        except SQLAlchemyError as e:
            raise BackendUnavailable("Could not open a graph store session") from e

        try:
            yield ReadTransaction(session)
        finally:
            # Release even when the caller was cancelled
            with CancelScope(shield=True):
                await to_thread.run_sync(self.db_manager.close_read_only_session, session)

    async def node_counts(self) -> Dict[str, int]:
        """Count nodes per label; also serves as a connectivity check."""
        async with self.read_transaction() as tx:
            rows = await tx.run(NODE_COUNTS)
        return rows[0]
