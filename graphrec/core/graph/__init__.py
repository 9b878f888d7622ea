"""
Graph store access: the async store facade and the traversal queries it runs.
"""

from graphrec.core.graph.store import GraphStore, ReadTransaction
from graphrec.core.graph.traversals import TraversalQuery

__all__ = ['GraphStore', 'ReadTransaction', 'TraversalQuery']
