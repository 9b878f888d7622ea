"""
Recommendation core.

This package contains:
- Graph store facade and traversal queries
- Scoring formulas and the recommendation service
- Ranking/pagination, favorites annotation and result normalization
"""

from graphrec.core.errors import BackendUnavailable, NotFound, RecommendationError
from graphrec.core.similarity.engine import RecommendationService
from graphrec.core.graph.store import GraphStore

__all__ = ['RecommendationService', 'GraphStore', 'NotFound', 'BackendUnavailable', 'RecommendationError']
