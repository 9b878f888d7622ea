"""
Similarity engine: scoring formulas for the four recommendation algorithms.

The RecommendationService that runs them against the graph store lives in
graphrec.core.similarity.engine.
"""

from graphrec.core.similarity.scoring import (
    weighted_content_score, jaccard_score, cosine_similarity, pearson_similarity
)

__all__ = ['weighted_content_score', 'jaccard_score', 'cosine_similarity', 'pearson_similarity']
