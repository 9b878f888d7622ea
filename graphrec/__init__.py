"""
Graph-based movie recommender package.

This package contains the recommendation core (graph traversals, similarity
scoring, ranking), the graph database layer and the HTTP API.
"""

__version__ = "1.0.0"
