"""
API route handlers.
"""

from graphrec.api.routers import recommendations, movies, system

__all__ = ["recommendations", "movies", "system"]
