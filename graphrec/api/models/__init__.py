"""
Pydantic schemas for API request/response validation.
"""

from graphrec.api.models.recommendation import Algorithm, RecommendationItem
from graphrec.api.models.system import HealthResponse

__all__ = [
    "Algorithm",
    "RecommendationItem",
    "HealthResponse",
]
