"""
Pydantic schemas for Recommendation API.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Algorithm(str, Enum):
    """Public names of the recommendation algorithms."""

    weighted_content = "weighted-content"
    jaccard_index = "jaccard-index"
    cosine_similarity = "cosine-similarity-content"
    pearson_similarity = "pearson-similarity-content"


class RecommendationItem(BaseModel):
    """
    Single recommended movie: its properties plus score and favorite flag.

    Unknown movie properties are passed through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    tmdb_id: str
    title: str
    movie_id: str | None = None
    imdb_id: str | None = None
    plot: str | None = None
    year: int | None = None
    released: date | None = None
    runtime: int | None = None
    # Large values arrive as decimal strings
    budget: int | str | None = None
    revenue: int | str | None = None
    imdb_rating: float | None = None
    imdb_votes: int | str | None = None
    poster: str | None = None
    url: str | None = None
    languages: list[str] | None = None
    countries: list[str] | None = None
    score: int | float
    favorite: bool
