"""
Pydantic schemas for System API.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    graph_store: str
    movies: int | None = None
    people: int | None = None
    genres: int | None = None
    users: int | None = None
