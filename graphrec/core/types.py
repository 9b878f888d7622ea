"""
Transient per-request value types.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Candidate:
    """
    A scored recommendation before serialization.

    Attributes:
        movie_id: External movie id (tmdb_id)
        score: Algorithm-specific score
        node_key: Internal key of the movie node, used to fetch its properties
        favorite: Whether the movie is in the requester's favorites set
        properties: Flattened movie properties
    """

    movie_id: str
    score: float
    node_key: Optional[int] = None
    favorite: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.properties, "score": self.score, "favorite": self.favorite}


@dataclass(frozen=True)
class Pagination:
    """Validated result window: rows [skip, skip + limit)."""

    limit: int
    skip: int

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError("limit must be positive")
        if self.skip < 0:
            raise ValueError("skip must be non-negative")
