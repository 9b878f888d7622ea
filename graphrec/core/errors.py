"""
Exceptions raised by the recommendation core.

An empty recommendation list is a valid outcome and is never signalled
with an exception.
"""


class RecommendationError(Exception):
    """Base class for recommendation core errors."""


class NotFound(RecommendationError):
    """The seed entity of a request does not exist in the graph."""

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class BackendUnavailable(RecommendationError):
    """The graph store could not be reached or failed to run a traversal."""

    def __init__(self, message: str, query: str | None = None):
        self.query = query
        super().__init__(message)
