"""
Favorites annotation.

The favorites set is fetched once per request, before scoring, and every
candidate on the page is stamped from that same set.
"""

from typing import AbstractSet, Iterable, List, Optional

from graphrec.core.types import Candidate


def annotate_favorites(
    candidates: Iterable[Candidate],
    user_id: Optional[str],
    favorites: AbstractSet[str]
) -> List[Candidate]:
    """
    Set `favorite` on every candidate.

    Args:
        candidates: Candidates to annotate (modified in place)
        user_id: Requesting user; without one nothing is a favorite
        favorites: Movie ids in the requester's favorites set

    Returns:
        The annotated candidates as a list
    """
    annotated = list(candidates)
    for candidate in annotated:
        candidate.favorite = bool(user_id) and candidate.movie_id in favorites
    return annotated
