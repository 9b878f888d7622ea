"""
Ranking and pagination shared by all recommendation algorithms.

Candidates are ordered by score, highest first. Ties keep the order in which
the traversal produced them (Python's sort is stable), so no secondary key
is imposed.
"""

import logging
import re
from typing import Any, Iterable, List, Sequence, TypeVar

from graphrec.core.types import Candidate, Pagination

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 6
DEFAULT_SKIP = 0

T = TypeVar("T")

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _coerce_int(value: Any) -> int | None:
    """Parse a non-bool int, integral float or integer string; None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER.fullmatch(text):
            return int(text)
    return None


def coerce_pagination(limit: Any = None, skip: Any = None) -> Pagination:
    """
    Build a Pagination from loosely typed input.

    Non-numeric, negative or (for limit) zero values fall back to the
    defaults instead of raising.
    """
    parsed_limit = _coerce_int(limit)
    parsed_skip = _coerce_int(skip)

    if parsed_limit is None or parsed_limit <= 0:
        if limit is not None:
            logger.debug(f"Invalid limit {limit!r}, using default {DEFAULT_LIMIT}")
        parsed_limit = DEFAULT_LIMIT
    if parsed_skip is None or parsed_skip < 0:
        if skip is not None:
            logger.debug(f"Invalid skip {skip!r}, using default {DEFAULT_SKIP}")
        parsed_skip = DEFAULT_SKIP

    return Pagination(limit=parsed_limit, skip=parsed_skip)


def rank(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Sort candidates by score descending, keeping traversal order for ties."""
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def dedupe_by_id(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Keep only the first occurrence of each movie id."""
    seen = set()
    unique = []
    for candidate in candidates:
        if candidate.movie_id in seen:
            continue
        seen.add(candidate.movie_id)
        unique.append(candidate)
    return unique


def paginate(items: Sequence[T], pagination: Pagination) -> List[T]:
    """Return items[skip:skip + limit]; empty when skip is past the end."""
    return list(items[pagination.skip:pagination.skip + pagination.limit])
