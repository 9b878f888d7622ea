"""
Scoring formulas for the four recommendation algorithms.

These are pure functions of the aggregates a traversal produces, so they
can be tested without a graph store. A formula that would divide by zero
returns None, and the caller drops that candidate.
"""

import math
from typing import AbstractSet, Optional, Sequence

import numpy as np

GENRE_WEIGHT = 5
ACTOR_WEIGHT = 3
DIRECTOR_WEIGHT = 4

# Neighbors need strictly more co-rated movies than this
MIN_CO_RATED = 10


def weighted_content_score(shared_genres: int, shared_actors: int, shared_directors: int) -> int:
    """
    Content overlap score between two movies.

    Each argument counts distinct intermediate nodes connecting the two
    movies through IN_GENRE, ACTED_IN and DIRECTED respectively.
    """
    return (
        GENRE_WEIGHT * shared_genres
        + ACTOR_WEIGHT * shared_actors
        + DIRECTOR_WEIGHT * shared_directors
    )


def jaccard_score(
    intersection: int,
    seed_set: AbstractSet,
    candidate_set: AbstractSet
) -> Optional[float]:
    """
    Jaccard index of two neighborhoods.

    Args:
        intersection: Number of shared connecting nodes, as counted by the traversal
        seed_set: Genre/actor/director nodes of the seed movie
        candidate_set: Genre/actor/director nodes of the candidate movie

    Returns:
        intersection / union, or None when the union is empty
    """
    union = len(seed_set) + len(candidate_set - seed_set)
    if union == 0:
        return None
    return intersection / union


def cosine_similarity(
    requester_ratings: Sequence[float],
    neighbor_ratings: Sequence[float]
) -> Optional[float]:
    """
    Cosine similarity of two users over their co-rated movies.

    Both sequences are aligned on the same co-rated movies. Norms are taken
    over that subset only.

    Returns:
        Similarity, or None when either norm is zero
    """
    x = np.asarray(requester_ratings, dtype=float)
    y = np.asarray(neighbor_ratings, dtype=float)
    if x.shape != y.shape:
        raise ValueError("Rating vectors must be aligned on the same movies")

    norm_product = math.sqrt(float(np.dot(x, x))) * math.sqrt(float(np.dot(y, y)))
    if norm_product == 0:
        return None
    return float(np.dot(x, y)) / norm_product


def pearson_similarity(
    requester_ratings: Sequence[float],
    neighbor_ratings: Sequence[float],
    neighbor_mean: float
) -> Optional[float]:
    """
    Pearson correlation of two users over their co-rated movies.

    The requester's mean is taken over the co-rated movies; the neighbor's
    mean is supplied by the caller and covers the neighbor's full rating set.

    Returns:
        Correlation, or None when the denominator is zero
    """
    x = np.asarray(requester_ratings, dtype=float)
    y = np.asarray(neighbor_ratings, dtype=float)
    if x.shape != y.shape:
        raise ValueError("Rating vectors must be aligned on the same movies")
    if x.size == 0:
        return None

    dx = x - x.mean()
    dy = y - neighbor_mean
    denominator = math.sqrt(float(np.sum(dx ** 2)) * float(np.sum(dy ** 2)))
    if denominator == 0:
        return None
    return float(np.sum(dx * dy)) / denominator
