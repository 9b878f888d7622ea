"""
Recommendation service.

Orchestrates one request: open a read transaction, fetch the favorites set,
run the algorithm's traversal, score rows with the pure formulas, rank and
paginate, then annotate and normalize the page.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from graphrec.core.errors import NotFound
from graphrec.core.favorites import annotate_favorites
from graphrec.core.graph.store import GraphStore, ReadTransaction
from graphrec.core.graph.traversals import (
    COSINE_SIMILARITY, JACCARD_INDEX, MOVIE_EXISTS, MOVIE_PROPERTIES,
    PEARSON_SIMILARITY, USER_FAVORITES, WEIGHTED_CONTENT, TraversalQuery
)
from graphrec.core.normalizer import to_native_types
from graphrec.core.ranking import (
    DEFAULT_LIMIT, DEFAULT_SKIP, coerce_pagination, dedupe_by_id, paginate, rank
)
from graphrec.core.similarity.scoring import (
    cosine_similarity, jaccard_score, pearson_similarity, weighted_content_score
)
from graphrec.core.types import Candidate, Pagination

logger = logging.getLogger(__name__)

Scorer = Callable[[Mapping[str, Any]], Optional[float]]

# Public algorithm names -> service method names
ALGORITHMS = {
    "weighted-content": "weighted_content",
    "jaccard-index": "jaccard_index",
    "cosine-similarity-content": "cosine_similarity",
    "pearson-similarity-content": "pearson_similarity",
}


def _score_weighted_content(row: Mapping[str, Any]) -> Optional[float]:
    if not (row["genres"] or row["actors"] or row["directors"]):
        return None
    return weighted_content_score(row["genres"], row["actors"], row["directors"])


def _score_jaccard(row: Mapping[str, Any]) -> Optional[float]:
    return jaccard_score(row["intersection"], row["seed_set"], row["candidate_set"])


def _score_cosine(row: Mapping[str, Any]) -> Optional[float]:
    return cosine_similarity(row["requester_ratings"], row["neighbor_ratings"])


def _score_pearson(row: Mapping[str, Any]) -> Optional[float]:
    return pearson_similarity(row["requester_ratings"], row["neighbor_ratings"], row["neighbor_mean"])


def normalize_user_id(user_id: Any) -> Optional[str]:
    """Return the user id as a stripped string, or None when absent or blank."""
    if user_id is None or isinstance(user_id, bool):
        return None
    text = str(user_id).strip()
    return text or None


class RecommendationService:
    """
    Movie recommendations over the graph store.

    Each public method takes (seed_id, user_id, limit, skip) and returns a
    list of JSON-safe dicts: the movie's properties plus `score` and
    `favorite`, ordered by score descending.

    Usage:
        service = RecommendationService(GraphStore(db_manager))
        recs = await service.weighted_content("603", user_id="42", limit=6)
    """

    def __init__(self, store: GraphStore):
        self.store = store

    async def weighted_content(
        self,
        seed_id: str,
        user_id: Optional[str] = None,
        limit: Any = DEFAULT_LIMIT,
        skip: Any = DEFAULT_SKIP
    ) -> List[Dict[str, Any]]:
        """
        Movies sharing genres, actors and directors with the seed movie.

        Score = 5 * genres + 3 * actors + 4 * directors (distinct shared nodes).

        Raises:
            NotFound: If the seed movie does not exist
        """
        return await self._content(WEIGHTED_CONTENT, _score_weighted_content, seed_id, user_id, limit, skip)

    async def jaccard_index(
        self,
        seed_id: str,
        user_id: Optional[str] = None,
        limit: Any = DEFAULT_LIMIT,
        skip: Any = DEFAULT_SKIP
    ) -> List[Dict[str, Any]]:
        """
        Movies ranked by the Jaccard index of their genre/cast/director
        neighborhood with the seed's.

        Raises:
            NotFound: If the seed movie does not exist
        """
        return await self._content(JACCARD_INDEX, _score_jaccard, seed_id, user_id, limit, skip)

    async def cosine_similarity(
        self,
        seed_id: Optional[str],
        user_id: Optional[str] = None,
        limit: Any = DEFAULT_LIMIT,
        skip: Any = DEFAULT_SKIP
    ) -> List[Dict[str, Any]]:
        """
        Top unseen movie of each user whose ratings are cosine-similar to the
        requester's. Empty without a requesting user.

        Raises:
            NotFound: If a seed movie is given and does not exist
        """
        return await self._collaborative(COSINE_SIMILARITY, _score_cosine, seed_id, user_id, limit, skip)

    async def pearson_similarity(
        self,
        seed_id: Optional[str],
        user_id: Optional[str] = None,
        limit: Any = DEFAULT_LIMIT,
        skip: Any = DEFAULT_SKIP
    ) -> List[Dict[str, Any]]:
        """
        Top unseen movie of each user whose ratings correlate (Pearson) with
        the requester's. Empty without a requesting user.

        Raises:
            NotFound: If a seed movie is given and does not exist
        """
        return await self._collaborative(PEARSON_SIMILARITY, _score_pearson, seed_id, user_id, limit, skip)

    async def similar_movies(
        self,
        seed_id: str,
        user_id: Optional[str] = None,
        limit: Any = DEFAULT_LIMIT,
        skip: Any = DEFAULT_SKIP
    ) -> List[Dict[str, Any]]:
        """Default "similar movies" list for a movie page (Pearson)."""
        return await self.pearson_similarity(seed_id, user_id, limit, skip)

    async def recommend(
        self,
        algorithm: str,
        seed_id: str,
        user_id: Optional[str] = None,
        limit: Any = DEFAULT_LIMIT,
        skip: Any = DEFAULT_SKIP
    ) -> List[Dict[str, Any]]:
        """
        Dispatch by public algorithm name (see ALGORITHMS).

        Raises:
            ValueError: If the algorithm name is unknown
        """
        method_name = ALGORITHMS.get(algorithm)
        if method_name is None:
            raise ValueError(f"Unknown algorithm: {algorithm}")
        return await getattr(self, method_name)(seed_id, user_id, limit, skip)

    # ---------- internals ----------

    async def _content(
        self,
        query: TraversalQuery,
        scorer: Scorer,
        seed_id: str,
        user_id: Any,
        limit: Any,
        skip: Any
    ) -> List[Dict[str, Any]]:
        pagination = coerce_pagination(limit, skip)
        user_id = normalize_user_id(user_id)

        async with self.store.read_transaction() as tx:
            await self._require_movie(tx, seed_id)
            favorites = await self._favorites(tx, user_id)
            rows = await tx.run(query, {"seed_id": str(seed_id)})
            return await self._finish(tx, rows, scorer, user_id, favorites, pagination)

    async def _collaborative(
        self,
        query: TraversalQuery,
        scorer: Scorer,
        seed_id: Optional[str],
        user_id: Any,
        limit: Any,
        skip: Any
    ) -> List[Dict[str, Any]]:
        user_id = normalize_user_id(user_id)
        if user_id is None:
            return []
        pagination = coerce_pagination(limit, skip)

        async with self.store.read_transaction() as tx:
            if seed_id is not None:
                await self._require_movie(tx, seed_id)
            favorites = await self._favorites(tx, user_id)
            rows = await tx.run(query, {"seed_id": seed_id, "user_id": user_id})
            return await self._finish(tx, rows, scorer, user_id, favorites, pagination)

    async def _require_movie(self, tx: ReadTransaction, seed_id: str) -> None:
        if not await tx.run(MOVIE_EXISTS, {"seed_id": str(seed_id)}):
            raise NotFound("Movie", str(seed_id))

    async def _favorites(self, tx: ReadTransaction, user_id: Optional[str]) -> frozenset:
        if user_id is None:
            return frozenset()
        rows = await tx.run(USER_FAVORITES, {"user_id": user_id})
        return frozenset(row["movie_id"] for row in rows)

    async def _finish(
        self,
        tx: ReadTransaction,
        rows: List[Dict[str, Any]],
        scorer: Scorer,
        user_id: Optional[str],
        favorites: frozenset,
        pagination: Pagination
    ) -> List[Dict[str, Any]]:
        candidates = []
        for row in rows:
            score = scorer(row)
            if score is None:
                continue
            candidates.append(Candidate(movie_id=row["movie_id"], score=score, node_key=row["node_key"]))

        ranked = dedupe_by_id(rank(candidates))
        page = paginate(ranked, pagination)
        logger.debug(f"{len(ranked)} candidates, returning {len(page)} (skip={pagination.skip}, limit={pagination.limit})")
        if not page:
            return []

        property_rows = await tx.run(MOVIE_PROPERTIES, {"node_keys": [c.node_key for c in page]})
        properties = {row["node_key"]: row["properties"] for row in property_rows}
        for candidate in page:
            candidate.properties = properties.get(candidate.node_key, {"tmdb_id": candidate.movie_id})

        annotate_favorites(page, user_id, favorites)
        return [to_native_types(candidate.to_dict()) for candidate in page]
