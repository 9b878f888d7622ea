"""
Traversal queries run against the graph store.

Each query is a named descriptor wrapping a function of (session, parameters)
that walks the node/edge tables and returns plain row dicts. Aggregation
(counting shared neighbors, collecting co-rated vectors) happens here; the
scoring formulas live in graphrec.core.similarity.scoring.

Rows come back in a stable natural order (by node key) so that score ties
are broken the same way on every call.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping

from sqlalchemy import and_, distinct, func, literal, select, union_all
from sqlalchemy.orm import Session, aliased

from graphrec.core.normalizer import node_properties
from graphrec.core.similarity.scoring import MIN_CO_RATED
from graphrec.database import crud
from graphrec.database.models import (
    ActedIn, Directed, Favorite, Movie, Rated, User, in_genre
)

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


@dataclass(frozen=True)
class TraversalQuery:
    """A named, fixed traversal executed inside a read transaction."""

    name: str
    execute: Callable[[Session, Mapping[str, Any]], List[Row]]

    def __repr__(self) -> str:
        return f"<TraversalQuery {self.name}>"


# ==================== SUPPORT QUERIES ====================

def _movie_exists(session: Session, params: Mapping[str, Any]) -> List[Row]:
    node_key = session.query(Movie.id).filter(Movie.tmdb_id == str(params["seed_id"])).scalar()
    return [] if node_key is None else [{"node_key": node_key}]


def _user_favorites(session: Session, params: Mapping[str, Any]) -> List[Row]:
    user_id = params.get("user_id")
    if not user_id:
        return []
    rows = session.query(Movie.tmdb_id).join(
        Favorite, Favorite.movie_pk == Movie.id
    ).join(
        User, Favorite.user_pk == User.id
    ).filter(User.user_id == str(user_id)).order_by(Favorite.id).all()
    return [{"movie_id": tmdb_id} for (tmdb_id,) in rows]


def _movie_properties(session: Session, params: Mapping[str, Any]) -> List[Row]:
    node_keys = list(params.get("node_keys") or [])
    if not node_keys:
        return []
    rows = []
    for movie in session.query(Movie).filter(Movie.id.in_(node_keys)).all():
        properties = node_properties(movie)
        # Internal key is not part of the public record
        del properties["id"]
        rows.append({"node_key": movie.id, "properties": properties})
    return rows


def _node_counts(session: Session, params: Mapping[str, Any]) -> List[Row]:
    return [crud.get_node_counts(session)]


# ==================== CONTENT QUERIES ====================

def _shared_counts(session: Session, seed_key: int, edge_table, entity_column: str) -> Dict[int, int]:
    """Count distinct entities linking the seed to every other movie through one edge type."""
    seed_edge = edge_table.alias("seed_edge")
    other_edge = edge_table.alias("other_edge")

    stmt = select(
        other_edge.c.movie_pk,
        func.count(distinct(other_edge.c[entity_column]))
    ).join_from(
        seed_edge, other_edge,
        seed_edge.c[entity_column] == other_edge.c[entity_column]
    ).where(
        seed_edge.c.movie_pk == seed_key,
        other_edge.c.movie_pk != seed_key,
    ).group_by(other_edge.c.movie_pk)

    return {movie_pk: count for movie_pk, count in session.execute(stmt)}


def _tmdb_ids(session: Session, node_keys) -> Dict[int, str]:
    if not node_keys:
        return {}
    rows = session.query(Movie.id, Movie.tmdb_id).filter(Movie.id.in_(list(node_keys))).all()
    return dict(rows)


def _weighted_content(session: Session, params: Mapping[str, Any]) -> List[Row]:
    seed_key = session.query(Movie.id).filter(Movie.tmdb_id == str(params["seed_id"])).scalar()
    if seed_key is None:
        return []

    genres = _shared_counts(session, seed_key, in_genre, "genre_pk")
    actors = _shared_counts(session, seed_key, ActedIn.__table__, "person_pk")
    directors = _shared_counts(session, seed_key, Directed.__table__, "person_pk")

    node_keys = sorted(set(genres) | set(actors) | set(directors))
    tmdb_ids = _tmdb_ids(session, node_keys)
    return [
        {
            "node_key": key,
            "movie_id": tmdb_ids[key],
            "genres": genres.get(key, 0),
            "actors": actors.get(key, 0),
            "directors": directors.get(key, 0),
        }
        for key in node_keys
    ]


def _neighborhood_edges(name: str):
    """(movie_pk, kind, entity_pk) for every IN_GENRE, ACTED_IN and DIRECTED edge."""
    return union_all(
        select(
            in_genre.c.movie_pk.label("movie_pk"),
            literal("genre").label("kind"),
            in_genre.c.genre_pk.label("entity_pk"),
        ),
        select(
            ActedIn.movie_pk.label("movie_pk"),
            literal("person").label("kind"),
            ActedIn.person_pk.label("entity_pk"),
        ),
        select(
            Directed.movie_pk.label("movie_pk"),
            literal("person").label("kind"),
            Directed.person_pk.label("entity_pk"),
        ),
    ).subquery(name)


def _jaccard_index(session: Session, params: Mapping[str, Any]) -> List[Row]:
    seed_key = session.query(Movie.id).filter(Movie.tmdb_id == str(params["seed_id"])).scalar()
    if seed_key is None:
        return []

    seed_edges = _neighborhood_edges("seed_edges")
    other_edges = _neighborhood_edges("other_edges")
    shared_stmt = select(
        other_edges.c.movie_pk, other_edges.c.kind, other_edges.c.entity_pk
    ).join_from(
        seed_edges, other_edges,
        and_(
            seed_edges.c.kind == other_edges.c.kind,
            seed_edges.c.entity_pk == other_edges.c.entity_pk,
        )
    ).where(
        seed_edges.c.movie_pk == seed_key,
        other_edges.c.movie_pk != seed_key,
    ).distinct()

    shared: Dict[int, set] = defaultdict(set)
    for movie_pk, kind, entity_pk in session.execute(shared_stmt):
        shared[movie_pk].add((kind, entity_pk))
    if not shared:
        return []

    all_edges = _neighborhood_edges("all_edges")
    candidate_keys = sorted(shared)
    neighborhood_stmt = select(
        all_edges.c.movie_pk, all_edges.c.kind, all_edges.c.entity_pk
    ).where(all_edges.c.movie_pk.in_([seed_key] + candidate_keys))

    neighborhoods: Dict[int, set] = defaultdict(set)
    for movie_pk, kind, entity_pk in session.execute(neighborhood_stmt):
        neighborhoods[movie_pk].add((kind, entity_pk))

    seed_set = frozenset(neighborhoods[seed_key])
    tmdb_ids = _tmdb_ids(session, candidate_keys)
    return [
        {
            "node_key": key,
            "movie_id": tmdb_ids[key],
            "intersection": len(shared[key]),
            "seed_set": seed_set,
            "candidate_set": frozenset(neighborhoods[key]),
        }
        for key in candidate_keys
    ]


# ==================== COLLABORATIVE QUERIES ====================

def _collaborative_rows(session: Session, user_id: Any, with_neighbor_mean: bool) -> List[Row]:
    """
    Rating vectors of the requester and each qualifying neighbor, plus the
    neighbor's top-rated movie the requester has not rated.

    A neighbor qualifies with strictly more than MIN_CO_RATED co-rated
    movies. Neighbors with no unseen movie produce no row.
    """
    if not user_id:
        return []
    requester_key = session.query(User.id).filter(User.user_id == str(user_id)).scalar()
    if requester_key is None:
        return []

    mine = aliased(Rated, name="mine")
    theirs = aliased(Rated, name="theirs")

    qualifying = select(theirs.user_pk).join(
        mine, mine.movie_pk == theirs.movie_pk
    ).where(
        mine.user_pk == requester_key,
        theirs.user_pk != requester_key,
    ).group_by(theirs.user_pk).having(func.count() > MIN_CO_RATED)

    co_rated_stmt = select(
        theirs.user_pk, mine.rating, theirs.rating
    ).join(
        mine, mine.movie_pk == theirs.movie_pk
    ).where(
        mine.user_pk == requester_key,
        theirs.user_pk.in_(qualifying),
    ).order_by(theirs.user_pk, theirs.movie_pk)

    vectors: Dict[int, tuple] = {}
    for neighbor_key, my_rating, their_rating in session.execute(co_rated_stmt):
        xs, ys = vectors.setdefault(neighbor_key, ([], []))
        xs.append(my_rating)
        ys.append(their_rating)
    if not vectors:
        return []

    # Top-rated unseen movie per neighbor; ties fall back to edge insertion order
    seen = select(Rated.movie_pk).where(Rated.user_pk == requester_key)
    position = func.row_number().over(
        partition_by=Rated.user_pk,
        order_by=(Rated.rating.desc(), Rated.id)
    ).label("position")
    ranked = select(
        Rated.user_pk, Rated.movie_pk, position
    ).where(
        Rated.user_pk.in_(list(vectors)),
        Rated.movie_pk.not_in(seen),
    ).subquery("ranked")
    top_stmt = select(
        ranked.c.user_pk, Movie.id, Movie.tmdb_id
    ).join(Movie, Movie.id == ranked.c.movie_pk).where(ranked.c.position == 1)
    top_movies = {neighbor_key: (movie_key, tmdb_id) for neighbor_key, movie_key, tmdb_id in session.execute(top_stmt)}

    neighbor_means: Dict[int, float] = {}
    if with_neighbor_mean:
        mean_stmt = select(Rated.user_pk, func.avg(Rated.rating)).where(
            Rated.user_pk.in_(list(vectors))
        ).group_by(Rated.user_pk)
        neighbor_means = {key: float(mean) for key, mean in session.execute(mean_stmt)}

    neighbor_ids = dict(
        session.query(User.id, User.user_id).filter(User.id.in_(list(vectors))).all()
    )

    rows = []
    for neighbor_key in sorted(vectors):
        if neighbor_key not in top_movies:
            continue
        movie_key, tmdb_id = top_movies[neighbor_key]
        xs, ys = vectors[neighbor_key]
        row = {
            "neighbor_id": neighbor_ids[neighbor_key],
            "co_rated": len(xs),
            "requester_ratings": xs,
            "neighbor_ratings": ys,
            "node_key": movie_key,
            "movie_id": tmdb_id,
        }
        if with_neighbor_mean:
            row["neighbor_mean"] = neighbor_means[neighbor_key]
        rows.append(row)

    logger.debug(f"{len(rows)} qualifying neighbors for user {user_id}")
    return rows


def _cosine_similarity(session: Session, params: Mapping[str, Any]) -> List[Row]:
    return _collaborative_rows(session, params.get("user_id"), with_neighbor_mean=False)


def _pearson_similarity(session: Session, params: Mapping[str, Any]) -> List[Row]:
    return _collaborative_rows(session, params.get("user_id"), with_neighbor_mean=True)


MOVIE_EXISTS = TraversalQuery("movie_exists", _movie_exists)
USER_FAVORITES = TraversalQuery("user_favorites", _user_favorites)
MOVIE_PROPERTIES = TraversalQuery("movie_properties", _movie_properties)
NODE_COUNTS = TraversalQuery("node_counts", _node_counts)

WEIGHTED_CONTENT = TraversalQuery("weighted_content", _weighted_content)
JACCARD_INDEX = TraversalQuery("jaccard_index", _jaccard_index)
COSINE_SIMILARITY = TraversalQuery("cosine_similarity", _cosine_similarity)
PEARSON_SIMILARITY = TraversalQuery("pearson_similarity", _pearson_similarity)
