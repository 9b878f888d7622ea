"""
Shared fixtures: an in-memory graph database with a small movie graph.

Content part (seed movie "100"):
    100  Action, Drama | actors A1 (two roles), A2 | director D1
    200  Action, Drama | actor A1 (two roles)                   -> weighted 13, jaccard 3/5
    300  Drama, Comedy | actor A2 | director D2                 -> weighted 8,  jaccard 2/7
    400  Action, Drama | actors A1, A2 | director D1            -> weighted 20, jaccard 1.0
    500  Comedy        | director D1                            -> weighted 4,  jaccard 1/6
    600  Comedy        | actor A3                               -> unrelated

Collaborative part (requester "u1", rates c01..c12):
    u2  same ratings on c01..c12, unseen c15=5, c16=5, c17=3
    u3  exactly 10 co-rated (c01..c10), unseen c18=5         -> never a neighbor
    u4  11 co-rated, inverted ratings, unseen c15=4
    u5  all 3.0 on c01..c12, unseen c20=3                   -> zero Pearson denominator
    u6  same ratings on c01..c12, nothing unseen

Favorites of u1: 200 and c20.
"""

import functools

import anyio
import pytest

from graphrec.core.graph.store import GraphStore
from graphrec.core.similarity.engine import RecommendationService
from graphrec.database import crud
from graphrec.database.connection import DatabaseManager

REQUESTER_RATINGS = [5, 4, 3, 5, 2, 4, 3, 5, 1, 4, 2, 3]


@pytest.fixture
def db_manager():
    """Create an in-memory database with all tables."""
    manager = DatabaseManager("sqlite://")
    manager.create_tables()
    yield manager
    manager.close()


@pytest.fixture
def session(db_manager):
    """Create a read-write session on the in-memory database."""
    session = db_manager.get_session()
    yield session
    session.close()


def _build_content(session):
    movies = {
        "100": crud.create_movie(session, "100", "Seed", genres=["Action", "Drama"], year=1999,
                                 budget=63000000, languages=["English"]),
        "200": crud.create_movie(session, "200", "Two Genres One Actor", genres=["Action", "Drama"]),
        "300": crud.create_movie(session, "300", "Shared Drama", genres=["Drama", "Comedy"]),
        "400": crud.create_movie(session, "400", "Twin", genres=["Action", "Drama"]),
        "500": crud.create_movie(session, "500", "Same Director", genres=["Comedy"]),
        "600": crud.create_movie(session, "600", "Unrelated", genres=["Comedy"]),
    }
    a1 = crud.create_person(session, "Actor One", tmdb_id="a1")
    a2 = crud.create_person(session, "Actor Two", tmdb_id="a2")
    a3 = crud.create_person(session, "Actor Three", tmdb_id="a3")
    d1 = crud.create_person(session, "Director One", tmdb_id="d1")
    d2 = crud.create_person(session, "Director Two", tmdb_id="d2")

    crud.add_acted_in(session, a1, movies["100"], role="Hero")
    crud.add_acted_in(session, a1, movies["100"], role="Hero's twin")
    crud.add_acted_in(session, a2, movies["100"], role="Sidekick")
    crud.add_directed(session, d1, movies["100"])

    crud.add_acted_in(session, a1, movies["200"], role="Pilot")
    crud.add_acted_in(session, a1, movies["200"], role="Copilot")

    crud.add_acted_in(session, a2, movies["300"])
    crud.add_directed(session, d2, movies["300"])

    crud.add_acted_in(session, a1, movies["400"])
    crud.add_acted_in(session, a2, movies["400"])
    crud.add_directed(session, d1, movies["400"])

    crud.add_directed(session, d1, movies["500"])

    crud.add_acted_in(session, a3, movies["600"])
    return movies


def _build_ratings(session, movies):
    catalog = {f"c{i:02d}": crud.create_movie(session, f"c{i:02d}", f"Catalog {i}") for i in range(1, 21)}
    movies.update(catalog)
    co_rated = [f"c{i:02d}" for i in range(1, 13)]

    def rate(user, pairs):
        for tmdb_id, rating in pairs:
            crud.rate_movie(session, user, movies[tmdb_id], rating)

    u1 = crud.get_or_create_user(session, "u1", name="Requester")
    rate(u1, zip(co_rated, REQUESTER_RATINGS))

    u2 = crud.get_or_create_user(session, "u2")
    rate(u2, zip(co_rated, REQUESTER_RATINGS))
    rate(u2, [("c15", 5), ("c16", 5), ("c17", 3)])

    u3 = crud.get_or_create_user(session, "u3")
    rate(u3, zip(co_rated[:10], REQUESTER_RATINGS))
    rate(u3, [("c18", 5)])

    u4 = crud.get_or_create_user(session, "u4")
    rate(u4, zip(co_rated[:11], [6 - r for r in REQUESTER_RATINGS]))
    rate(u4, [("c15", 4)])

    u5 = crud.get_or_create_user(session, "u5")
    rate(u5, [(tmdb_id, 3) for tmdb_id in co_rated])
    rate(u5, [("c20", 3)])

    u6 = crud.get_or_create_user(session, "u6")
    rate(u6, zip(co_rated, REQUESTER_RATINGS))

    crud.add_favorite(session, u1, movies["200"])
    crud.add_favorite(session, u1, movies["c20"])
    crud.get_or_create_user(session, "lonely")


@pytest.fixture
def graph_db(db_manager):
    """The in-memory database populated with the sample graph."""
    with db_manager.session_scope() as session:
        movies = _build_content(session)
        _build_ratings(session, movies)
    return db_manager


@pytest.fixture
def store(graph_db):
    return GraphStore(graph_db)


@pytest.fixture
def service(store):
    return RecommendationService(store)


@pytest.fixture
def run():
    """Run an async callable to completion: run(fn, *args, **kwargs)."""
    def _run(fn, *args, **kwargs):
        return anyio.run(functools.partial(fn, *args, **kwargs))
    return _run
