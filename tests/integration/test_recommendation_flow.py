"""
Integration test: CSV graph dump -> database -> recommendation service.

Loads a tiny dump with the real loader into an in-memory database and checks
the results of every algorithm end to end.
"""

import pytest

from graphrec.core.errors import NotFound
from graphrec.core.graph.store import GraphStore
from graphrec.core.similarity.engine import ALGORITHMS, RecommendationService
from graphrec.database.loader import load_graph_from_csv

NEIGHBOR_COUNT = 3
CO_RATED = 11


def _write_dump(path):
    movies = ["tmdb_id,title,genres"]
    movies.append("1,Alien,Horror|Science Fiction")
    movies.append("2,Aliens,Action|Horror|Science Fiction")
    movies.append("3,Blade Runner,Science Fiction")
    movies.append("4,Annie Hall,Comedy|Romance")
    movies += [f"r{i},Rated {i},Drama" for i in range(CO_RATED)]
    movies += [f"n{i},New {i},Drama" for i in range(NEIGHBOR_COUNT)]
    (path / "movies.csv").write_text("\n".join(movies) + "\n")

    (path / "people.csv").write_text(
        "tmdb_id,name\n"
        "10205,Sigourney Weaver\n"
        "578,Ridley Scott\n"
        "2710,James Cameron\n"
    )
    (path / "acted_in.csv").write_text(
        "person_tmdb_id,movie_tmdb_id,role\n"
        "10205,1,Ripley\n"
        "10205,2,Ripley\n"
    )
    (path / "directed.csv").write_text(
        "person_tmdb_id,movie_tmdb_id\n"
        "578,1\n"
        "578,3\n"
        "2710,2\n"
    )

    ratings = ["user_id,movie_tmdb_id,rating,timestamp"]
    for i in range(CO_RATED):
        ratings.append(f"me,r{i},{1 + i % 5},1700000000")
    for n in range(NEIGHBOR_COUNT):
        for i in range(CO_RATED):
            ratings.append(f"fan{n},r{i},{1 + (i + n) % 5},1700000000")
        ratings.append(f"fan{n},n{n},5,1700000000")
    (path / "ratings.csv").write_text("\n".join(ratings) + "\n")
    (path / "favorites.csv").write_text("user_id,movie_tmdb_id\nme,2\nme,n0\n")


@pytest.fixture
def loaded_service(db_manager, tmp_path):
    _write_dump(tmp_path)
    with db_manager.session_scope() as session:
        load_graph_from_csv(session, str(tmp_path))
    return RecommendationService(GraphStore(db_manager))


def test_weighted_content_from_dump(loaded_service, run):
    results = run(loaded_service.weighted_content, "1", user_id="me")

    # Aliens: 2 genres + Sigourney Weaver; Blade Runner: 1 genre + Ridley Scott
    assert [(r["tmdb_id"], r["score"]) for r in results] == [("2", 13), ("3", 9)]
    assert [r["favorite"] for r in results] == [True, False]
    assert results[0]["title"] == "Aliens"


def test_jaccard_from_dump(loaded_service, run):
    results = run(loaded_service.jaccard_index, "1")

    # Alien {Horror, SciFi, Weaver, Scott}; Aliens adds Action and Cameron
    assert results[0]["tmdb_id"] == "2"
    assert results[0]["score"] == pytest.approx(3 / 6)
    assert results[1]["tmdb_id"] == "3"
    assert results[1]["score"] == pytest.approx(2 / 4)


def test_collaborative_from_dump(loaded_service, run):
    for name in ("cosine_similarity", "pearson_similarity"):
        results = run(getattr(loaded_service, name), "1", user_id="me", limit=10)
        scores = [r["score"] for r in results]

        assert scores == sorted(scores, reverse=True)
        assert {r["tmdb_id"] for r in results} <= {f"n{n}" for n in range(NEIGHBOR_COUNT)}
        assert results


def test_identical_neighbor_ranks_first(loaded_service, run):
    """fan0 rated exactly like the requester, so its new movie leads."""
    results = run(loaded_service.cosine_similarity, None, user_id="me")
    assert results[0]["tmdb_id"] == "n0"
    assert results[0]["score"] == pytest.approx(1.0)
    assert results[0]["favorite"] is True


@pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
def test_unknown_seed(loaded_service, run, algorithm):
    with pytest.raises(NotFound):
        run(loaded_service.recommend, algorithm, "404", user_id="me")
