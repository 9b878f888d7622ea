"""
Tests for the graph store facade: read transactions, traversals and release.
"""

import pytest
from sqlalchemy.exc import OperationalError

from graphrec.core.errors import BackendUnavailable
from graphrec.core.graph.store import GraphStore
from graphrec.core.graph.traversals import (
    COSINE_SIMILARITY, JACCARD_INDEX, MOVIE_EXISTS, PEARSON_SIMILARITY,
    USER_FAVORITES, WEIGHTED_CONTENT, TraversalQuery
)
from graphrec.database.connection import DatabaseManager
from graphrec.database.models import Genre


def _track_releases(monkeypatch, db_manager):
    released = []
    original = db_manager.close_read_only_session

    def close(session):
        released.append(session)
        original(session)

    monkeypatch.setattr(db_manager, "close_read_only_session", close)
    return released


async def _run_query(store, query, parameters=None):
    async with store.read_transaction() as tx:
        return await tx.run(query, parameters)


class TestReadTransaction:
    """Tests for GraphStore.read_transaction()."""

    def test_session_released_on_success(self, store, graph_db, run, monkeypatch):
        released = _track_releases(monkeypatch, graph_db)
        run(_run_query, store, MOVIE_EXISTS, {"seed_id": "100"})
        assert len(released) == 1

    def test_session_released_on_failure(self, store, graph_db, run, monkeypatch):
        released = _track_releases(monkeypatch, graph_db)

        def broken(session, params):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        with pytest.raises(BackendUnavailable) as exc_info:
            run(_run_query, store, TraversalQuery("broken", broken))
        assert exc_info.value.query == "broken"
        assert len(released) == 1

    def test_writes_rejected(self, store, run):
        def write(session, params):
            session.add(Genre(name="Western"))
            session.flush()
            return []

        with pytest.raises(RuntimeError):
            run(_run_query, store, TraversalQuery("write", write))

    def test_nothing_written(self, store, graph_db, run):
        def write(session, params):
            session.add(Genre(name="Western"))
            return []

        run(_run_query, store, TraversalQuery("write", write))
        with graph_db.read_only_scope() as session:
            assert session.query(Genre).filter(Genre.name == "Western").first() is None

    def test_unreachable_store(self, run, tmp_path):
        missing = DatabaseManager(f"sqlite:///{tmp_path}/no/such/dir/graph.db")
        with pytest.raises(BackendUnavailable):
            run(GraphStore(missing).node_counts)
        missing.close()


class TestTraversals:
    """Raw rows produced by the traversal queries."""

    def test_movie_exists(self, store, run):
        assert run(_run_query, store, MOVIE_EXISTS, {"seed_id": "100"})
        assert run(_run_query, store, MOVIE_EXISTS, {"seed_id": "999"}) == []

    def test_user_favorites(self, store, run):
        rows = run(_run_query, store, USER_FAVORITES, {"user_id": "u1"})
        assert [row["movie_id"] for row in rows] == ["200", "c20"]

    def test_weighted_content_counts(self, store, run):
        rows = run(_run_query, store, WEIGHTED_CONTENT, {"seed_id": "100"})
        counts = {row["movie_id"]: (row["genres"], row["actors"], row["directors"]) for row in rows}
        assert counts == {
            "200": (2, 1, 0),
            "300": (1, 1, 0),
            "400": (2, 2, 1),
            "500": (0, 0, 1),
        }

    def test_jaccard_sets(self, store, run):
        rows = run(_run_query, store, JACCARD_INDEX, {"seed_id": "100"})
        row = next(r for r in rows if r["movie_id"] == "300")
        assert row["intersection"] == 2
        assert len(row["seed_set"]) == 5
        assert len(row["candidate_set"]) == 4

    def test_collaborative_rows(self, store, run):
        rows = run(_run_query, store, COSINE_SIMILARITY, {"user_id": "u1"})
        by_neighbor = {row["neighbor_id"]: row for row in rows}

        # u3 has only 10 co-rated movies; u6 has nothing unseen
        assert set(by_neighbor) == {"u2", "u4", "u5"}
        assert by_neighbor["u2"]["co_rated"] == 12
        assert by_neighbor["u4"]["co_rated"] == 11
        assert by_neighbor["u2"]["movie_id"] == "c15"
        assert "neighbor_mean" not in by_neighbor["u2"]

    def test_pearson_rows_carry_neighbor_mean(self, store, run):
        rows = run(_run_query, store, PEARSON_SIMILARITY, {"user_id": "u1"})
        by_neighbor = {row["neighbor_id"]: row for row in rows}
        assert by_neighbor["u5"]["neighbor_mean"] == pytest.approx(3.0)
        assert by_neighbor["u2"]["neighbor_mean"] == pytest.approx((41 + 13) / 15)


def test_node_counts(store, run):
    counts = run(store.node_counts)
    assert counts["movies"] == 26
    assert counts["people"] == 5
    assert counts["genres"] == 3
    assert counts["users"] == 7
