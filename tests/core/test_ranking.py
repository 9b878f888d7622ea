"""
Unit tests for ranking, deduplication and pagination.
"""

import pytest

from graphrec.core.ranking import (
    DEFAULT_LIMIT, DEFAULT_SKIP, coerce_pagination, dedupe_by_id, paginate, rank
)
from graphrec.core.types import Candidate, Pagination


def make(*pairs):
    return [Candidate(movie_id=movie_id, score=score) for movie_id, score in pairs]


class TestCoercePagination:
    """Tests for coerce_pagination()."""

    def test_defaults(self):
        assert coerce_pagination() == Pagination(limit=DEFAULT_LIMIT, skip=DEFAULT_SKIP)
        assert DEFAULT_LIMIT == 6
        assert DEFAULT_SKIP == 0

    def test_integer_strings(self):
        assert coerce_pagination("3", "9") == Pagination(limit=3, skip=9)

    def test_integral_floats(self):
        assert coerce_pagination(4.0, 2.0) == Pagination(limit=4, skip=2)

    @pytest.mark.parametrize("limit", ["abc", "", "2.5", 2.5, 0, -1, True, [3], "--3", "+-5", "²", "1e2"])
    def test_invalid_limit_uses_default(self, limit):
        assert coerce_pagination(limit, 1).limit == DEFAULT_LIMIT

    @pytest.mark.parametrize("skip", ["abc", -1, "-4", False, 1.5, "--3", "+-5", "²"])
    def test_invalid_skip_uses_default(self, skip):
        assert coerce_pagination(2, skip).skip == DEFAULT_SKIP

    def test_zero_skip_kept(self):
        assert coerce_pagination(2, 0).skip == 0


class TestPaginationType:
    """Tests for Pagination validation."""

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            Pagination(limit=0, skip=0)

    def test_rejects_negative_skip(self):
        with pytest.raises(ValueError):
            Pagination(limit=1, skip=-1)


class TestRank:
    """Tests for rank() and dedupe_by_id()."""

    def test_descending(self):
        ranked = rank(make(("a", 1), ("b", 3), ("c", 2)))
        assert [c.movie_id for c in ranked] == ["b", "c", "a"]

    def test_ties_keep_input_order(self):
        ranked = rank(make(("a", 1), ("b", 2), ("c", 2), ("d", 2)))
        assert [c.movie_id for c in ranked] == ["b", "c", "d", "a"]

    def test_dedupe_keeps_first(self):
        ranked = rank(make(("a", 0.5), ("b", 0.9), ("a", 0.7)))
        unique = dedupe_by_id(ranked)
        assert [(c.movie_id, c.score) for c in unique] == [("b", 0.9), ("a", 0.7)]


class TestPaginate:
    """Tests for paginate()."""

    def test_window(self):
        assert paginate(list(range(10)), Pagination(limit=3, skip=2)) == [2, 3, 4]

    def test_skip_past_end(self):
        assert paginate([1, 2], Pagination(limit=3, skip=5)) == []

    def test_consecutive_pages(self):
        items = list(range(7))
        first = paginate(items, Pagination(limit=3, skip=0))
        second = paginate(items, Pagination(limit=3, skip=3))
        assert first + second == paginate(items, Pagination(limit=6, skip=0))
