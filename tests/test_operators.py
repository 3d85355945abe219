"""Tests for operator dispatch."""

from datetime import date, datetime

import pytest

from smartfilter.constants import OperatorTag
from smartfilter.exceptions import UnsupportedOperatorError
from smartfilter.operators import OPERATOR_HANDLERS, date_part, dispatch_operator, normalize_date
from smartfilter.queryable.conditions import ConditionQueryable
from smartfilter.schema import FilterConfig
from tests.entities import Article


@pytest.fixture
def query():
    return ConditionQueryable(Article)


def dispatch(query, operator, value, **config):
    return dispatch_operator(query, operator, "articles.views", value, FilterConfig(**config))


def test_every_operator_has_a_handler():
    assert set(OPERATOR_HANDLERS) == set(OperatorTag)


class TestDispatch:
    @pytest.mark.parametrize(
        "operator,op",
        [("=", "$eq"), ("!=", "$ne"), (">", "$gt"), (">=", "$gte"), ("<", "$lt"), ("<=", "$lte")],
    )
    def test_comparisons(self, query, operator, op):
        assert dispatch(query, operator, 5)
        assert query.nodes == [{"articles.views": {op: 5}}]

    def test_like_case_insensitive_by_default(self, query):
        dispatch(query, "like", "%a%")
        dispatch(query, "not_like", "%b%")
        assert query.nodes == [
            {"articles.views": {"$ilike": "%a%"}},
            {"articles.views": {"$nilike": "%b%"}},
        ]

    def test_like_case_sensitive(self, query):
        dispatch(query, "LIKE", "%a%", case_sensitive=True)
        dispatch(query, "not_like", "%b%", case_sensitive=True)
        assert query.nodes == [
            {"articles.views": {"$like": "%a%"}},
            {"articles.views": {"$nlike": "%b%"}},
        ]

    def test_in_wraps_scalars(self, query):
        dispatch(query, "in", 3)
        dispatch(query, "not_in", [1, 2])
        assert query.nodes == [{"articles.views": {"$in": [3]}}, {"articles.views": {"$nin": [1, 2]}}]

    def test_between_requires_two_bounds(self, query):
        assert not dispatch(query, "between", [1])
        assert not dispatch(query, "not_between", [1, 2, 3])
        assert dispatch(query, "between", (1, 9))
        assert query.nodes == [{"articles.views": {"$between": [1, 9]}}]

    def test_null(self, query):
        dispatch(query, "null", True)
        dispatch(query, "not_null", True)
        assert query.nodes == [{"articles.views": {"$null": True}}, {"articles.views": {"$null": False}}]

    def test_date_parts(self, query):
        assert dispatch(query, "month", "4")
        assert dispatch(query, "year", 2024)
        assert not dispatch(query, "day", "first")
        assert query.nodes == [{"articles.views": {"$month": 4}}, {"articles.views": {"$year": 2024}}]

    def test_unknown_operator_is_noop(self, query):
        assert dispatch(query, "contains", "x") is False
        assert query.nodes == []

    def test_unknown_operator_strict(self, query):
        with pytest.raises(UnsupportedOperatorError):
            dispatch(query, "contains", "x", strict_mode=True)


class TestDateHelpers:
    def test_normalize_date(self):
        assert normalize_date("2024-02-29") == "2024-02-29"
        assert normalize_date(date(2024, 1, 2)) == "2024-01-02"
        assert normalize_date(datetime(2024, 1, 2, 13, 0)) == "2024-01-02"
        assert normalize_date("2023-02-29") is None
        assert normalize_date(20240101) is None
        assert normalize_date("02.01.2024", "%d.%m.%Y") == "2024-01-02"

    def test_date_part(self):
        assert date_part(12) == 12
        assert date_part(" 7 ") == 7
        assert date_part(True) is None
        assert date_part("7.5") is None
        assert date_part(None) is None
