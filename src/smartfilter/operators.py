"""Operator dispatch.

Maps each ``OperatorTag`` to exactly one predicate call on a ``Queryable``.
Handlers return ``False`` when the value cannot be used (e.g. a ``between``
without two bounds), in which case nothing is added. An unknown operator is
a no-op unless ``strict_mode`` is on.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from .constants import OperatorTag
from .exceptions import UnsupportedOperatorError
from .logger import Logger
from .queryable.base import Queryable
from .schema import FilterConfig
from .utils import as_list

__all__ = ("OPERATOR_HANDLERS", "dispatch_operator")

logger = Logger(__name__)

Handler = Callable[[Queryable, str, Any, FilterConfig], bool]


def _comparison(symbol: str) -> Handler:
    def handler(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
        query.where(column, symbol, value)
        return True

    return handler


def _pattern(negate: bool) -> Handler:
    def handler(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
        keyword = "like" if config.case_sensitive else "ilike"
        query.where(column, f"not {keyword}" if negate else keyword, value)
        return True

    return handler


def _in(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
    query.where_in(column, as_list(value))
    return True


def _not_in(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
    query.where_not_in(column, as_list(value))
    return True


def _between(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
    bounds = as_list(value)
    if len(bounds) != 2:
        return False
    query.where_between(column, bounds)
    return True


def _not_between(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
    bounds = as_list(value)
    if len(bounds) != 2:
        return False
    query.where_not_between(column, bounds)
    return True


def _null(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
    query.where_null(column)
    return True


def _not_null(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
    query.where_not_null(column)
    return True


def normalize_date(value: Any, date_format: str = "%Y-%m-%d") -> Optional[str]:
    """ISO date string for ``value``, or ``None`` when it is not a valid date."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), date_format).date().isoformat()
    except ValueError:
        return None


def date_part(value: Any) -> Optional[int]:
    """Integer month/year/day component, or ``None`` when unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _date_handler(date_format: str) -> Handler:
    def handler(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
        normalized = normalize_date(value, date_format)
        if normalized is None:
            return False
        query.where_date(column, normalized)
        return True

    return handler


def _part_handler(method: str) -> Handler:
    def handler(query: Queryable, column: str, value: Any, config: FilterConfig) -> bool:
        part = date_part(value)
        if part is None:
            return False
        getattr(query, method)(column, part)
        return True

    return handler


def build_handlers(date_format: str = "%Y-%m-%d") -> Dict[OperatorTag, Handler]:
    """Dispatch table covering every ``OperatorTag``."""
    return {
        OperatorTag.EQ: _comparison("="),
        OperatorTag.NE: _comparison("!="),
        OperatorTag.GT: _comparison(">"),
        OperatorTag.GTE: _comparison(">="),
        OperatorTag.LT: _comparison("<"),
        OperatorTag.LTE: _comparison("<="),
        OperatorTag.LIKE: _pattern(negate=False),
        OperatorTag.NOT_LIKE: _pattern(negate=True),
        OperatorTag.IN: _in,
        OperatorTag.NOT_IN: _not_in,
        OperatorTag.BETWEEN: _between,
        OperatorTag.NOT_BETWEEN: _not_between,
        OperatorTag.NULL: _null,
        OperatorTag.NOT_NULL: _not_null,
        OperatorTag.DATE: _date_handler(date_format),
        OperatorTag.MONTH: _part_handler("where_month"),
        OperatorTag.YEAR: _part_handler("where_year"),
        OperatorTag.DAY: _part_handler("where_day"),
    }


OPERATOR_HANDLERS = build_handlers()


def dispatch_operator(
    query: Queryable,
    operator: Any,
    column: str,
    value: Any,
    config: FilterConfig,
    handlers: Optional[Dict[OperatorTag, Handler]] = None,
) -> bool:
    """Add the predicate for ``operator`` to ``query``.

    Returns:
        True when a predicate was added

    Raises:
        UnsupportedOperatorError: Unknown operator while ``config.strict_mode`` is on
    """
    tag = OperatorTag.parse(operator)
    if tag is None:
        if config.strict_mode:
            raise UnsupportedOperatorError("Unsupported filter operator", operator=operator, column=column)
        logger.debug("Skipping unknown operator %r on %s", operator, column)
        return False
    return (handlers or OPERATOR_HANDLERS)[tag](query, column, value, config)
