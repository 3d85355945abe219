"""Utility functions for smartfilter.

Small helpers shared by the normalizer, coercer and descriptor resolution.
"""

import re
from typing import Any, Iterable, List, Sequence

from .constants import FOREIGN_KEY_SUFFIX, SENSITIVE_SUFFIXES

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


# ===========================================================================
# Value helpers
# ===========================================================================


def is_blank(value: Any) -> bool:
    """True for the two "absent" values: ``None`` and the empty string."""
    return value is None or (isinstance(value, str) and value == "")


def is_sequence(value: Any) -> bool:
    """Sequences that hold filter values (strings and bytes excluded)."""
    return isinstance(value, (list, tuple, set, frozenset))


def as_list(value: Any) -> List[Any]:
    """Wrap a scalar in a list; sequences become lists."""
    if is_sequence(value):
        return list(value)
    return [value]


def leading_int(text: str) -> int:
    """Parse the leading integer of ``text``; ``0`` when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(0)) if match else 0


def leading_float(text: str) -> float:
    """Parse the leading decimal number of ``text``; ``0.0`` when there is none."""
    match = _LEADING_FLOAT.match(text)
    return float(match.group(0)) if match else 0.0


def split_delimited(text: str, delimiter: str = ",") -> List[str]:
    if text == "":
        return []
    return text.split(delimiter or ",")


# ===========================================================================
# Column helpers
# ===========================================================================


def is_sensitive_column(column: str, suffixes: Sequence[str] = SENSITIVE_SUFFIXES) -> bool:
    return column.endswith(tuple(suffixes))


def filterable_columns(columns: Iterable[str], excluded: Iterable[str]) -> List[str]:
    """Drop excluded and sensitive columns, keeping declaration order."""
    skip = set(excluded)
    return [c for c in columns if c not in skip and not is_sensitive_column(c)]


def relation_name_for(column: str) -> str:
    """``author_id`` -> ``author``; empty when the column is not FK-shaped."""
    if not column.endswith(FOREIGN_KEY_SUFFIX) or column == FOREIGN_KEY_SUFFIX:
        return ""
    return column[: -len(FOREIGN_KEY_SUFFIX)]


def qualify(table: str, column: str) -> str:
    """Fully-qualified column reference, ``table.column``."""
    return f"{table}.{column}" if table else column
