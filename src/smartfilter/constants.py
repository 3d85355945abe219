"""
Type and operator tags shared by the normalizer, coercer and dispatcher.
"""

from enum import Enum
from typing import Optional


class TypeTag(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"

    @classmethod
    def parse(cls, raw: object) -> Optional["TypeTag"]:
        """Resolve a raw type name (aliases included); ``None`` when unknown."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        return TYPE_ALIASES.get(raw.strip().lower())


class OperatorTag(str, Enum):
    EQ = "="
    NE = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    LIKE = "like"
    NOT_LIKE = "not_like"
    IN = "in"
    NOT_IN = "not_in"
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"
    NULL = "null"
    NOT_NULL = "not_null"
    DATE = "date"
    MONTH = "month"
    YEAR = "year"
    DAY = "day"

    @classmethod
    def parse(cls, raw: object) -> Optional["OperatorTag"]:
        """Resolve a raw operator; ``None`` marks an unknown operator."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


TYPE_ALIASES = {
    "string": TypeTag.STRING,
    "integer": TypeTag.INTEGER,
    "number": TypeTag.INTEGER,
    "float": TypeTag.FLOAT,
    "decimal": TypeTag.FLOAT,
    "boolean": TypeTag.BOOLEAN,
    "date": TypeTag.DATE,
    "array": TypeTag.ARRAY,
}

DEFAULT_OPERATOR = OperatorTag.EQ.value
DEFAULT_TYPE = TypeTag.STRING.value

# Columns ending with these never become filterable by schema derivation
SENSITIVE_SUFFIXES = ("_token", "password", "secret")

FOREIGN_KEY_SUFFIX = "_id"

# Database column type names -> semantic type tags
COLUMN_TYPE_MAP = {
    "integer": TypeTag.INTEGER,
    "int": TypeTag.INTEGER,
    "bigint": TypeTag.INTEGER,
    "big_integer": TypeTag.INTEGER,
    "smallint": TypeTag.INTEGER,
    "small_integer": TypeTag.INTEGER,
    "tinyint": TypeTag.INTEGER,
    "decimal": TypeTag.FLOAT,
    "numeric": TypeTag.FLOAT,
    "float": TypeTag.FLOAT,
    "double": TypeTag.FLOAT,
    "real": TypeTag.FLOAT,
    "boolean": TypeTag.BOOLEAN,
    "date": TypeTag.DATE,
    "datetime": TypeTag.DATE,
    "timestamp": TypeTag.DATE,
}

# Option keys understood by FilterConfig
CONFIG_KEYS = ("deep", "max_relation_depth", "case_sensitive", "strict_mode")
