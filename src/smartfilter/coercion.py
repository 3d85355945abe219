"""Type coercion for raw filter values.

Converts raw values (typically strings from a query string) to the
canonical representation for the declared semantic type. Coercion is
best-effort and never raises: unparsable numbers degrade to ``0``/``0.0``.
"""

from typing import Any, Callable, Dict, Optional, Union

from .constants import OperatorTag, TypeTag
from .utils import is_sequence, leading_float, leading_int, split_delimited

__all__ = (
    "coerce_value",
    "to_boolean",
    "to_float",
    "to_integer",
    "to_array",
    "TRUTHY_STRINGS",
)

TRUTHY_STRINGS = frozenset({"1", "true", "yes", "on"})


def to_integer(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and value not in (float("inf"), float("-inf")) else 0
    text = str(value)
    try:
        return int(text)
    except ValueError:
        return leading_int(text)


def to_float(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    return leading_float(str(value))


def to_boolean(value: Any) -> bool:
    """Native bools as is, numbers and numeric strings by non-zero test,
    other strings by membership."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return float(text) != 0
        except ValueError:
            return text.lower() in TRUTHY_STRINGS
    return bool(value)


def to_array(value: Any, delimiter: str = ",") -> list:
    if is_sequence(value):
        return list(value)
    if isinstance(value, str):
        return split_delimited(value, delimiter)
    return [value]


def _to_string(value: Any, operator: Optional[OperatorTag]) -> Any:
    if operator is OperatorTag.LIKE and not is_sequence(value):
        return f"%{value}%"
    return value


_SCALAR_COERCERS: Dict[TypeTag, Callable[[Any], Any]] = {
    TypeTag.INTEGER: to_integer,
    TypeTag.FLOAT: to_float,
    TypeTag.BOOLEAN: to_boolean,
}


def coerce_value(
    value: Any,
    type_: Union[TypeTag, str, None],
    operator: Union[OperatorTag, str, None] = None,
    delimiter: str = ",",
) -> Any:
    """Coerce ``value`` to the canonical form for ``type_``.

    Args:
        value: Raw value
        type_: Type tag or raw type name (``number``/``decimal`` aliases accepted)
        operator: Operator the value is used with (``like`` wraps strings)
        delimiter: Separator for array-typed strings

    Returns:
        Coerced value; unknown types pass through unchanged.

    Examples:
        >>> coerce_value("25", "integer")
        25
        >>> coerce_value("John", "string", "like")
        '%John%'
    """
    tag = TypeTag.parse(type_)
    op = OperatorTag.parse(operator)

    if tag is TypeTag.STRING:
        return _to_string(value, op)
    if tag is TypeTag.ARRAY:
        return to_array(value, delimiter)
    if tag in _SCALAR_COERCERS:
        fn = _SCALAR_COERCERS[tag]
        # in/between carry several values of the declared type
        if is_sequence(value):
            return [fn(v) for v in value]
        return fn(value)
    # date and unknown types pass through
    return value
