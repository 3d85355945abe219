"""Filter normalization.

Turns caller input into canonical ``FilterSpec`` records, either directly
from a filter mapping or from a key/value source (query-string parameters,
form data) restricted by an allow-list.
"""

from typing import Any, Dict, Mapping, Optional

from .coercion import coerce_value
from .constants import DEFAULT_OPERATOR, DEFAULT_TYPE
from .schema import FieldDescriptor, FilterSpec
from .utils import is_blank

__all__ = ("normalize_filters", "parse_from_source", "allow_list_from_fields")


def normalize_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, FilterSpec]:
    """Direct mode: pass specs through, defaulting operator to ``=`` and type to ``string``.

    Args:
        filters: Mapping of field -> FilterSpec, spec dict or bare value

    Returns:
        Mapping of field -> FilterSpec, in input order
    """
    if not filters:
        return {}
    return {str(field): FilterSpec.from_any(str(field), raw) for field, raw in filters.items()}


def parse_from_source(
    allowed: Mapping[str, Mapping[str, Any]],
    source: Mapping[str, Any],
    prefix: str = "",
    delimiter: str = ",",
) -> Dict[str, FilterSpec]:
    """Request mode: build specs for allow-listed fields present in ``source``.

    Absent and empty values produce no entry, so an omitted filter is never
    turned into an implicit ``= NULL`` condition. Keys outside ``allowed``
    are ignored.

    Args:
        allowed: field -> {"operator": ..., "type": ...}
        source: Key/value source such as query-string parameters
        prefix: Prefix prepended to each field when reading ``source``
        delimiter: Separator for array-typed values

    Returns:
        Mapping of field -> FilterSpec with coerced values
    """
    specs: Dict[str, FilterSpec] = {}
    for field, cfg in allowed.items():
        cfg = cfg or {}
        value = source.get(f"{prefix}{field}")
        if is_blank(value):
            continue
        operator = cfg.get("operator") or DEFAULT_OPERATOR
        type_ = cfg.get("type") or DEFAULT_TYPE
        specs[field] = FilterSpec(
            field=field,
            value=coerce_value(value, type_, delimiter=delimiter),
            operator=operator,
            type=type_,
        )
    return specs


def allow_list_from_fields(fields: Mapping[str, FieldDescriptor]) -> Dict[str, Dict[str, str]]:
    """Allow-list shape for ``parse_from_source`` built from entity field descriptors."""
    return {
        name: {"operator": descriptor.default_operator.value, "type": descriptor.type.value}
        for name, descriptor in fields.items()
    }
