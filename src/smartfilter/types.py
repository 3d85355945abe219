"""Type aliases for smartfilter package.

This module provides reusable type definitions to ensure consistency
across the codebase and improve code readability.
"""

from typing import Any, Dict, Mapping, Union

from .schema import FilterSpec

# Filter input - a spec, a spec mapping ({"value", "operator", "type"}) or a bare value
FilterInput = Union[FilterSpec, Dict[str, Any], Any]

# Filters keyed by field name (dotted for relation paths)
Filters = Mapping[str, FilterInput]

# Call-site, entity-level or source mappings
Options = Mapping[str, Any]
Source = Mapping[str, Any]
