"""
This __init__.py file makes the smartfilter directory a Python package
and exposes the manager, compiler, entity contract and schema classes.
"""

from .compiler import FilterCompiler
from .constants import OperatorTag, TypeTag
from .descriptors import Filterable
from .exceptions import (
    InvalidConfigurationError,
    InvalidModelError,
    RelationError,
    SmartFilterError,
    UnsupportedOperatorError,
)
from .manager import SmartFilterManager
from .queryable import Queryable, SchemaIntrospector
from .schema import FieldDescriptor, FilterConfig, FilterSpec, RelationDescriptor

__version__ = "0.1.0"

__all__ = [
    "SmartFilterManager",
    "FilterCompiler",
    "Filterable",
    "Queryable",
    "SchemaIntrospector",
    "FilterSpec",
    "FilterConfig",
    "FieldDescriptor",
    "RelationDescriptor",
    "OperatorTag",
    "TypeTag",
    "SmartFilterError",
    "InvalidModelError",
    "InvalidConfigurationError",
    "UnsupportedOperatorError",
    "RelationError",
]
