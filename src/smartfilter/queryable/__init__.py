"""Queryable backends.

Exports the abstract `Queryable` and `SchemaIntrospector` contracts. Concrete
backends live in `conditions` and `sqlalchemy` and are imported explicitly.
"""

from .base import Queryable, RelationCallback, SchemaIntrospector

__all__ = ("Queryable", "RelationCallback", "SchemaIntrospector")
