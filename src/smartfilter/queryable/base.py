"""Base queryable and schema introspection interfaces.

Defines the abstract contracts every backend must follow. The compiler only
ever talks to these: it never builds backend syntax itself.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

from smartfilter.constants import TypeTag

__all__ = ("Queryable", "SchemaIntrospector", "RelationCallback")

RelationCallback = Callable[["Queryable"], None]


class Queryable(ABC):
    """Abstract predicate-building interface.

    Every ``where*`` method adds one predicate and returns ``self`` so calls
    chain. Column references are fully qualified (``table.column``). ``where``
    accepts the comparison symbols plus ``like``/``not like`` and
    ``ilike``/``not ilike``.
    """

    @property
    @abstractmethod
    def entity(self) -> Any:
        """The entity (model class) this query selects from."""
        raise NotImplementedError

    @property
    @abstractmethod
    def table(self) -> str:
        """Table name used to qualify columns."""
        raise NotImplementedError

    @property
    @abstractmethod
    def predicate_count(self) -> int:
        """Number of predicates added so far."""
        raise NotImplementedError

    @abstractmethod
    def where(self, column: str, operator: str, value: Any) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_in(self, column: str, values: Sequence[Any]) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_not_in(self, column: str, values: Sequence[Any]) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_between(self, column: str, values: Sequence[Any]) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_not_between(self, column: str, values: Sequence[Any]) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_null(self, column: str) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_not_null(self, column: str) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_date(self, column: str, value: Any) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_month(self, column: str, value: int) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_year(self, column: str, value: int) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_day(self, column: str, value: int) -> "Queryable":
        raise NotImplementedError

    @abstractmethod
    def where_relation(self, name: str, callback: RelationCallback) -> "Queryable":
        """Scope ``callback`` to rows related through ``name``.

        The callback receives a sub-queryable over the related entity. A
        callback that adds no predicate must leave this query unchanged.
        """
        raise NotImplementedError


class SchemaIntrospector(ABC):
    """Read-only access to table columns and entity relations."""

    @abstractmethod
    def list_columns(self, table: str) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def column_type(self, table: str, column: str) -> TypeTag:
        raise NotImplementedError

    def entity_table(self, entity: Any) -> str:
        """Table backing ``entity``."""
        return getattr(entity, "__tablename__", "")

    def related_entity(self, entity: Any, relation: str) -> Optional[Any]:
        """Entity reached through ``relation``, or ``None`` if there is no such relation."""
        return None
