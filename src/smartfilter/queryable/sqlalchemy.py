"""SQLAlchemy queryable backend.

Builds predicates as SQLAlchemy column expressions over a declarative model
and exposes the filtered ``Select``. Relation scoping uses
``relationship.any()`` for collections and ``relationship.has()`` for
scalar relations.

Date helpers compile per dialect (``func.date`` / ``extract``), so the same
filters run on SQLite, PostgreSQL and MySQL.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import MetaData, and_, extract, func, not_, select
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from smartfilter.constants import COLUMN_TYPE_MAP, TypeTag
from smartfilter.descriptors import Filterable
from smartfilter.logger import Logger

from .base import Queryable, RelationCallback, SchemaIntrospector

__all__ = (
    "SQLAlchemyQueryable",
    "SQLAlchemyIntrospector",
    "SmartFilterMixin",
)

logger = Logger(__name__)

# Operator mapping from comparison symbol to column expression
_COMPARATORS: Dict[str, Callable[[Any, Any], ColumnElement]] = {
    "=": lambda col, v: col == v,
    "!=": lambda col, v: col != v,
    ">": lambda col, v: col > v,
    ">=": lambda col, v: col >= v,
    "<": lambda col, v: col < v,
    "<=": lambda col, v: col <= v,
    "like": lambda col, v: col.like(v),
    "not like": lambda col, v: col.not_like(v),
    "ilike": lambda col, v: col.ilike(v),
    "not ilike": lambda col, v: col.not_ilike(v),
}


class SQLAlchemyQueryable(Queryable):
    """Collect filter predicates for a mapped model.

    Attributes:
        model: Declarative model class being queried
    """

    def __init__(self, model: Any, statement: Optional[Select] = None) -> None:
        self.model = model
        self._base = statement if statement is not None else select(model)
        self._criteria: List[ColumnElement] = []

    @property
    def entity(self) -> Any:
        return self.model

    @property
    def table(self) -> str:
        return self.model.__table__.name

    @property
    def criteria(self) -> List[ColumnElement]:
        return list(self._criteria)

    @property
    def predicate_count(self) -> int:
        return len(self._criteria)

    @property
    def statement(self) -> Select:
        """The base statement with every collected predicate applied."""
        if not self._criteria:
            return self._base
        return self._base.where(*self._criteria)

    def __repr__(self) -> str:
        return f"<SQLAlchemyQueryable {self.model.__name__}: {len(self._criteria)} predicates>"

    # ------------------------------------------------------------------
    # Column resolution
    # ------------------------------------------------------------------
    def _column(self, ref: str) -> Optional[Any]:
        table, _, name = ref.rpartition(".")
        local = self.model.__table__
        if table and table != local.name:
            logger.warning("Column %s does not belong to table %s", ref, local.name)
            return None
        column = local.c.get(name)
        if column is None:
            logger.warning("Unknown column %s on %s", name, local.name)
        return column

    def _add(self, ref: str, build: Callable[[Any], ColumnElement]) -> "SQLAlchemyQueryable":
        column = self._column(ref)
        if column is not None:
            self._criteria.append(build(column))
        return self

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def where(self, column: str, operator: str, value: Any) -> "SQLAlchemyQueryable":
        comparator = _COMPARATORS.get(operator)
        if comparator is None:
            logger.warning("Unsupported comparison %r on %s", operator, column)
            return self
        return self._add(column, lambda col: comparator(col, value))

    def where_in(self, column: str, values: Sequence[Any]) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: col.in_(list(values)))

    def where_not_in(self, column: str, values: Sequence[Any]) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: col.not_in(list(values)))

    def where_between(self, column: str, values: Sequence[Any]) -> "SQLAlchemyQueryable":
        low, high = values
        return self._add(column, lambda col: col.between(low, high))

    def where_not_between(self, column: str, values: Sequence[Any]) -> "SQLAlchemyQueryable":
        low, high = values
        return self._add(column, lambda col: not_(col.between(low, high)))

    def where_null(self, column: str) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: col.is_(None))

    def where_not_null(self, column: str) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: col.is_not(None))

    def where_date(self, column: str, value: Any) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: func.date(col) == value)

    def where_month(self, column: str, value: int) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: extract("month", col) == value)

    def where_year(self, column: str, value: int) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: extract("year", col) == value)

    def where_day(self, column: str, value: int) -> "SQLAlchemyQueryable":
        return self._add(column, lambda col: extract("day", col) == value)

    def where_relation(self, name: str, callback: RelationCallback) -> "SQLAlchemyQueryable":
        prop = sa_inspect(self.model).relationships.get(name)
        if prop is None:
            logger.warning("Model %s has no relationship %s", self.model.__name__, name)
            return self
        sub = SQLAlchemyQueryable(prop.mapper.class_)
        callback(sub)
        if not sub.predicate_count:
            return self
        attr = getattr(self.model, name)
        criterion = and_(*sub.criteria)
        self._criteria.append(attr.any(criterion) if prop.uselist else attr.has(criterion))
        return self


class SQLAlchemyIntrospector(SchemaIntrospector):
    """Schema introspection backed by SQLAlchemy ``MetaData`` and mappers."""

    def __init__(self, metadata: MetaData) -> None:
        self.metadata = metadata

    def list_columns(self, table: str) -> List[str]:
        tbl = self.metadata.tables.get(table)
        if tbl is None:
            return []
        return [c.name for c in tbl.columns]

    def column_type(self, table: str, column: str) -> TypeTag:
        tbl = self.metadata.tables.get(table)
        if tbl is None or column not in tbl.c:
            return TypeTag.STRING
        visit_name = getattr(tbl.c[column].type, "__visit_name__", "") or ""
        return COLUMN_TYPE_MAP.get(visit_name.lower(), TypeTag.STRING)

    def entity_table(self, entity: Any) -> str:
        return sa_inspect(entity).local_table.name

    def related_entity(self, entity: Any, relation: str) -> Optional[Any]:
        prop = sa_inspect(entity).relationships.get(relation)
        return prop.mapper.class_ if prop is not None else None


class SmartFilterMixin(Filterable):
    """Filterable implementation for SQLAlchemy declarative models.

    Example:
        class Post(Base, SmartFilterMixin):
            __tablename__ = "posts"
            ...

            @classmethod
            def filterable_fields(cls):
                return {"title": {"operator": "like", "type": "string"}}
    """

    @classmethod
    def get_table(cls) -> str:
        return cls.__table__.name

    @classmethod
    def get_schema_introspector(cls) -> SchemaIntrospector:
        return SQLAlchemyIntrospector(cls.metadata)

    @classmethod
    def smart_query(
        cls,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        source: Optional[Mapping[str, Any]] = None,
        settings: Any = None,
    ) -> SQLAlchemyQueryable:
        """Start a ``select(cls)`` queryable with filters applied."""
        return cls.apply_smart_filters(SQLAlchemyQueryable(cls), filters, options, source=source, settings=settings)
