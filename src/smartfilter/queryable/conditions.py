"""Backend-agnostic condition builder.

``ConditionQueryable`` records predicates in a universal dict form that is
easy to inspect, serialize or translate for another backend:

- Leaves are ``{column: {op: value}}`` with ops such as ``$eq``, ``$gt``,
  ``$like``, ``$in``, ``$between``, ``$null``, ``$date``.
- All predicates of one query combine under ``{"$and": [...]}``.
- Relation scopes are ``{"$has": {"relation": name, "where": {...}}}``.

Typical usage:

- Build: ``q = ConditionQueryable(Post)``
- Filter: ``manager.apply(q, {"views": {"value": 10, "operator": ">"}})``
- Inspect: ``q.to_dict()``
"""

from typing import Any, Dict, List, Optional, Sequence

from smartfilter.descriptors import is_filterable, related_entity_for
from smartfilter.settings import SmartFilterSettings
from smartfilter.settings import settings as default_settings

from .base import Queryable, RelationCallback

__all__ = ("ConditionQueryable",)


class ConditionQueryable(Queryable):
    """Queryable that records predicates as universal condition dicts.

    Attributes:
        settings: Settings used to resolve related entities; relation scopes inherit them
    """

    # Supported operator mappings from comparison symbol to universal op
    _OP_MAP = {
        "=": "$eq",
        "!=": "$ne",
        ">": "$gt",
        ">=": "$gte",
        "<": "$lt",
        "<=": "$lte",
        "like": "$like",
        "not like": "$nlike",
        "ilike": "$ilike",
        "not ilike": "$nilike",
    }

    def __init__(
        self,
        entity: Any,
        table: Optional[str] = None,
        settings: Optional[SmartFilterSettings] = None,
    ) -> None:
        self._entity = entity
        if table is None:
            table = entity.get_table() if is_filterable(entity) else getattr(entity, "__tablename__", "")
        self._table = table
        self.settings = settings or default_settings
        self.nodes: List[Dict[str, Any]] = []

    @property
    def entity(self) -> Any:
        return self._entity

    @property
    def table(self) -> str:
        return self._table

    @property
    def predicate_count(self) -> int:
        return len(self.nodes)

    def __str__(self) -> str:
        return str(self.to_dict())

    def __repr__(self) -> str:
        return f"<ConditionQueryable: {self.to_dict()}>"

    def to_dict(self) -> Dict[str, Any]:
        """Universal dict of all recorded predicates (empty when none)."""
        if not self.nodes:
            return {}
        return {"$and": [dict(node) for node in self.nodes]}

    def _leaf(self, column: str, op: str, value: Any) -> "ConditionQueryable":
        self.nodes.append({column: {op: value}})
        return self

    def where(self, column: str, operator: str, value: Any) -> "ConditionQueryable":
        op = self._OP_MAP.get(operator)
        if op is None:
            return self
        return self._leaf(column, op, value)

    def where_in(self, column: str, values: Sequence[Any]) -> "ConditionQueryable":
        return self._leaf(column, "$in", list(values))

    def where_not_in(self, column: str, values: Sequence[Any]) -> "ConditionQueryable":
        return self._leaf(column, "$nin", list(values))

    def where_between(self, column: str, values: Sequence[Any]) -> "ConditionQueryable":
        return self._leaf(column, "$between", list(values))

    def where_not_between(self, column: str, values: Sequence[Any]) -> "ConditionQueryable":
        return self._leaf(column, "$nbetween", list(values))

    def where_null(self, column: str) -> "ConditionQueryable":
        return self._leaf(column, "$null", True)

    def where_not_null(self, column: str) -> "ConditionQueryable":
        return self._leaf(column, "$null", False)

    def where_date(self, column: str, value: Any) -> "ConditionQueryable":
        return self._leaf(column, "$date", value)

    def where_month(self, column: str, value: int) -> "ConditionQueryable":
        return self._leaf(column, "$month", value)

    def where_year(self, column: str, value: int) -> "ConditionQueryable":
        return self._leaf(column, "$year", value)

    def where_day(self, column: str, value: int) -> "ConditionQueryable":
        return self._leaf(column, "$day", value)

    def _related(self, name: str) -> Optional[Any]:
        if not is_filterable(self._entity):
            return None
        relation = self._entity.get_filterable_relations(self.settings).get(name)
        if relation is not None:
            return related_entity_for(self._entity, relation)
        return self._entity.get_schema_introspector().related_entity(self._entity, name)

    def where_relation(self, name: str, callback: RelationCallback) -> "ConditionQueryable":
        related = self._related(name)
        if related is None:
            return self
        sub = ConditionQueryable(related, settings=self.settings)
        callback(sub)
        if sub.nodes:
            self.nodes.append({"$has": {"relation": name, "where": sub.to_dict()}})
        return self
