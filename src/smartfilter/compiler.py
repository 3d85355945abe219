"""
Filter compiler.

``FilterCompiler`` turns normalized filter specs into predicates on a
``Queryable`` for one entity. Local fields go through the allow-list, the
type coercer and the operator dispatcher; dotted relation paths are scoped
into the related entity and compiled again with one less hop of remaining
depth. Anything unknown or unusable is dropped without error.
"""

from typing import Any, Dict, Mapping, Optional

from .coercion import coerce_value
from .config import resolve_filter_config
from .descriptors import is_filterable
from .exceptions import RelationError
from .logger import Logger
from .normalizer import allow_list_from_fields, normalize_filters, parse_from_source
from .operators import OPERATOR_HANDLERS, build_handlers, dispatch_operator
from .queryable.base import Queryable
from .schema import FieldDescriptor, FilterConfig, FilterSpec, RelationDescriptor
from .settings import SmartFilterSettings
from .settings import settings as default_settings
from .types import Filters, Options, Source
from .utils import qualify

__all__ = ("FilterCompiler",)


class FilterCompiler:
    """Compile filters for a single ``Filterable`` entity.

    A compiler is cheap and built per call; it caches the entity's resolved
    field and relation descriptors for its own lifetime only.

    Attributes:
        entity: Filterable entity whose declarations drive validation
        settings: Settings used for defaults, limits and parsing
    """

    def __init__(self, entity: Any, settings: Optional[SmartFilterSettings] = None) -> None:
        self.entity = entity
        self.settings = settings or default_settings
        self.logger = Logger(self.__class__.__name__, settings=self.settings)
        self._fields: Optional[Dict[str, FieldDescriptor]] = None
        self._relations: Optional[Dict[str, RelationDescriptor]] = None
        if self.settings.DATE_FORMAT == default_settings.DATE_FORMAT:
            self._handlers = OPERATOR_HANDLERS
        else:
            self._handlers = build_handlers(self.settings.DATE_FORMAT)

    @property
    def fields(self) -> Dict[str, FieldDescriptor]:
        if self._fields is None:
            self._fields = self.entity.get_filterable_fields(self.settings)
        return self._fields

    @property
    def relations(self) -> Dict[str, RelationDescriptor]:
        if self._relations is None:
            self._relations = self.entity.get_filterable_relations(self.settings)
        return self._relations

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def resolve_config(self, options: Optional[Options] = None) -> FilterConfig:
        return resolve_filter_config(self.entity.get_filter_config(), options, self.settings)

    def resolve_filters(
        self,
        filters: Optional[Filters] = None,
        source: Optional[Source] = None,
    ) -> Dict[str, FilterSpec]:
        """Explicit filters win; otherwise read the entity's own fields from ``source``."""
        if filters:
            return normalize_filters(filters)
        if source is None:
            return {}
        return parse_from_source(
            allow_list_from_fields(self.fields),
            source,
            prefix=self.settings.REQUEST_PREFIX,
            delimiter=self.settings.ARRAY_DELIMITER,
        )

    def apply(
        self,
        query: Queryable,
        filters: Optional[Filters] = None,
        options: Optional[Options] = None,
        source: Optional[Source] = None,
    ) -> Queryable:
        """Apply ``filters`` (or filters parsed from ``source``) to ``query``.

        Args:
            query: Queryable over this compiler's entity
            filters: field -> FilterSpec / spec dict / bare value
            options: Call-site configuration overrides
            source: Key/value source used when ``filters`` is empty

        Returns:
            The same queryable, with predicates added
        """
        if not self.settings.ENABLED:
            return query
        specs = self.resolve_filters(filters, source)
        if not specs:
            return query
        specs = self._limit(specs)
        config = self.resolve_config(options)
        applied = self.apply_filters(query, specs, config)
        self.logger.debug(
            "Applied %d of %d filters to %s (config=%s)", applied, len(specs), self.entity.__name__, config
        )
        return query

    def apply_filters(self, query: Queryable, specs: Mapping[str, FilterSpec], config: FilterConfig) -> int:
        """Apply every spec; returns how many added a predicate."""
        return sum(1 for spec in specs.values() if self.apply_single(query, spec, config))

    def apply_single(self, query: Queryable, spec: FilterSpec, config: FilterConfig) -> bool:
        if spec.is_empty:
            return False
        if spec.is_relation_path and config.deep:
            return self.apply_relation(query, spec, config)
        return self.apply_local(query, spec, config)

    # ------------------------------------------------------------------
    # Local and relation paths
    # ------------------------------------------------------------------
    def apply_local(self, query: Queryable, spec: FilterSpec, config: FilterConfig) -> bool:
        if spec.field not in self.fields:
            self.logger.debug("Dropping filter on non-filterable field %s.%s", self.entity.__name__, spec.field)
            return False
        return self._apply_predicate(query, qualify(self.entity.get_table(), spec.field), spec, config)

    def apply_relation(self, query: Queryable, spec: FilterSpec, config: FilterConfig) -> bool:
        name, rest = spec.split_relation()
        relation = self.relations.get(name)
        if relation is None or not rest or not relation.allows(rest):
            self.logger.debug("Dropping filter on non-filterable relation path %s", spec.field)
            return False

        depth = min(config.max_relation_depth, relation.max_depth)
        if depth <= 0:
            self.logger.debug("Dropping filter %s: relation depth exhausted", spec.field)
            return False

        nested_spec = spec.with_field(rest)
        nested_config = config.descend(depth)
        applied = []

        def scope(sub: Queryable) -> None:
            if is_filterable(sub.entity):
                compiler = FilterCompiler(sub.entity, settings=self.settings)
                applied.append(compiler.apply_single(sub, nested_spec, nested_config))
            else:
                applied.append(self.apply_fallback(sub, nested_spec, nested_config))

        query.where_relation(name, scope)
        return any(applied)

    def apply_fallback(self, query: Queryable, spec: FilterSpec, config: FilterConfig) -> bool:
        """Single-level predicate for related entities that are not Filterable.

        No allow-list applies here; nested paths cannot be resolved and are dropped.
        """
        if spec.is_relation_path:
            self.logger.debug("Dropping nested path %s on non-filterable entity", spec.field)
            return False
        return self._apply_predicate(query, qualify(query.table, spec.field), spec, config)

    def _apply_predicate(self, query: Queryable, column: str, spec: FilterSpec, config: FilterConfig) -> bool:
        value = coerce_value(spec.value, spec.type, spec.operator, self.settings.ARRAY_DELIMITER)
        applied = dispatch_operator(query, spec.operator, column, value, config, self._handlers)
        if applied and self.settings.DEBUG:
            self.logger.message("Filter %s %s %r", column, spec.operator, value)
        return applied

    def _limit(self, specs: Dict[str, FilterSpec]) -> Dict[str, FilterSpec]:
        limit = self.settings.MAX_FILTERS
        if limit <= 0 or len(specs) <= limit:
            return specs
        self.logger.warning("Received %d filters, only the first %d are applied", len(specs), limit)
        return dict(list(specs.items())[:limit])

    # ------------------------------------------------------------------
    # Opt-in strict validation
    # ------------------------------------------------------------------
    def validate_relations(self, filters: Optional[Filters]) -> None:
        """Raise ``RelationError`` for relation paths the default path would drop.

        Only used by callers that explicitly ask for strict relation checks.
        """
        for spec in normalize_filters(filters).values():
            if not spec.is_relation_path:
                continue
            name, rest = spec.split_relation()
            relation = self.relations.get(name)
            if relation is None:
                raise RelationError.for_relation(name, "relation is not filterable")
            if not rest or not relation.allows(rest):
                raise RelationError.for_relation(name, f"field [{rest}] is not filterable")
