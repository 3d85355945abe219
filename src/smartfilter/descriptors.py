"""Filterable entity contract and descriptor resolution.

An entity opts into filtering by subclassing ``Filterable``. It may override
``filterable_fields`` / ``filterable_relations`` / ``filter_config`` to
declare its allow-lists explicitly; otherwise they are derived from the
schema through the entity's ``SchemaIntrospector``.

``Filterable`` is a plain mixin (not an ``ABC``) so it composes with ORM
declarative bases that bring their own metaclass.
"""

from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .constants import OperatorTag
from .queryable.base import SchemaIntrospector
from .schema import FieldDescriptor, RelationDescriptor
from .settings import SmartFilterSettings
from .settings import settings as default_settings
from .utils import filterable_columns, relation_name_for

__all__ = (
    "Filterable",
    "is_filterable",
    "normalize_field_descriptors",
    "normalize_relation_descriptors",
    "schema_field_descriptors",
    "schema_relation_descriptors",
    "related_entity_for",
)

RawDeclarations = Union[Mapping[str, Any], Iterable[str]]


def is_filterable(entity: Any) -> bool:
    """True when ``entity`` (class or instance) implements ``Filterable``."""
    if isinstance(entity, type):
        return issubclass(entity, Filterable)
    return isinstance(entity, Filterable)


def normalize_field_descriptors(raw: RawDeclarations) -> Dict[str, FieldDescriptor]:
    """``{"name": {"type": ..., "operator": ...}}`` or ``["name", ...]`` -> descriptors."""
    if isinstance(raw, Mapping):
        return {str(name): FieldDescriptor.from_any(str(name), cfg) for name, cfg in raw.items()}
    return {str(name): FieldDescriptor(name=str(name)) for name in raw}


def normalize_relation_descriptors(raw: RawDeclarations) -> Dict[str, RelationDescriptor]:
    if isinstance(raw, Mapping):
        return {str(name): RelationDescriptor.from_any(str(name), cfg) for name, cfg in raw.items()}
    return {str(name): RelationDescriptor(name=str(name)) for name in raw}


def schema_field_descriptors(
    table: str,
    introspector: SchemaIntrospector,
    settings: Optional[SmartFilterSettings] = None,
) -> Dict[str, FieldDescriptor]:
    """Filterable fields derived from the table's columns.

    Excluded columns and columns with sensitive suffixes are left out. The
    default operator per field comes from ``DEFAULT_OPERATORS``.
    """
    settings = settings or default_settings
    fields: Dict[str, FieldDescriptor] = {}
    for column in filterable_columns(introspector.list_columns(table), settings.EXCLUDED_FIELDS):
        type_tag = introspector.column_type(table, column)
        operator = OperatorTag.parse(settings.DEFAULT_OPERATORS.get(type_tag.value)) or OperatorTag.EQ
        fields[column] = FieldDescriptor(name=column, type=type_tag, default_operator=operator)
    return fields


def _entity_fields(
    entity: Any, introspector: SchemaIntrospector, settings: SmartFilterSettings
) -> Dict[str, FieldDescriptor]:
    if is_filterable(entity):
        return entity.get_filterable_fields(settings)
    return schema_field_descriptors(introspector.entity_table(entity), introspector, settings)


def schema_relation_descriptors(
    entity: Any,
    table: str,
    introspector: SchemaIntrospector,
    settings: Optional[SmartFilterSettings] = None,
) -> Dict[str, RelationDescriptor]:
    """Relations auto-discovered from foreign-key shaped columns (``*_id``).

    A column only yields a relation when the entity really has a relation of
    that name; its allowed fields are the related entity's filterable fields.
    """
    settings = settings or default_settings
    relations: Dict[str, RelationDescriptor] = {}
    if not settings.RELATION_AUTO_DISCOVER:
        return relations
    for column in introspector.list_columns(table):
        name = relation_name_for(column)
        if not name or name in settings.EXCLUDED_RELATIONS:
            continue
        related = introspector.related_entity(entity, name)
        if related is None:
            continue
        fields = _entity_fields(related, introspector, settings)
        relations[name] = RelationDescriptor(
            name=name, allowed_fields=frozenset(fields), max_depth=1, related=related
        )
    return relations


def related_entity_for(entity: Any, relation: RelationDescriptor) -> Optional[Any]:
    """Entity on the far side of ``relation``; the declaration wins over discovery."""
    if relation.related is not None:
        return relation.related
    if is_filterable(entity):
        return entity.get_schema_introspector().related_entity(entity, relation.name)
    return None


class Filterable:
    """Capability contract for entities that accept smart filters.

    Subclasses must provide ``get_table`` and ``get_schema_introspector``.
    """

    @classmethod
    def get_table(cls) -> str:
        """Table backing the entity, used to qualify local columns.

        Must be overridden by every Filterable entity.
        """
        raise NotImplementedError(f"{cls.__name__} must implement get_table()")

    @classmethod
    def get_schema_introspector(cls) -> SchemaIntrospector:
        """Introspector used to derive fields and relations from the schema.

        Must be overridden by every Filterable entity.
        """
        raise NotImplementedError(f"{cls.__name__} must implement get_schema_introspector()")

    # Declarations: return None to fall back to schema derivation

    @classmethod
    def filterable_fields(cls) -> Optional[RawDeclarations]:
        return None

    @classmethod
    def filterable_relations(cls) -> Optional[RawDeclarations]:
        return None

    @classmethod
    def filter_config(cls) -> Optional[Mapping[str, Any]]:
        return None

    # Resolved accessors

    @classmethod
    def get_filterable_fields(cls, settings: Optional[SmartFilterSettings] = None) -> Dict[str, FieldDescriptor]:
        custom = cls.filterable_fields()
        if custom is not None:
            return normalize_field_descriptors(custom)
        return schema_field_descriptors(cls.get_table(), cls.get_schema_introspector(), settings)

    @classmethod
    def get_filterable_relations(
        cls, settings: Optional[SmartFilterSettings] = None
    ) -> Dict[str, RelationDescriptor]:
        custom = cls.filterable_relations()
        if custom is not None:
            return normalize_relation_descriptors(custom)
        return schema_relation_descriptors(cls, cls.get_table(), cls.get_schema_introspector(), settings)

    @classmethod
    def get_filter_config(cls) -> Dict[str, Any]:
        return dict(cls.filter_config() or {})

    @classmethod
    def apply_smart_filters(
        cls,
        query: Any,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        source: Optional[Mapping[str, Any]] = None,
        settings: Optional[SmartFilterSettings] = None,
    ) -> Any:
        """Apply filters to ``query`` using this entity's declarations."""
        from .compiler import FilterCompiler

        return FilterCompiler(cls, settings=settings).apply(query, filters, options, source=source)
