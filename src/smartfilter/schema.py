"""Pydantic schemas for filter specifications, configuration and descriptors."""

from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_OPERATOR, DEFAULT_TYPE, OperatorTag, TypeTag
from .utils import is_blank


class FilterSpec(BaseModel):
    """One field/operator/type/value condition.

    ``operator`` and ``type`` keep the raw names so an unknown operator
    survives normalization; ``operator_tag`` / ``type_tag`` resolve them
    (``None`` when unknown).
    """

    field: str = Field(..., description="Column name or dotted relation path.")
    value: Any = Field(None, description="Raw value, coerced before use.")
    operator: str = Field(DEFAULT_OPERATOR, description="Operator tag.")
    type: str = Field(DEFAULT_TYPE, description="Semantic type tag.")

    @field_validator("operator", "type", mode="before")
    @classmethod
    def _tag_to_str(cls, v: Any, info) -> str:
        if v is None or v == "":
            return DEFAULT_OPERATOR if info.field_name == "operator" else DEFAULT_TYPE
        if isinstance(v, Enum):
            return v.value
        return str(v)

    @property
    def operator_tag(self) -> Optional[OperatorTag]:
        return OperatorTag.parse(self.operator)

    @property
    def type_tag(self) -> Optional[TypeTag]:
        return TypeTag.parse(self.type)

    @property
    def is_empty(self) -> bool:
        """Absent values (``None`` or ``""``) never produce a predicate."""
        return is_blank(self.value)

    @property
    def is_relation_path(self) -> bool:
        return "." in self.field

    def split_relation(self) -> tuple:
        """Split ``relation.rest`` on the first dot."""
        head, _, rest = self.field.partition(".")
        return head, rest

    def with_field(self, field: str) -> "FilterSpec":
        return self.model_copy(update={"field": field})

    @classmethod
    def from_any(cls, field: str, raw: Any) -> "FilterSpec":
        """Build a spec from a ``FilterSpec``, a mapping or a bare value.

        Examples:
            FilterSpec.from_any("age", {"value": 30, "operator": ">", "type": "integer"})
            FilterSpec.from_any("status", "published")
        """
        if isinstance(raw, FilterSpec):
            return raw if raw.field == field else raw.with_field(field)
        if isinstance(raw, Mapping):
            return cls(
                field=field,
                value=raw.get("value"),
                operator=raw.get("operator"),
                type=raw.get("type"),
            )
        return cls(field=field, value=raw)


class FilterConfig(BaseModel):
    """Resolved, immutable configuration for one filter application."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    deep: bool = True
    max_relation_depth: int = 2
    case_sensitive: bool = False
    strict_mode: bool = False

    @field_validator("max_relation_depth")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        return max(0, v)

    def descend(self, depth: Optional[int] = None) -> "FilterConfig":
        """Config for the next relation hop: remaining depth minus one."""
        current = self.max_relation_depth if depth is None else depth
        return self.model_copy(update={"max_relation_depth": max(0, current - 1)})


class FieldDescriptor(BaseModel):
    """A filterable column declared by an entity."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeTag = TypeTag.STRING
    default_operator: OperatorTag = OperatorTag.EQ

    @classmethod
    def from_any(cls, name: str, raw: Any = None) -> "FieldDescriptor":
        """Accept a descriptor, ``{"type": ..., "operator": ...}`` or a type name."""
        if isinstance(raw, FieldDescriptor):
            return raw
        if isinstance(raw, Mapping):
            type_tag = TypeTag.parse(raw.get("type")) or TypeTag.STRING
            operator = OperatorTag.parse(raw.get("operator")) or OperatorTag.EQ
            return cls(name=name, type=type_tag, default_operator=operator)
        if raw is not None:
            return cls(name=name, type=TypeTag.parse(raw) or TypeTag.STRING)
        return cls(name=name)


class RelationDescriptor(BaseModel):
    """A filterable relation declared by an entity.

    An empty ``allowed_fields`` defers field validation to the related
    entity's own allow-list.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    allowed_fields: FrozenSet[str] = frozenset()
    max_depth: int = 1
    related: Optional[Any] = Field(None, description="Related entity, when the backend cannot discover it.")

    def allows(self, field: str) -> bool:
        if not self.allowed_fields:
            return True
        return field.partition(".")[0] in self.allowed_fields

    @classmethod
    def from_any(cls, name: str, raw: Any = None) -> "RelationDescriptor":
        """Accept a descriptor or ``{"fields": [...], "max_depth": n}``."""
        if isinstance(raw, RelationDescriptor):
            return raw
        if not isinstance(raw, Mapping):
            return cls(name=name)
        fields = raw.get("fields") or ()
        if isinstance(fields, Mapping):
            fields = fields.keys()
        max_depth = raw.get("max_depth")
        return cls(
            name=name,
            allowed_fields=frozenset(str(f) for f in fields),
            max_depth=1 if max_depth is None else max(0, int(max_depth)),
            related=raw.get("related"),
        )
