"""
Public entry point for applying smart filters.

``SmartFilterManager`` checks the Filterable capability of the queried
entity, then hands off to a ``FilterCompiler``. It also parses filters from
key/value sources and exposes the settings it was built with.
"""

from typing import Any, Dict, Mapping, Optional

from .compiler import FilterCompiler
from .config import validate_options
from .descriptors import is_filterable
from .exceptions import InvalidModelError
from .logger import Logger
from .normalizer import parse_from_source
from .queryable.base import Queryable
from .schema import FilterSpec
from .settings import SmartFilterSettings
from .settings import settings as default_settings
from .types import Filters, Options, Source

__all__ = ("SmartFilterManager",)


class SmartFilterManager:
    """High-level facade over the filter compiler.

    Attributes:
        settings: Settings threaded into every compiler this manager builds
    """

    def __init__(self, settings: Optional[SmartFilterSettings] = None) -> None:
        self.settings = settings or default_settings
        self.logger = Logger(self.__class__.__name__, settings=self.settings)

    def compiler_for(self, entity: Any) -> FilterCompiler:
        """Compiler for ``entity``.

        Raises:
            InvalidModelError: If the entity does not implement Filterable
        """
        if not is_filterable(entity):
            error = InvalidModelError.for_model(entity)
            self.logger.error("%s", error)
            raise error
        return FilterCompiler(entity if isinstance(entity, type) else type(entity), settings=self.settings)

    def apply(
        self,
        query: Queryable,
        filters: Optional[Filters] = None,
        options: Optional[Options] = None,
        source: Optional[Source] = None,
    ) -> Queryable:
        """Apply filters to ``query``.

        Args:
            query: Queryable over a Filterable entity
            filters: field -> FilterSpec / spec dict / bare value
            options: Call-site configuration overrides
            source: Key/value source parsed against the entity's fields when
                ``filters`` is empty

        Returns:
            The same queryable with predicates added

        Raises:
            InvalidModelError: If the queried entity does not implement Filterable
        """
        compiler = self.compiler_for(query.entity)
        return compiler.apply(query, filters, options, source=source)

    def parse_from_source(
        self,
        allowed_filters: Mapping[str, Mapping[str, Any]],
        source: Mapping[str, Any],
    ) -> Dict[str, FilterSpec]:
        """Build filter specs for the allow-listed fields present in ``source``."""
        return parse_from_source(
            allowed_filters,
            source,
            prefix=self.settings.REQUEST_PREFIX,
            delimiter=self.settings.ARRAY_DELIMITER,
        )

    def config(self, key: Optional[str] = None, default: Any = None) -> Any:
        """Return all settings as a dict, or one setting (case-insensitive key)."""
        if key is None:
            return self.settings.model_dump()
        return getattr(self.settings, key.upper(), default)

    def is_enabled(self) -> bool:
        return bool(self.settings.ENABLED)

    # Opt-in strict validation

    def validate_options(self, options: Optional[Options]) -> None:
        validate_options(options)

    def validate_relations(self, entity: Any, filters: Optional[Filters]) -> None:
        self.compiler_for(entity).validate_relations(filters)
