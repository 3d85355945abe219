"""Filter configuration resolution.

Layers merge in increasing precedence: built-in defaults, global settings,
entity-level overrides, call-site options. Resolution never raises: unknown
keys are ignored and a value that fails validation falls back to the value
of the layer below it.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from .constants import CONFIG_KEYS
from .exceptions import InvalidConfigurationError
from .logger import Logger
from .schema import FilterConfig
from .settings import SmartFilterSettings
from .settings import settings as default_settings

__all__ = ("BUILTIN_DEFAULTS", "global_defaults", "resolve_filter_config", "validate_options")

logger = Logger(__name__)

BUILTIN_DEFAULTS: Dict[str, Any] = {
    "deep": True,
    "max_relation_depth": 2,
    "case_sensitive": False,
    "strict_mode": False,
}


def global_defaults(settings: SmartFilterSettings) -> Dict[str, Any]:
    """Default filter configuration taken from settings."""
    return {
        "deep": settings.DEFAULT_DEEP,
        "max_relation_depth": settings.DEFAULT_MAX_RELATION_DEPTH,
        "case_sensitive": settings.DEFAULT_CASE_SENSITIVE,
        "strict_mode": settings.DEFAULT_STRICT_MODE,
    }


def _merge_layer(merged: Dict[str, Any], layer: Optional[Mapping[str, Any]]) -> None:
    if not layer:
        return
    for key in CONFIG_KEYS:
        if key not in layer:
            continue
        candidate = dict(merged, **{key: layer[key]})
        try:
            FilterConfig.model_validate(candidate)
        except ValidationError:
            logger.warning("Ignoring invalid filter option %s=%r", key, layer[key])
            continue
        merged[key] = layer[key]


def resolve_filter_config(
    entity_config: Optional[Mapping[str, Any]] = None,
    options: Optional[Mapping[str, Any]] = None,
    settings: Optional[SmartFilterSettings] = None,
) -> FilterConfig:
    """Merge all configuration layers into a ``FilterConfig``.

    Args:
        entity_config: Entity-level overrides (``filter_config()``)
        options: Call-site options
        settings: Settings supplying global defaults and the depth cap

    Returns:
        Fully populated, immutable FilterConfig
    """
    settings = settings or default_settings
    merged = dict(BUILTIN_DEFAULTS)
    for layer in (global_defaults(settings), entity_config, options):
        _merge_layer(merged, layer)

    config = FilterConfig.model_validate(merged)
    cap = max(0, settings.RELATION_MAX_DEPTH)
    if config.max_relation_depth > cap:
        config = config.model_copy(update={"max_relation_depth": cap})
    return config


def validate_options(options: Optional[Mapping[str, Any]]) -> None:
    """Opt-in strict check: reject option keys FilterConfig does not know.

    Raises:
        InvalidConfigurationError: On the first unknown key
    """
    for key in options or {}:
        if key not in CONFIG_KEYS:
            raise InvalidConfigurationError.for_key(key)
