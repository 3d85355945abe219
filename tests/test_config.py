"""Tests for settings and filter configuration resolution."""

import pytest

from smartfilter.config import BUILTIN_DEFAULTS, global_defaults, resolve_filter_config, validate_options
from smartfilter.exceptions import InvalidConfigurationError
from smartfilter.settings import SmartFilterSettings


class TestSettings:
    def test_defaults(self, filter_settings):
        assert filter_settings.ENABLED is True
        assert filter_settings.RELATION_MAX_DEPTH == 3
        assert filter_settings.MAX_FILTERS == 20
        assert "password" in filter_settings.EXCLUDED_FIELDS
        assert filter_settings.DEFAULT_OPERATORS["string"] == "like"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SMART_FILTER_ENABLED", "false")
        monkeypatch.setenv("SMART_FILTER_MAX_FILTERS", "5")
        settings = SmartFilterSettings(_env_file=None)
        assert settings.ENABLED is False
        assert settings.MAX_FILTERS == 5

    def test_global_defaults(self, filter_settings):
        assert global_defaults(filter_settings) == BUILTIN_DEFAULTS


class TestResolveFilterConfig:
    def test_builtin(self, filter_settings):
        config = resolve_filter_config(settings=filter_settings)
        assert config.model_dump() == BUILTIN_DEFAULTS

    def test_precedence(self):
        settings = SmartFilterSettings(_env_file=None, DEFAULT_CASE_SENSITIVE=True, DEFAULT_MAX_RELATION_DEPTH=1)
        config = resolve_filter_config({"max_relation_depth": 2, "deep": False}, {"deep": True}, settings)
        assert config.case_sensitive is True
        assert config.max_relation_depth == 2
        assert config.deep is True

    def test_invalid_value_falls_back_to_lower_layer(self, filter_settings):
        config = resolve_filter_config({"max_relation_depth": 1}, {"max_relation_depth": "deep"}, filter_settings)
        assert config.max_relation_depth == 1

    def test_unknown_keys_ignored(self, filter_settings):
        config = resolve_filter_config(options={"colour": "red"}, settings=filter_settings)
        assert config.model_dump() == BUILTIN_DEFAULTS

    def test_depth_clamped_to_global_cap(self, filter_settings):
        assert resolve_filter_config(options={"max_relation_depth": 50}, settings=filter_settings).max_relation_depth == 3

    def test_cap_from_settings(self):
        settings = SmartFilterSettings(_env_file=None, RELATION_MAX_DEPTH=1)
        assert resolve_filter_config(settings=settings).max_relation_depth == 1


class TestValidateOptions:
    def test_known_keys(self):
        validate_options({"deep": False, "strict_mode": True})
        validate_options(None)

    def test_unknown_key(self):
        with pytest.raises(InvalidConfigurationError, match=r"\[max_depth\]"):
            validate_options({"max_depth": 1})
