"""Tests for filter normalization."""

from smartfilter.normalizer import allow_list_from_fields, normalize_filters, parse_from_source
from smartfilter.schema import FieldDescriptor


class TestNormalizeFilters:
    def test_empty(self):
        assert normalize_filters(None) == {}
        assert normalize_filters({}) == {}

    def test_defaults_applied(self):
        specs = normalize_filters({"name": {"value": "Ann"}, "status": "draft"})
        assert list(specs) == ["name", "status"]
        assert specs["name"].operator == "="
        assert specs["status"].type == "string"
        assert specs["status"].value == "draft"

    def test_values_not_coerced(self):
        specs = normalize_filters({"age": {"value": "30", "type": "integer"}})
        assert specs["age"].value == "30"


class TestParseFromSource:
    allowed = {
        "name": {"operator": "like", "type": "string"},
        "age": {"operator": "=", "type": "integer"},
        "active": {"type": "boolean"},
        "tags": {"operator": "in", "type": "array"},
    }

    def test_present_fields_only(self):
        specs = parse_from_source(self.allowed, {"name": "Ann", "other": "x"})
        assert list(specs) == ["name"]
        assert specs["name"].operator == "like"
        # wrapping happens at compile time
        assert specs["name"].value == "Ann"

    def test_blank_values_skipped(self):
        assert parse_from_source(self.allowed, {"name": "", "age": None}) == {}

    def test_values_coerced(self):
        specs = parse_from_source(self.allowed, {"age": "30", "active": "0", "tags": "a,b"})
        assert specs["age"].value == 30
        assert specs["active"].value is False
        assert specs["active"].operator == "="
        assert specs["tags"].value == ["a", "b"]

    def test_prefix_and_delimiter(self):
        specs = parse_from_source(self.allowed, {"f_tags": "a|b", "tags": "z"}, prefix="f_", delimiter="|")
        assert specs["tags"].value == ["a", "b"]

    def test_missing_config_defaults(self):
        specs = parse_from_source({"status": None}, {"status": "draft"})
        assert specs["status"].operator == "="
        assert specs["status"].type == "string"


def test_allow_list_from_fields():
    fields = {"views": FieldDescriptor.from_any("views", {"type": "integer", "operator": ">"})}
    assert allow_list_from_fields(fields) == {"views": {"operator": ">", "type": "integer"}}
