"""Tests for Filterable descriptors and schema derivation."""

import pytest

from smartfilter.constants import OperatorTag, TypeTag
from smartfilter.descriptors import (
    Filterable,
    is_filterable,
    normalize_field_descriptors,
    normalize_relation_descriptors,
    related_entity_for,
    schema_field_descriptors,
    schema_relation_descriptors,
)
from smartfilter.queryable.sqlalchemy import SQLAlchemyIntrospector
from smartfilter.schema import RelationDescriptor
from smartfilter.settings import SmartFilterSettings
from tests.entities import SCHEMA, Article, Author, Node, Plain, Team
from tests.models import Base, Category, Comment, Post, User


class TestIsFilterable:
    def test_classes_and_instances(self):
        assert is_filterable(Article)
        assert is_filterable(Article())
        assert is_filterable(User)
        assert not is_filterable(Plain)
        assert not is_filterable(Category)
        assert not is_filterable("users")


class TestNormalize:
    def test_field_list(self):
        fields = normalize_field_descriptors(["title", "body"])
        assert list(fields) == ["title", "body"]
        assert fields["title"].type is TypeTag.STRING
        assert fields["title"].default_operator is OperatorTag.EQ

    def test_field_mapping(self):
        fields = normalize_field_descriptors({"views": {"type": "integer", "operator": ">="}})
        assert fields["views"].default_operator is OperatorTag.GTE

    def test_relation_list(self):
        relations = normalize_relation_descriptors(["author"])
        assert relations["author"] == RelationDescriptor(name="author")


class TestSchemaDerivation:
    def test_fields_from_columns(self, filter_settings):
        fields = schema_field_descriptors("authors", SCHEMA, filter_settings)
        assert list(fields) == ["name", "email", "age", "rating", "is_active", "team_id"]
        assert fields["name"].default_operator is OperatorTag.LIKE
        assert fields["age"].type is TypeTag.INTEGER
        assert fields["rating"].type is TypeTag.FLOAT
        assert fields["is_active"].type is TypeTag.BOOLEAN

    def test_excluded_fields_from_settings(self):
        settings = SmartFilterSettings(_env_file=None, EXCLUDED_FIELDS=["email"])
        fields = schema_field_descriptors("authors", SCHEMA, settings)
        assert "email" not in fields
        assert "id" in fields
        assert "api_token" not in fields

    def test_unknown_table(self, filter_settings):
        assert schema_field_descriptors("missing", SCHEMA, filter_settings) == {}

    def test_relations_from_foreign_keys(self, filter_settings):
        relations = schema_relation_descriptors(Author, "authors", SCHEMA, filter_settings)
        assert list(relations) == ["team"]
        team = relations["team"]
        assert team.allowed_fields == frozenset({"name"})
        assert team.max_depth == 1
        assert team.related is Team

    def test_unresolvable_fk_not_a_relation(self, filter_settings):
        # articles has reviewer_id but no discoverable reviewer relation
        relations = schema_relation_descriptors(Article, "articles", SCHEMA, filter_settings)
        assert "reviewer" not in relations
        assert relations["author"].related is Author

    def test_excluded_relations(self):
        settings = SmartFilterSettings(_env_file=None, EXCLUDED_RELATIONS=["team"])
        assert schema_relation_descriptors(Author, "authors", SCHEMA, settings) == {}

    def test_auto_discover_disabled(self):
        settings = SmartFilterSettings(_env_file=None, RELATION_AUTO_DISCOVER=False)
        assert Author.get_filterable_relations(settings) == {}


class TestFilterableContract:
    def test_required_methods_must_be_overridden(self):
        class Bare(Filterable):
            pass

        with pytest.raises(NotImplementedError, match=r"Bare must implement get_table\(\)"):
            Bare.get_table()
        with pytest.raises(NotImplementedError, match=r"Bare must implement get_schema_introspector\(\)"):
            Bare.get_schema_introspector()

    def test_optional_declarations_default_to_schema(self):
        assert Filterable.filterable_fields() is None
        assert Filterable.filterable_relations() is None
        assert Filterable.filter_config() is None


class TestFilterableAccessors:
    def test_declared_fields_win(self):
        assert list(Article.get_filterable_fields()) == ["title", "views", "published_at"]

    def test_filter_config(self):
        assert Article.get_filter_config() == {}
        assert User.get_filter_config() == {"strict_mode": True}

    def test_related_entity_for(self):
        relations = Article.get_filterable_relations()
        assert related_entity_for(Article, relations["reviewer"]) is Author
        assert related_entity_for(Article, relations["author"]) is Author
        assert related_entity_for(Node, RelationDescriptor(name="parent")) is Node
        assert related_entity_for(Plain, RelationDescriptor(name="x")) is None


class TestSQLAlchemyIntrospector:
    def test_columns_and_types(self):
        introspector = SQLAlchemyIntrospector(Base.metadata)
        assert "title" in introspector.list_columns("posts")
        assert introspector.list_columns("missing") == []
        assert introspector.column_type("posts", "views") is TypeTag.INTEGER
        assert introspector.column_type("posts", "published_at") is TypeTag.DATE
        assert introspector.column_type("users", "salary") is TypeTag.FLOAT
        assert introspector.column_type("users", "is_active") is TypeTag.BOOLEAN
        assert introspector.column_type("posts", "title") is TypeTag.STRING
        assert introspector.column_type("posts", "nope") is TypeTag.STRING

    def test_relations(self):
        introspector = SQLAlchemyIntrospector(Base.metadata)
        assert introspector.entity_table(Post) == "posts"
        assert introspector.related_entity(Post, "category") is Category
        assert introspector.related_entity(Post, "nothing") is None

    def test_derived_model(self):
        assert list(Comment.get_filterable_fields()) == ["body", "likes", "post_id"]
        relations = Comment.get_filterable_relations()
        assert list(relations) == ["post"]
        assert "title" in relations["post"].allowed_fields
