"""Pytest configuration and fixtures for smartfilter tests."""

from datetime import datetime
from typing import List

import pytest
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from smartfilter.manager import SmartFilterManager
from smartfilter.queryable.sqlalchemy import SQLAlchemyQueryable
from smartfilter.settings import SmartFilterSettings
from tests.models import Base, Category, Comment, Post, User

# Load environment variables
load_dotenv()


@pytest.fixture
def filter_settings():
    """Settings isolated from the environment and any .env file."""
    return SmartFilterSettings(_env_file=None)


@pytest.fixture
def manager(filter_settings):
    return SmartFilterManager(settings=filter_settings)


@pytest.fixture
def engine():
    """In-memory SQLite engine with the test schema."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Session seeded with three users, three posts, categories and comments."""
    with Session(engine) as session:
        john = User(name="John Doe", email="john@example.com", age=30, is_active=True, salary=50000.0)
        jane = User(name="Jane Smith", email="jane@example.com", age=25, is_active=False, salary=60000.0)
        bob = User(name="Bob Johnson", email="bob@example.com", age=35, is_active=True, salary=70000.0)
        tech = Category(name="Tech", slug="tech", is_active=True)
        life = Category(name="Life", slug="life", is_active=False)

        first = Post(
            title="First Post",
            content="This is the first post content",
            status="published",
            views=100,
            published_at=datetime(2023, 1, 1, 10, 0, 0),
            user=john,
            category=tech,
        )
        second = Post(
            title="Second Post",
            content="This is the second post content",
            status="draft",
            views=50,
            published_at=datetime(2023, 2, 1, 10, 0, 0),
            user=jane,
            category=life,
        )
        third = Post(
            title="Third Post",
            content="This is the third post about programming",
            status="published",
            views=200,
            published_at=datetime(2023, 3, 1, 10, 0, 0),
            user=bob,
            category=tech,
        )
        session.add_all([john, jane, bob, tech, life, first, second, third])
        session.add_all(
            [
                Comment(body="Great read", likes=5, post=first),
                Comment(body="Needs more detail", likes=1, post=third),
            ]
        )
        session.commit()
        yield session


@pytest.fixture
def fetch(session):
    """Run a queryable and return the matching rows."""

    def run(query: SQLAlchemyQueryable) -> List:
        return list(session.scalars(query.statement).all())

    return run


@pytest.fixture
def names(fetch):
    """Sorted ``name`` (users) or ``title`` (posts) of the matching rows."""

    def run(query: SQLAlchemyQueryable) -> List[str]:
        rows = fetch(query)
        return sorted(getattr(row, "name", None) or getattr(row, "title") for row in rows)

    return run
