"""Test config and shared fixtures."""
import pytest
from typing import Generator

from dade.repository import DadeContext, UnitOfWorkFactory
from entities import Sample, SchemaContext


@pytest.fixture
def db_url(tmp_path) -> str:
    """File-backed SQLite so separate connections see committed data."""
    return f"sqlite:///{tmp_path / 'file.db'}"


@pytest.fixture
def factory(db_url: str) -> Generator[UnitOfWorkFactory, None, None]:
    """Create unit of work factory."""
    factory = UnitOfWorkFactory(db_url)
    yield factory
    factory.dispose()


@pytest.fixture
def schema(factory: UnitOfWorkFactory) -> UnitOfWorkFactory:
    """Factory whose database already has the Test table."""
    SchemaContext(factory).create_db()
    return factory


@pytest.fixture
def context(schema: UnitOfWorkFactory) -> Generator[DadeContext, None, None]:
    """Context on a database with the Test table; disposed after the test."""
    with DadeContext(schema) as ctx:
        yield ctx


@pytest.fixture
def samples(context: DadeContext):
    """DadeSet over Test sharing the context transaction."""
    return context.set(Sample)
