import pytest

from formforge import db
from formforge.registry import DefinitionRegistry
from formforge.store import ConfigVersionStore


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite database per test"""
    db.init_db(str(tmp_path / "formforge.db"))
    db.create_tables()
    yield db.database
    db.close_db()


@pytest.fixture
def registry(database):
    return DefinitionRegistry()


@pytest.fixture
def store(registry):
    return ConfigVersionStore(registry, max_retries=3, retry_delay=0)


@pytest.fixture
def brand(registry):
    return registry.create_brand("acme")


@pytest.fixture
def definition(registry, brand):
    return registry.create_definition(brand.id, "checkout")
