"""
Pytest fixtures for entity conformance runs
Every test starts from a freshly reset database
"""

import pytest
import pytest_asyncio
from faker import Faker

from entity_api.conformance import ConformanceChecker, CreationParameterProvider
from entity_api.conformance.fixtures import reset_environment
from entity_api.database.connection import close_database, init_database

from .config import get_config


@pytest.fixture(scope="session")
def test_config():
    return get_config()


@pytest_asyncio.fixture
async def conformance_env(test_config):
    """Initialized database with truncated tables and the conformance datasets"""
    pool = await init_database(test_config.database_url)
    loaded = await reset_environment(pool)
    print(f"   🗄️  {pool.dialect} database reset, datasets: {', '.join(loaded)}")
    yield pool
    await close_database()


@pytest.fixture
def provider(test_config):
    if test_config.faker_seed is not None:
        Faker.seed(test_config.faker_seed)
    return CreationParameterProvider()


@pytest.fixture
def checker(provider):
    return ConformanceChecker(provider)
