"""
Pytest fixtures for unit tests - each test gets its own in-memory database
"""

import pytest
import pytest_asyncio
from faker import Faker

from entity_api.conformance import CreationParameterProvider
from entity_api.database.connection import close_database, init_database


@pytest_asyncio.fixture
async def database():
    """Empty in-memory SQLite database with every entity table created"""
    pool = await init_database("sqlite:///:memory:")
    yield pool
    await close_database()


@pytest.fixture
def fake():
    Faker.seed(4321)
    return Faker()


@pytest.fixture
def provider(fake):
    return CreationParameterProvider(fake)
