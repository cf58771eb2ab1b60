#!/usr/bin/env python3
"""
Shared pytest configuration and fixtures.

The environment is set before anything from inkbook is imported so the cached
settings (and the module-level app in inkbook.main) pick up the test values.
"""

import os
from datetime import date
from zoneinfo import ZoneInfo

os.environ.update({
    'APP_ENV': 'testing',
    'DATABASE_URL': 'sqlite+aiosqlite:///:memory:',
    'ADMIN_API_KEY': 'test_admin_key',
    'AUTO_CREATE_TABLES': 'true',
    'SHOP_TIMEZONE': 'America/Edmonton',
})

import pytest
import pytest_asyncio

from inkbook.core.business import ShopHours
from inkbook.crud.appointment import SqlAppointmentRepository
from inkbook.db.base import init_db
from inkbook.db.session import Database

from tests.mocks.repositories import ArtistStub, FakeAppointmentRepository

TZ = ZoneInfo("America/Edmonton")
# A summer Tuesday: no DST transition on the day
DAY = date(2026, 6, 16)
ADMIN_HEADERS = {"X-API-Key": "test_admin_key"}


@pytest.fixture
def hours():
    """Default shop hours: 10:00-20:00 on a 30 minute grid."""
    return ShopHours(tz=TZ)


@pytest.fixture
def artist_a():
    return ArtistStub(id=1, first_name="Ada", last_name="Lines")


@pytest.fixture
def artist_b():
    return ArtistStub(id=2, first_name="Bo", last_name="Shade")


@pytest.fixture
def roster(artist_a, artist_b):
    return [artist_a, artist_b]


@pytest.fixture
def fake_repo():
    return FakeAppointmentRepository()


@pytest_asyncio.fixture
async def database():
    """In-memory SQLite with the full schema."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await init_db(db)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.sessionmaker() as session:
        yield session


@pytest.fixture
def sql_repo(db_session):
    return SqlAppointmentRepository(db_session, timeout_seconds=5.0)


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies")
    config.addinivalue_line("markers", "integration: Tests that touch the database or the HTTP app")
