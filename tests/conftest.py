"""Test fixtures — a fresh in-memory database per test.

Each test gets its own SQLite engine (aiosqlite, single shared connection)
with the schema created up front, so there is no cross-test pollution
and no external database is needed. The app under test is built with
create_app(test settings) and its get_db dependency overridden.
"""

import os

# Must be set before chirpy.config builds its singleton.
os.environ.setdefault("CHIRPY_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("CHIRPY_ENVIRONMENT", "development")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.auth.guard import AuthGuard
from chirpy.config import Settings
from chirpy.db.engine import build_engine, get_db
from chirpy.db.models import Base
from chirpy.main import create_app

TEST_DB_URL = "sqlite+aiosqlite://"
TEST_JWT_SECRET = "test-signing-secret-0123456789abcdef0123456789"
TEST_POLKA_KEY = "f271c81ff7084ee5b99a5091b42d486e"


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        database_url=TEST_DB_URL,
        jwt_secret=TEST_JWT_SECRET,
        polka_key=TEST_POLKA_KEY,
        environment="development",
    )


@pytest.fixture()
def guard(test_settings) -> AuthGuard:
    return AuthGuard.from_settings(test_settings)


@pytest_asyncio.fixture()
async def db_engine():
    engine = build_engine(TEST_DB_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine):
    session = AsyncSession(bind=db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture()
def app(test_settings, db_session):
    application = create_app(test_settings)

    async def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

