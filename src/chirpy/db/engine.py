"""Async SQLAlchemy engine and session factory.

create_app() builds one pooled engine per application from its settings
and keeps it, with its session factory, on app.state. Routes get an
AsyncSession per request through the get_db dependency.
"""

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an engine suited to the backend in database_url.

    PostgreSQL gets a sized connection pool. In-memory SQLite keeps a
    single shared connection, otherwise every checkout would see an empty
    database.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_async_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_async_engine(url, echo=echo)
    return create_async_engine(url, echo=echo, pool_size=5, max_overflow=15)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request) -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
