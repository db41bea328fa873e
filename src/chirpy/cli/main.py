"""Chirpy CLI — run the server and prepare the database.

Usage:
    chirpy serve                       # Run the API with uvicorn
    chirpy serve --port 9000 --reload  # Dev server on another port
    chirpy init-db                     # Create tables in CHIRPY_DATABASE_URL
"""

from __future__ import annotations

import asyncio

import click

from chirpy.config import settings


@click.group()
def cli():
    """Chirpy — short posts with sessions."""


@cli.command()
@click.option("--host", default=settings.host, show_default=True)
@click.option("--port", default=settings.port, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run("chirpy.main:app", host=host, port=port, reload=reload)


async def _create_schema(database_url: str) -> list[str]:
    from chirpy.db.engine import build_engine
    from chirpy.db.models import Base

    engine = build_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()
    return sorted(Base.metadata.tables)


@cli.command("init-db")
@click.option(
    "--database-url",
    default=settings.database_url,
    show_default=False,
    help="Defaults to CHIRPY_DATABASE_URL.",
)
def init_db(database_url: str):
    """Create all tables (existing tables are left alone)."""
    tables = asyncio.run(_create_schema(database_url))
    click.echo(f"Created schema: {', '.join(tables)}")


if __name__ == "__main__":
    cli()
