"""CLI command for creating the database schema.

Usage:
    strata init-db
    strata init-db --database-url sqlite+aiosqlite:///strata.db
"""

from __future__ import annotations

import asyncio

import typer

from strata.config import settings
from strata.persistence.db import close_db, init_db

app = typer.Typer(help="Create the product and order tables")


async def _create_schema() -> None:
    try:
        await init_db()
    finally:
        await close_db()


@app.callback(invoke_without_command=True)
def init_database(
    database_url: str | None = typer.Option(
        None,
        "--database-url",
        help="Override DATABASE_URL for this run",
    ),
) -> None:
    """Create tables that do not exist yet."""
    if database_url:
        settings.database_url = database_url

    try:
        asyncio.run(_create_schema())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Database schema ready")
