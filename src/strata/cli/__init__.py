"""CLI commands for Strata.

Provides command-line interface using Typer:
- strata serve: Run the API server
- strata init-db: Create the product and order tables

Usage:
    strata --help
    strata serve --port 8080
    strata init-db
"""

import typer

from strata.cli.db_cmd import app as db_app
from strata.cli.serve import app as serve_app

app = typer.Typer(
    name="strata",
    help="Strata: cache-aside and write-through caching over a relational store",
    no_args_is_help=True,
)

app.add_typer(serve_app, name="serve")
app.add_typer(db_app, name="init-db")


@app.callback()
def callback() -> None:
    """Strata: cache-aside and write-through caching over a relational store."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
