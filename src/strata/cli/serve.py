"""CLI command for running the API server.

Usage:
    strata serve
    strata serve --port 8080 --host 0.0.0.0
    strata serve --reload --log-level debug
"""

from __future__ import annotations

import typer

from strata.config import settings

app = typer.Typer(help="Run the Strata API server")


@app.callback(invoke_without_command=True)
def serve(
    host: str = typer.Option(settings.host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(
        False, "--reload", "-r", help="Enable auto-reload for development"
    ),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of worker processes"),
    log_level: str = typer.Option(
        "info", "--log-level", "-l", help="Log level: debug, info, warning, error"
    ),
) -> None:
    """Run the Strata API server with uvicorn."""
    import uvicorn

    workers_effective = workers if not reload else 1  # Reload requires single worker

    typer.echo("Starting Strata server...")
    typer.echo(f"  Host: {host}")
    typer.echo(f"  Port: {port}")
    typer.echo(f"  Workers: {workers_effective}")
    typer.echo(f"  Cache backend: {settings.cache_backend}")
    typer.echo()
    typer.echo(f"API documentation: http://{host}:{port}/docs")
    typer.echo()

    uvicorn.run(
        app="strata.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers_effective,
        log_level=log_level.lower(),
    )
