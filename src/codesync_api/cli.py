"""codesync-api: CLI for the CodeSync API."""

from __future__ import annotations

import asyncio

import typer
import uvicorn

from codesync_api.common.logging import setup_logging
from codesync_api.db.database import DatabaseConfig, create_schema, db
from codesync_api.settings import get_settings

app = typer.Typer(
    add_completion=False,
    invoke_without_command=True,
    help="CodeSync API CLI (start, init-db).",
)


@app.callback()
def _main(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command(name="start", help="Start the API server.")
def start(
    host: str = typer.Option(
        None,
        "--host",
        help="Host/interface for the API server.",
        envvar="CODESYNC_SERVER_HOST",
    ),
    port: int = typer.Option(
        None,
        "--port",
        help="Port for the API server.",
        envvar="CODESYNC_SERVER_PORT",
        min=1,
        max=65535,
    ),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (dev only)."),
) -> None:
    settings = get_settings()
    host = host or settings.server_host
    port = port or settings.server_port

    typer.echo(f"Starting CodeSync API on http://{host}:{port}")
    uvicorn.run(
        "codesync_api.asgi:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.logging_level.lower(),
        log_config=None,
    )


async def _init_db() -> None:
    settings = get_settings()
    db.init(DatabaseConfig.from_settings(settings))
    try:
        await create_schema()
    finally:
        await db.dispose()


@app.command(name="init-db", help="Create database tables if they do not exist.")
def init_db() -> None:
    setup_logging(get_settings())
    asyncio.run(_init_db())
    typer.echo("Database schema is ready.")


if __name__ == "__main__":
    app()
