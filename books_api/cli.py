"""Command-line interface for operating the Books API.

Provides commands to create the database table, check connectivity and run
the HTTP server with the settings from ``config.yaml``.
"""

import typer
from rich.console import Console
from rich.panel import Panel

from books_api.core.services import DbSessionService
from books_api.runtime.context import get_config
from books_api.runtime.init_db import init_db as run_init_db

# Initialize Rich console for colored output
console = Console()

app = typer.Typer(
    name="books-api",
    help="Books API - manage the database and run the HTTP server",
    rich_markup_mode="rich",
)


@app.command("init-db")
def init_db(
    drop: bool = typer.Option(
        False, "--drop", help="Drop the books table before creating it"
    ),
) -> None:
    """Create the books table."""
    run_init_db(drop=drop)
    if drop:
        console.print("[yellow]Dropped the books table[/yellow]")
    console.print("[green]✓ Books table is ready[/green]")


@app.command("check-db")
def check_db() -> None:
    """Check that the configured database answers queries."""
    service = DbSessionService()
    try:
        healthy = service.health_check()
        pool = service.get_pool_status()
    finally:
        service.dispose()

    if not healthy:
        console.print("[red]✗ Database is not reachable[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ Database is reachable[/green] (pool: {pool})")


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind address (defaults to config)"),
    port: int | None = typer.Option(None, help="Bind port (defaults to config)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP server."""
    import uvicorn

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port
    console.print(
        Panel.fit(
            f"Environment: [cyan]{config.app.environment}[/cyan]\n"
            f"Listening on: [cyan]http://{bind_host}:{bind_port}[/cyan]",
            title="Books API",
        )
    )
    uvicorn.run(
        "books_api.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,  # We handle access logging in middleware
    )


if __name__ == "__main__":
    app()
