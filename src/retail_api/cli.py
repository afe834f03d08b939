"""Command line entry point: run the API or bootstrap its database."""

import typer
from rich.console import Console
from rich.panel import Panel

from retail_api.runtime.context import get_config

console = Console()

app = typer.Typer(
    name="retail-api",
    help="Online Retail API - serve the products API and manage its database",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Listen host (default: config)"),
    port: int | None = typer.Option(None, help="Listen port (default: config)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Start the API server."""
    import uvicorn

    app_config = get_config().app
    host = host or app_config.host
    port = port or app_config.port
    display_host = "localhost" if host in ("0.0.0.0", "::") else host
    base_url = f"http://{display_host}:{port}"

    console.print(
        Panel.fit(
            f"[bold green]Server running at[/bold green] {base_url}\n"
            f"[bold]Docs:[/bold] {base_url}/api-docs\n"
            f"[bold]Health check:[/bold] {base_url}/api/health",
            title=f"{app_config.title} {app_config.version}",
        )
    )
    uvicorn.run(
        "retail_api.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        access_log=False,
    )


@app.command("init-db")
def init_db() -> None:
    """Create the products table if it does not exist."""
    from retail_api.runtime.init_db import init_db as create_tables

    with console.status("Creating tables..."):
        create_tables()
    console.print("[green]✓[/green] Database initialized")


if __name__ == "__main__":
    app()
