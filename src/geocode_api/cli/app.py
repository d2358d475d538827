"""Typer CLI root application with serve command."""

import typer
from loguru import logger

from geocode_api.core.config import Settings, get_settings
from geocode_api.core.logging import setup_logging

app = typer.Typer(name="geocode-api", help="Reverse geocoding edge service CLI")


@app.callback()
def _main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),  # noqa: FBT001
) -> None:
    """Initialize logging for all CLI commands."""
    ctx.obj = {"verbose": verbose}
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, verbose=verbose or settings.verbose)


def cli_settings(ctx: typer.Context) -> Settings:
    """Load settings, applying the root ``--verbose`` flag."""
    settings = get_settings()
    if ctx.obj and ctx.obj.get("verbose"):
        settings = settings.model_copy(update={"verbose": True})
    return settings


@app.command()
def serve(
    ctx: typer.Context,
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8080, "--port", help="HTTP listening port"),
) -> None:
    """Start the API server."""
    import uvicorn

    if reload:
        # Reloaded workers import the factory and read settings from the environment
        if ctx.obj and ctx.obj.get("verbose"):
            logger.warning("--verbose is not passed to reloaded workers; set VERBOSE=true instead")
        uvicorn.run(
            "geocode_api.main:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            timeout_keep_alive=30,
        )
        return

    from geocode_api.main import create_app

    uvicorn.run(create_app(cli_settings(ctx)), host=host, port=port, timeout_keep_alive=30)


def _register_subcommands() -> None:
    """Register all CLI subcommands."""
    from geocode_api.cli.lookup_cmd import lookup

    app.command("lookup")(lookup)


_register_subcommands()
