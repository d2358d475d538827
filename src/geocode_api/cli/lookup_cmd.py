"""One-shot reverse geocode lookup from the command line or stdin."""

import asyncio
import json
import sys
from typing import Any

import typer

from geocode_api.core.config import Settings
from geocode_api.lib.geocoder.dispatcher import LookupResult


def lookup(
    ctx: typer.Context,
    lat: str | None = typer.Option(None, "--lat", help="Latitude (-90 to 90)"),
    lon: str | None = typer.Option(None, "--lon", help="Longitude (-180 to 180)"),
) -> None:
    """Reverse geocode one coordinate pair and print the JSON result.

    Without --lat/--lon, a {"lat": ..., "lon": ...} JSON document is read from stdin.
    """
    from geocode_api.cli.app import cli_settings

    if lat is None and lon is None:
        raw = sys.stdin.read()
        try:
            payload: Any = json.loads(raw)
        except json.JSONDecodeError as e:
            typer.echo(f"Unmarshal coordinates error: {e}", err=True)
            raise typer.Exit(code=1) from e
    else:
        payload = {"lat": lat, "lon": lon}

    result = asyncio.run(_lookup(payload, cli_settings(ctx)))
    typer.echo(json.dumps(result.body))
    if not result.ok:
        typer.echo(f"Lookup failed with status {result.status_code}", err=True)
        raise typer.Exit(code=1)


async def _lookup(payload: Any, settings: Settings) -> LookupResult:
    """Async implementation of a single lookup."""
    from geocode_api.core.dependencies import build_dispatcher

    dispatcher = build_dispatcher(settings)
    try:
        return await dispatcher.lookup(payload)
    finally:
        await dispatcher.provider.aclose()
