"""Command line entrypoint for solarrotate.

Implements two commands:

* ``run``: resolve a site, compute the sun position and rotate geometry.
* ``locate``: resolve an address to coordinates only.
"""
from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from solarrotate.core.config import (
    ConfigError,
    GeocoderSettings,
    RunConfig,
    load_config,
    load_geometry,
    parse_pivot,
)
from solarrotate.core.debug import DebugCollector, NullDebugCollector, ScopedDebugCollector, build_debug_collector
from solarrotate.core.models import RotationRequest, ValidationError
from solarrotate.engine.component import SolarRotationComponent
from solarrotate.geocode.nominatim import NominatimGeocoder
from solarrotate.geocode.resolver import AddressResolver, ResolutionError
from solarrotate.solar.geometry import Geometry

__version__ = "0.1.0"

app = typer.Typer(add_completion=False, help="Rotate geometry to face the sun at a site and time")


def default_geocoder(settings: GeocoderSettings, debug: DebugCollector) -> NominatimGeocoder:
    """Factory separated for easy monkeypatching in tests."""

    return NominatimGeocoder(
        base_url=settings.base_url,
        user_agent=settings.user_agent,
        accept_language=settings.accept_language,
        debug=debug,
    )


def _exit_with_error(msg: str) -> None:
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(code=1)


def _override(request: RotationRequest, **values: Any) -> RotationRequest:
    updates = {k: v for k, v in values.items() if v is not None}
    try:
        return replace(request, **updates)
    except ValidationError as exc:
        _exit_with_error(str(exc))


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def version_callback(
    version: bool = typer.Option(False, "--version", callback=_show_version, is_eager=True, help="Show version and exit"),
):
    pass


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML/JSON with request/geometry/geocoder sections"),
    address: Optional[str] = typer.Option(None, "--address", "-a", help="Place name or 'lat, lon'"),
    fetch: Optional[bool] = typer.Option(
        None,
        "--fetch/--no-fetch",
        help="Resolve the address. Defaults to the config value, or fetch when no config is given.",
        show_default=False,
    ),
    year: Optional[int] = typer.Option(None, help="Year"),
    month: Optional[int] = typer.Option(None, help="Month (1-12)"),
    day: Optional[int] = typer.Option(None, help="Day (1-31)"),
    time: Optional[float] = typer.Option(None, "--time", "-t", help="Local decimal hour (0-23.99)"),
    pivot: Optional[str] = typer.Option(None, help="Rotation centre as 'x,y,z'"),
    use_altitude: Optional[bool] = typer.Option(
        None, "--use-altitude/--no-use-altitude", help="Tilt to the full sun direction, not only the azimuth", show_default=False
    ),
    geometry: Optional[Path] = typer.Option(None, "--geometry", "-g", help="YAML/JSON file with geometry points"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write all outputs as JSON"),
    debug: Optional[Path] = typer.Option(None, help="Write debug events (.jsonl, or .json for a single array)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print transform and sun vector"),
):
    """Resolve the site, compute the sun position and rotate the geometry."""

    try:
        cfg = load_config(config) if config else RunConfig(RotationRequest(fetch=True), Geometry.north_marker(), GeocoderSettings())
        geom = load_geometry(geometry) if geometry else cfg.geometry
        pivot_xyz = parse_pivot(pivot) if pivot is not None else None
    except ConfigError as exc:
        _exit_with_error(str(exc))

    request = _override(
        cfg.request,
        address=address,
        fetch=fetch,
        year=year,
        month=month,
        day=day,
        time=time,
        pivot=pivot_xyz,
        use_altitude=use_altitude,
    )

    debug_collector = build_debug_collector(debug) if debug else NullDebugCollector()
    try:
        component = SolarRotationComponent(
            geocoder=default_geocoder(cfg.geocoder, ScopedDebugCollector(debug_collector, component="geocoder")),
            debug=debug_collector,
        )
        result = component.evaluate(request, geom)
    finally:
        if hasattr(debug_collector, "finalize"):
            debug_collector.finalize()

    if result.errors:
        _exit_with_error(result.errors[0])

    if result.info:
        typer.echo(result.info)
    for w in result.warnings:
        typer.echo(f"Warning: {w}", err=True)

    if result.outputs is None:
        return

    if verbose:
        typer.echo(f"Sun vector: {result.outputs.sun_vector.tolist()}")
        typer.echo(f"Transform: {result.outputs.transform.to_list()}")

    if output:
        payload: Dict[str, Any] = result.outputs.to_dict()
        payload["info"] = result.info
        payload["warnings"] = result.warnings
        output.write_text(json.dumps(payload, indent=2))


@app.command()
def locate(
    address: str = typer.Argument(..., help="Place name or 'lat, lon'"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config with a geocoder section"),
):
    """Resolve an address to 'lat, lon'."""

    try:
        settings = load_config(config).geocoder if config else GeocoderSettings()
    except ConfigError as exc:
        _exit_with_error(str(exc))

    resolver = AddressResolver(geocoder=default_geocoder(settings, NullDebugCollector()))
    try:
        resolved = resolver.resolve(address, fetch=True)
    except ResolutionError as exc:
        _exit_with_error(f"Geocoding failed: {exc}")
    typer.echo(f"{resolved.coordinate.lat}, {resolved.coordinate.lon}")


def main() -> None:  # pragma: no cover - thin wrapper for console_script
    app()


__all__ = ["app", "main", "default_geocoder"]


if __name__ == "__main__":  # pragma: no cover
    main()
