"""Configuration loader for rotation requests.

Supports YAML and JSON files with optional ``geocoder``, ``request`` and
``geometry`` sections.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from solarrotate.geocode.nominatim import DEFAULT_BASE_URL, DEFAULT_USER_AGENT
from solarrotate.solar.geometry import Geometry
from .models import RotationRequest, ValidationError


class ConfigError(ValueError):
    """Raised when configuration cannot be parsed into domain models."""


@dataclass(frozen=True)
class GeocoderSettings:
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "en"


@dataclass(frozen=True)
class RunConfig:
    request: RotationRequest
    geometry: Geometry
    geocoder: GeocoderSettings


_REQUEST_KEYS = {"address", "fetch", "year", "month", "day", "time", "pivot", "use_altitude"}
_GEOCODER_KEYS = {"base_url", "user_agent", "accept_language"}


def _load_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text()
    if path.suffix.lower() in {".yaml", ".yml"}:
        raw = yaml.safe_load(text) or {}
    elif path.suffix.lower() == ".json":
        raw = json.loads(text)
    else:
        raise ConfigError(f"Unsupported config extension: {path.suffix}")
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def parse_pivot(raw: Any) -> Tuple[float, float, float]:
    """Accept ``"x,y,z"`` strings or three-item lists."""
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.split(",")]
    elif isinstance(raw, (list, tuple)):
        parts = list(raw)
    else:
        raise ConfigError("pivot must be 'x,y,z' or a list of three numbers")
    if len(parts) != 3:
        raise ConfigError("pivot must have exactly three components")
    try:
        x, y, z = (float(p) for p in parts)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"pivot contains non-numeric entry: {exc}") from exc
    return x, y, z


def _as_bool(val: Any, name: str) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, str) and val.strip().lower() in {"true", "yes", "1", "false", "no", "0"}:
        return val.strip().lower() in {"true", "yes", "1"}
    raise ConfigError(f"{name} must be a boolean")


def parse_request(raw: Dict[str, Any]) -> RotationRequest:
    unknown = set(raw) - _REQUEST_KEYS
    if unknown:
        raise ConfigError(f"Unknown request fields: {sorted(unknown)}")
    kwargs: Dict[str, Any] = {}
    try:
        if "address" in raw:
            kwargs["address"] = str(raw["address"])
        for key in ("fetch", "use_altitude"):
            if key in raw:
                kwargs[key] = _as_bool(raw[key], key)
        for key in ("year", "month", "day"):
            if key in raw:
                kwargs[key] = int(raw[key])
        if "time" in raw:
            kwargs["time"] = float(raw["time"])
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid request field: {exc}") from exc
    if "pivot" in raw:
        kwargs["pivot"] = parse_pivot(raw["pivot"])
    try:
        return RotationRequest(**kwargs)
    except ValidationError as exc:
        raise ConfigError(f"Invalid request: {exc}") from exc


def parse_geometry(raw: Any) -> Geometry:
    if raw is None:
        return Geometry.north_marker()
    points = raw.get("points") if isinstance(raw, dict) else raw
    if not isinstance(points, list) or not points:
        raise ConfigError("geometry.points must be a non-empty list of [x, y, z]")
    try:
        return Geometry([[float(v) for v in pt] for pt in points])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid geometry: {exc}") from exc


def parse_geocoder(raw: Any) -> GeocoderSettings:
    if raw is None:
        return GeocoderSettings()
    if not isinstance(raw, dict):
        raise ConfigError("geocoder must be a mapping")
    unknown = set(raw) - _GEOCODER_KEYS
    if unknown:
        raise ConfigError(f"Unknown geocoder fields: {sorted(unknown)}")
    return GeocoderSettings(**{k: str(v) for k, v in raw.items()})


def load_geometry(path: str | Path) -> Geometry:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Geometry file not found: {path}")
    raw = _load_raw(path)
    return parse_geometry(raw.get("geometry", raw))


def load_config(path: str | Path) -> RunConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    raw = _load_raw(path)
    request_raw = raw.get("request") or {}
    if not isinstance(request_raw, dict):
        raise ConfigError("request must be a mapping")
    return RunConfig(
        request=parse_request(request_raw),
        geometry=parse_geometry(raw.get("geometry")),
        geocoder=parse_geocoder(raw.get("geocoder")),
    )


__all__ = [
    "ConfigError",
    "GeocoderSettings",
    "RunConfig",
    "parse_pivot",
    "parse_request",
    "parse_geometry",
    "parse_geocoder",
    "load_geometry",
    "load_config",
]
