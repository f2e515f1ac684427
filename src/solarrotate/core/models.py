"""Domain models for the solar rotation component.

Provides validated data structures for coordinates, sun date/time inputs,
sun positions and the single-slot address cache.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Tuple


class ValidationError(ValueError):
    """Raised when model inputs violate constraints."""


class DateConstructionError(ValueError):
    """Raised when date parts do not form a real calendar date."""


@dataclass(frozen=True)
class GeoCoordinate:
    lat: float
    lon: float

    def __post_init__(self):
        if not math.isfinite(self.lat) or not math.isfinite(self.lon):
            raise ValidationError("Coordinates must be finite numbers")
        if not (-90.0 <= self.lat <= 90.0):
            raise ValidationError("Latitude must be between -90 and 90 degrees")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValidationError("Longitude must be between -180 and 180 degrees")


@dataclass(frozen=True)
class SunDateTime:
    """Local wall-clock date plus a decimal hour.

    Range checks on month/day/time are left to the caller; ``to_datetime`` is the
    authoritative calendar check.
    """

    year: int
    month: int
    day: int
    time: float

    def decompose(self) -> Tuple[int, int, int]:
        """Split the decimal hour into (hour, minute, second), truncating each part."""
        hour = int(self.time)
        minute = int((self.time - hour) * 60)
        second = int((((self.time - hour) * 60) - minute) * 60)
        return hour, minute, second

    def to_datetime(self) -> dt.datetime:
        hour, minute, second = self.decompose()
        try:
            return dt.datetime(self.year, self.month, self.day, hour, minute, second)
        except (ValueError, OverflowError) as exc:
            raise DateConstructionError(
                f"Invalid date {self.year:04d}-{self.month:02d}-{self.day:02d}: {exc}"
            ) from exc


@dataclass(frozen=True)
class SunPosition:
    azimuth_deg: float  # clockwise from North
    altitude_deg: float  # above (+) / below (-) horizon

    def __post_init__(self):
        if not (-90.0 <= self.altitude_deg <= 90.0):
            raise ValidationError("Altitude must be between -90 and 90 degrees")

    @property
    def below_horizon(self) -> bool:
        return self.altitude_deg < 0


@dataclass(frozen=True)
class AddressCache:
    """Single cached address -> coordinate pair. Replaced whole, never patched."""

    address: str
    coordinate: GeoCoordinate


@dataclass(frozen=True)
class RotationRequest:
    address: str = "London, UK"
    fetch: bool = False
    year: int = 2024
    month: int = 6
    day: int = 21
    time: float = 12.0
    pivot: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    use_altitude: bool = False

    def __post_init__(self):
        if len(self.pivot) != 3:
            raise ValidationError("pivot must have exactly three components (x, y, z)")

    @property
    def when(self) -> SunDateTime:
        return SunDateTime(year=self.year, month=self.month, day=self.day, time=self.time)


__all__ = [
    "ValidationError",
    "DateConstructionError",
    "GeoCoordinate",
    "SunDateTime",
    "SunPosition",
    "AddressCache",
    "RotationRequest",
]
