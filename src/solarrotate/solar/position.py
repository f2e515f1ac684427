"""Solar position utilities built on pvlib."""
from __future__ import annotations

import datetime as dt

import pandas as pd
import pvlib
import pytz

from solarrotate.core.debug import DebugCollector, NullDebugCollector
from solarrotate.core.models import GeoCoordinate, SunPosition


def nominal_utc_offset_hours(lon: float) -> int:
    """Standard-time offset of the 15° zone containing ``lon`` (no DST, no civil borders)."""
    return int(round(lon / 15.0))


def solar_position(
    coord: GeoCoordinate,
    when: dt.datetime,
    debug: DebugCollector | None = None,
) -> SunPosition:
    """Compute the sun's azimuth/altitude at a local wall-clock time.

    Parameters
    ----------
    coord: GeoCoordinate
        Observer latitude/longitude.
    when: datetime.datetime
        Naive wall-clock time. It is read in the nominal zone of the longitude,
        because pvlib would otherwise treat a naive timestamp as UTC.
    debug: DebugCollector | None
        Collector for summary debug info.

    Returns
    -------
    SunPosition
        Azimuth clockwise from North in [0, 360) and true (unrefracted) elevation.
    """
    if when.tzinfo is not None:
        raise ValueError("when must be a naive local wall-clock datetime")

    debug = debug or NullDebugCollector()

    offset = nominal_utc_offset_hours(coord.lon)
    times = pd.DatetimeIndex([when]).tz_localize(pytz.FixedOffset(offset * 60))
    pvloc = pvlib.location.Location(latitude=coord.lat, longitude=coord.lon, tz=offset)
    df = pvloc.get_solarposition(times)

    expected_cols = ["elevation", "azimuth"]
    missing = [c for c in expected_cols if c not in df.columns]
    if missing:
        raise RuntimeError(f"pvlib missing expected columns: {missing}")

    azimuth = float(df["azimuth"].iloc[0]) % 360.0
    altitude = float(df["elevation"].iloc[0])
    debug.emit(
        "sun.position",
        {
            "lat": coord.lat,
            "lon": coord.lon,
            "utc_offset_h": offset,
            "azimuth_deg": azimuth,
            "altitude_deg": altitude,
            "apparent_altitude_deg": float(df["apparent_elevation"].iloc[0]) if "apparent_elevation" in df else None,
        },
        ts=when,
    )
    return SunPosition(azimuth_deg=azimuth, altitude_deg=altitude)


__all__ = ["solar_position", "nominal_utc_offset_hours"]
