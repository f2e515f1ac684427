"""Turn a location and local time into a sun-facing rotation."""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from solarrotate.core.debug import DebugCollector, NullDebugCollector
from solarrotate.core.models import GeoCoordinate, SunDateTime, SunPosition
from .geometry import NORTH, UP, RotationTransform, sun_direction
from .position import solar_position


@dataclass(frozen=True)
class SunSolution:
    when: dt.datetime
    position: SunPosition
    direction: np.ndarray
    transform: RotationTransform


def sun_rotation(position: SunPosition, pivot: Sequence[float], use_full_direction: bool) -> RotationTransform:
    """Yaw about Up by the azimuth, or tilt North onto the full sun vector."""
    if use_full_direction:
        return RotationTransform.between(NORTH, sun_direction(position), pivot)
    return RotationTransform.about_axis(math.radians(position.azimuth_deg), UP, pivot)


def compute_sun_rotation(
    coord: GeoCoordinate,
    when: SunDateTime,
    pivot: Sequence[float] = (0.0, 0.0, 0.0),
    use_full_direction: bool = False,
    debug: DebugCollector | None = None,
) -> SunSolution:
    """Sun position, direction vector and rotation for ``coord`` at ``when``.

    Raises ``DateConstructionError`` when the date parts are not a real calendar
    date. A sun below the horizon is not an error here.
    """
    debug = debug or NullDebugCollector()
    local = when.to_datetime()
    position = solar_position(coord, local, debug=debug)
    direction = sun_direction(position)
    transform = sun_rotation(position, pivot, use_full_direction)
    debug.emit(
        "sun.rotation",
        {
            "mode": "full_direction" if use_full_direction else "azimuth_only",
            "direction": direction,
            "pivot": tuple(float(v) for v in pivot),
        },
        ts=local,
    )
    return SunSolution(when=local, position=position, direction=direction, transform=transform)


__all__ = ["SunSolution", "sun_rotation", "compute_sun_rotation"]
