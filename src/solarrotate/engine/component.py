"""Solar rotation component: validate inputs, resolve the site, rotate geometry."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from solarrotate.core.debug import DebugCollector, NullDebugCollector, ScopedDebugCollector
from solarrotate.core.models import DateConstructionError, RotationRequest, ValidationError
from solarrotate.geocode.nominatim import NominatimGeocoder
from solarrotate.geocode.resolver import AddressResolver, NotConfiguredError, ResolutionError
from solarrotate.solar.geometry import Geometry, RotationTransform
from solarrotate.solar.rotation import SunSolution, compute_sun_rotation

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class RuntimeMessage:
    level: str  # "error" | "warning"
    text: str


@dataclass(frozen=True)
class ComponentOutputs:
    geometry: Geometry
    transform: RotationTransform
    azimuth_deg: float
    altitude_deg: float
    sun_vector: np.ndarray
    lat: float
    lon: float

    def to_dict(self) -> dict:
        return {
            "geometry": self.geometry.to_list(),
            "transform": self.transform.to_list(),
            "azimuth_deg": self.azimuth_deg,
            "altitude_deg": self.altitude_deg,
            "sun_vector": self.sun_vector.tolist(),
            "lat": self.lat,
            "lon": self.lon,
        }


@dataclass
class Evaluation:
    """Outcome of one evaluation pass.

    ``outputs`` stays ``None`` whenever the pass was aborted; ``info`` carries the
    status text (or the not-configured guidance).
    """

    outputs: ComponentOutputs | None = None
    info: str | None = None
    messages: List[RuntimeMessage] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [m.text for m in self.messages if m.level == ERROR]

    @property
    def warnings(self) -> List[str]:
        return [m.text for m in self.messages if m.level == WARNING]

    @property
    def ok(self) -> bool:
        return self.outputs is not None and not self.errors

    def _fail(self, text: str) -> "Evaluation":
        self.messages.append(RuntimeMessage(ERROR, text))
        return self


def validate_request(request: RotationRequest) -> List[str]:
    """Coarse range checks; real calendar validation happens when the date is built."""
    errors = []
    if request.month < 1 or request.month > 12:
        errors.append("Month must be between 1 and 12")
    if request.day < 1 or request.day > 31:
        errors.append("Day must be between 1 and 31")
    if not (0 <= request.time < 24):
        errors.append("Time must be between 0 and 23.99")
    return errors


def format_info(address: str, solution: SunSolution, lat: float, lon: float) -> str:
    lines = [
        f"Address: {address}",
        f"Location: {lat:.4f}, {lon:.4f}",
        f"Date/Time: {solution.when:%Y-%m-%d %H:%M}",
        f"Azimuth: {solution.position.azimuth_deg:.2f} degrees from North",
        f"Altitude: {solution.position.altitude_deg:.2f} degrees above horizon",
    ]
    if solution.position.below_horizon:
        lines.append("Warning: Sun is below the horizon at this time")
    return "\n".join(lines)


class SolarRotationComponent:
    """One component instance; owns the single cached address slot.

    Evaluations are synchronous and not meant to run concurrently on the same
    instance.
    """

    def __init__(
        self,
        resolver: AddressResolver | None = None,
        geocoder: NominatimGeocoder | None = None,
        debug: DebugCollector | None = None,
    ):
        self.debug = debug or NullDebugCollector()
        self.resolver = resolver or AddressResolver(
            geocoder=geocoder or NominatimGeocoder(debug=ScopedDebugCollector(self.debug, component="geocoder")),
            debug=ScopedDebugCollector(self.debug, component="resolver"),
        )

    def evaluate(self, request: RotationRequest, geometry: Geometry) -> Evaluation:
        result = Evaluation()

        # Only the first range violation is reported, matching field order.
        problems = validate_request(request)
        if problems:
            self.debug.emit("evaluate.invalid", {"errors": problems}, ts=None, component="component")
            return result._fail(problems[0])

        try:
            resolved = self.resolver.resolve(request.address, request.fetch)
        except NotConfiguredError as exc:
            result.info = str(exc)
            return result
        except ResolutionError as exc:
            return result._fail(f"Geocoding failed: {exc}")

        coord = resolved.coordinate
        try:
            solution = compute_sun_rotation(
                coord,
                request.when,
                pivot=request.pivot,
                use_full_direction=request.use_altitude,
                debug=ScopedDebugCollector(self.debug, component="calculator"),
            )
        except (DateConstructionError, ValidationError, ValueError, RuntimeError) as exc:
            return result._fail(str(exc))

        rotated = geometry.transformed(solution.transform)
        result.outputs = ComponentOutputs(
            geometry=rotated,
            transform=solution.transform,
            azimuth_deg=solution.position.azimuth_deg,
            altitude_deg=solution.position.altitude_deg,
            sun_vector=solution.direction,
            lat=coord.lat,
            lon=coord.lon,
        )
        result.info = format_info(resolved.address, solution, coord.lat, coord.lon)
        if solution.position.below_horizon:
            result.messages.append(RuntimeMessage(WARNING, "Sun is below horizon"))
        self.debug.emit(
            "evaluate.done",
            {"source": resolved.source, "below_horizon": solution.position.below_horizon},
            ts=solution.when,
            component="component",
        )
        return result


__all__ = [
    "RuntimeMessage",
    "ComponentOutputs",
    "Evaluation",
    "validate_request",
    "format_info",
    "SolarRotationComponent",
]
