"""Address resolution with a direct-coordinate fast path and a single-slot cache."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import requests

from solarrotate.core.debug import DebugCollector, NullDebugCollector
from solarrotate.core.models import AddressCache, GeoCoordinate, ValidationError
from .nominatim import GeocodingError, NominatimGeocoder


class ResolutionError(RuntimeError):
    """Raised when an address cannot be turned into coordinates."""


class NotConfiguredError(RuntimeError):
    """Raised when no fetch was requested and nothing has been cached yet."""


@dataclass(frozen=True)
class DirectCoordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class NeedsLookup:
    address: str


ParseOutcome = Union[DirectCoordinates, NeedsLookup]


def parse_coordinates(address: str) -> ParseOutcome:
    """Recognise ``"<lat>, <lon>"`` input without touching the network.

    ``float`` is locale independent and accepts a sign and an exponent, so
    ``"-3.5e1, 1.2E+2"`` is direct input. Anything that is not exactly two
    numeric comma-separated parts needs a lookup.
    """
    parts = address.split(",")
    if len(parts) != 2:
        return NeedsLookup(address)
    try:
        lat = float(parts[0].strip())
        lon = float(parts[1].strip())
    except ValueError:
        return NeedsLookup(address)
    return DirectCoordinates(lat=lat, lon=lon)


@dataclass(frozen=True)
class ResolvedLocation:
    address: str
    coordinate: GeoCoordinate
    source: str  # "cache" | "direct" | "geocoder"


class AddressResolver:
    def __init__(
        self,
        geocoder: NominatimGeocoder | None = None,
        cache: AddressCache | None = None,
        debug: DebugCollector | None = None,
    ):
        self.debug = debug or NullDebugCollector()
        self.geocoder = geocoder or NominatimGeocoder(debug=self.debug)
        self.cache = cache

    def clear(self) -> None:
        self.cache = None

    def _from_cache(self) -> ResolvedLocation:
        assert self.cache is not None
        self.debug.emit("geocode.cache_hit", {"address": self.cache.address}, ts=None)
        return ResolvedLocation(self.cache.address, self.cache.coordinate, "cache")

    def _lookup(self, address: str) -> ResolvedLocation:
        if not address.strip():
            raise ResolutionError("Address is empty; enter a place name or 'lat, lon'")

        outcome = parse_coordinates(address)
        if isinstance(outcome, DirectCoordinates):
            try:
                coord = GeoCoordinate(lat=outcome.lat, lon=outcome.lon)
            except ValidationError as exc:
                raise ResolutionError(str(exc)) from exc
            self.debug.emit("geocode.direct", {"address": address, "lat": coord.lat, "lon": coord.lon}, ts=None)
            return ResolvedLocation(address, coord, "direct")

        try:
            coord = self.geocoder.lookup(outcome.address)
        except (GeocodingError, requests.RequestException, ValueError) as exc:
            raise ResolutionError(str(exc)) from exc
        return ResolvedLocation(address, coord, "geocoder")

    def resolve(self, address: str, fetch: bool) -> ResolvedLocation:
        """Return coordinates for ``address``, hitting the network only when needed.

        Without ``fetch`` the cached slot is reused whatever the address says.
        With ``fetch`` and an unchanged address the cache is reused as well.
        The slot is only replaced after a successful resolution.
        """
        if not fetch:
            if self.cache is None:
                raise NotConfiguredError("Enter an address and set Fetch to True")
            return self._from_cache()

        if self.cache is not None and self.cache.address == address:
            return self._from_cache()

        resolved = self._lookup(address)
        self.cache = AddressCache(address=resolved.address, coordinate=resolved.coordinate)
        return resolved


__all__ = [
    "ResolutionError",
    "NotConfiguredError",
    "DirectCoordinates",
    "NeedsLookup",
    "ParseOutcome",
    "parse_coordinates",
    "ResolvedLocation",
    "AddressResolver",
]
