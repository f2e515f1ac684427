"""Nominatim (OpenStreetMap) address lookup."""

from __future__ import annotations

from typing import Any, Dict

import requests

from solarrotate.core.debug import DebugCollector, NullDebugCollector
from solarrotate.core.models import GeoCoordinate, ValidationError

DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org/search"
# Nominatim's usage policy rejects requests without an identifying agent.
DEFAULT_USER_AGENT = "solarrotate/0.1.0 (sun-facing geometry rotation)"


class GeocodingError(RuntimeError):
    """Raised when the lookup service fails or returns nothing usable."""


class NominatimGeocoder:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        accept_language: str = "en",
        debug: DebugCollector | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.accept_language = accept_language
        self.debug = debug or NullDebugCollector()
        self.session = session or requests.Session()

    def _build_params(self, address: str) -> Dict[str, str]:
        # requests percent-encodes the query string.
        return {"q": address, "format": "json", "limit": "1"}

    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept-Language": self.accept_language}

    def _parse(self, address: str, payload: Any) -> GeoCoordinate:
        if not isinstance(payload, list):
            raise GeocodingError(f"Unexpected geocoder response for '{address}': expected a JSON array")
        if not payload:
            raise GeocodingError(f"No results found for: '{address}'. Try a more specific address.")
        first = payload[0]
        try:
            lat = float(first["lat"])
            lon = float(first["lon"])
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingError(f"Geocoder result for '{address}' has no usable lat/lon: {exc}") from exc
        try:
            return GeoCoordinate(lat=lat, lon=lon)
        except ValidationError as exc:
            raise GeocodingError(f"Geocoder returned invalid coordinates for '{address}': {exc}") from exc

    def lookup(self, address: str) -> GeoCoordinate:
        """Resolve ``address`` with a single blocking GET; no retries."""
        params = self._build_params(address)
        self.debug.emit("geocode.request", {"url": self.base_url, "params": params}, ts=None)
        resp = self.session.get(self.base_url, params=params, headers=self._headers())
        resp.raise_for_status()
        coord = self._parse(address, resp.json())
        self.debug.emit("geocode.result", {"address": address, "lat": coord.lat, "lon": coord.lon}, ts=None)
        return coord


__all__ = ["GeocodingError", "NominatimGeocoder", "DEFAULT_BASE_URL", "DEFAULT_USER_AGENT"]
