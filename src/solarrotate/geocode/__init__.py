"""Address resolution: direct coordinate parsing and Nominatim lookup."""

from .nominatim import GeocodingError, NominatimGeocoder
from .resolver import AddressResolver, NotConfiguredError, ResolutionError, parse_coordinates

__all__ = [
    "GeocodingError",
    "NominatimGeocoder",
    "AddressResolver",
    "NotConfiguredError",
    "ResolutionError",
    "parse_coordinates",
]
