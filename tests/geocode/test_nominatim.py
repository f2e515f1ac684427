import pytest
import requests

from solarrotate.core.debug import ListDebugCollector
from solarrotate.geocode.nominatim import DEFAULT_BASE_URL, GeocodingError, NominatimGeocoder


def test_lookup_parses_first_result(london_session):
    debug = ListDebugCollector()
    geocoder = NominatimGeocoder(session=london_session, debug=debug)

    coord = geocoder.lookup("London, UK")

    assert coord.lat == pytest.approx(51.5074456)
    assert coord.lon == pytest.approx(-0.1277653)
    assert debug.stages() == ["geocode.request", "geocode.result"]


def test_request_shape(london_session):
    NominatimGeocoder(session=london_session).lookup("10 Downing St, London")

    assert len(london_session.calls) == 1
    call = london_session.calls[0]
    assert call["url"] == DEFAULT_BASE_URL
    assert call["params"] == {"q": "10 Downing St, London", "format": "json", "limit": "1"}
    assert call["headers"]["Accept-Language"] == "en"
    assert call["headers"]["User-Agent"].startswith("solarrotate/")
    # blocking call, default client timeout
    assert "timeout" not in call


def test_custom_agent_and_language(london_session):
    geocoder = NominatimGeocoder(user_agent="MyPlugin/2.0", accept_language="de", session=london_session)
    geocoder.lookup("Berlin")
    assert london_session.calls[0]["headers"] == {"User-Agent": "MyPlugin/2.0", "Accept-Language": "de"}


def test_empty_result_names_address(fake_session):
    geocoder = NominatimGeocoder(session=fake_session([]))
    with pytest.raises(GeocodingError) as excinfo:
        geocoder.lookup("Nowhere Special")
    msg = str(excinfo.value)
    assert "No results found for: 'Nowhere Special'" in msg
    assert "more specific" in msg


def test_non_array_payload_rejected(fake_session):
    geocoder = NominatimGeocoder(session=fake_session({"error": "Unable to geocode"}))
    with pytest.raises(GeocodingError):
        geocoder.lookup("x")


def test_missing_lat_field_rejected(fake_session):
    geocoder = NominatimGeocoder(session=fake_session([{"lon": "1.0"}]))
    with pytest.raises(GeocodingError):
        geocoder.lookup("x")


def test_http_error_propagates(fake_session):
    session = fake_session([], status_error=requests.HTTPError("429 Too Many Requests"))
    geocoder = NominatimGeocoder(session=session)
    with pytest.raises(requests.HTTPError):
        geocoder.lookup("London")
    # no retry
    assert len(session.calls) == 1
