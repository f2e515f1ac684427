import json
import sys
from pathlib import Path

import pytest

# ensure src package importable
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

FIXTURES = Path(__file__).parent / "fixtures"


class FakeResponse:
    def __init__(self, payload, status_error=None):
        self.payload = payload
        self.status_error = status_error

    def raise_for_status(self):
        if self.status_error is not None:
            raise self.status_error

    def json(self):
        return self.payload


class FakeSession:
    """Records every GET and replays a fixed payload."""

    def __init__(self, payload=None, status_error=None, exc=None):
        self.payload = payload
        self.status_error = status_error
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, headers=None, **kwargs):
        self.calls.append({"url": url, "params": params, "headers": headers, **kwargs})
        if self.exc is not None:
            raise self.exc
        return FakeResponse(self.payload, self.status_error)


@pytest.fixture
def london_payload():
    return json.loads((FIXTURES / "nominatim_london.json").read_text(encoding="utf-8"))


@pytest.fixture
def london_session(london_payload):
    return FakeSession(london_payload)


@pytest.fixture
def fake_session():
    return FakeSession
