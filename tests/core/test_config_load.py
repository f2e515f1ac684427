import json
from pathlib import Path

import numpy as np
import pytest

from solarrotate.core.config import (
    ConfigError,
    GeocoderSettings,
    load_config,
    load_geometry,
    parse_pivot,
    parse_request,
)
from solarrotate.geocode.nominatim import DEFAULT_BASE_URL


def test_load_yaml_config(tmp_path: Path):
    cfg = tmp_path / "site.yaml"
    cfg.write_text(
        "geocoder:\n"
        "  user_agent: Studio/1.0\n"
        "request:\n"
        "  address: 51.5074, -0.1278\n"
        "  fetch: true\n"
        "  year: 2025\n"
        "  month: 3\n"
        "  day: 20\n"
        "  time: 9.5\n"
        "  pivot: 1,2,3\n"
        "  use_altitude: yes\n"
        "geometry:\n"
        "  points:\n"
        "  - [0, 0, 0]\n"
        "  - [0, 2, 0]\n"
        "  - [1, 2, 0.5]\n"
    )

    run = load_config(cfg)

    req = run.request
    assert req.address == "51.5074, -0.1278"
    assert req.fetch is True
    assert (req.year, req.month, req.day, req.time) == (2025, 3, 20, 9.5)
    assert req.pivot == (1.0, 2.0, 3.0)
    assert req.use_altitude is True
    assert run.geometry.points.shape == (3, 3)
    assert run.geocoder == GeocoderSettings(base_url=DEFAULT_BASE_URL, user_agent="Studio/1.0", accept_language="en")


def test_load_json_defaults(tmp_path: Path):
    cfg = tmp_path / "site.json"
    cfg.write_text(json.dumps({"request": {"address": "Oslo"}}))
    run = load_config(cfg)
    assert run.request.address == "Oslo"
    assert run.request.fetch is False
    np.testing.assert_array_equal(run.geometry.points, [[0, 0, 0], [0, 1, 0]])
    assert run.geocoder == GeocoderSettings()


def test_out_of_range_month_is_not_a_config_error(tmp_path: Path):
    # range checks belong to the component, which reports them per field
    cfg = tmp_path / "site.yaml"
    cfg.write_text("request:\n  month: 13\n")
    assert load_config(cfg).request.month == 13


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.yaml")


def test_unsupported_extension(tmp_path: Path):
    cfg = tmp_path / "site.toml"
    cfg.write_text("x = 1\n")
    with pytest.raises(ConfigError, match="Unsupported"):
        load_config(cfg)


def test_unknown_fields_rejected():
    with pytest.raises(ConfigError, match="Unknown request fields"):
        parse_request({"adress": "typo"})


@pytest.mark.parametrize("raw", [{"year": "soon"}, {"fetch": "maybe"}, {"time": [1]}])
def test_bad_values_rejected(raw):
    with pytest.raises(ConfigError):
        parse_request(raw)


@pytest.mark.parametrize("raw,expected", [("1, 2, 3", (1.0, 2.0, 3.0)), ([0, -1.5, 2], (0.0, -1.5, 2.0))])
def test_parse_pivot(raw, expected):
    assert parse_pivot(raw) == expected


@pytest.mark.parametrize("raw", ["1,2", "a,b,c", 5, [1, 2, 3, 4]])
def test_parse_pivot_rejects(raw):
    with pytest.raises(ConfigError):
        parse_pivot(raw)


def test_load_geometry_file(tmp_path: Path):
    path = tmp_path / "mesh.json"
    path.write_text(json.dumps({"points": [[1, 0, 0], [0, 1, 0]]}))
    assert load_geometry(path).points.tolist() == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]


def test_load_geometry_rejects_bad_points(tmp_path: Path):
    path = tmp_path / "mesh.yaml"
    path.write_text("points:\n- [1, 2]\n")
    with pytest.raises(ConfigError):
        load_geometry(path)
