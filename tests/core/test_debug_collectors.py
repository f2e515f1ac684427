import datetime as dt
import json

import numpy as np

from solarrotate.core.debug import (
    JsonDebugWriter,
    JsonlDebugWriter,
    ListDebugCollector,
    NullDebugCollector,
    ScopedDebugCollector,
    build_debug_collector,
)


def test_list_collector_records_events():
    collector = ListDebugCollector()
    collector.emit("geocode.direct", {"lon": 2, "lat": 1}, ts=None, component="resolver")
    assert len(collector.events) == 1
    event = collector.events[0]
    assert event["stage"] == "geocode.direct"
    assert event["component"] == "resolver"
    # payload should be key-sorted for determinism
    assert list(event["payload"].keys()) == ["lat", "lon"]


def test_numpy_and_datetime_payloads_are_json_safe():
    collector = ListDebugCollector()
    collector.emit("sun.rotation", {"direction": np.array([0.0, 1.0, 0.0]), "pivot": (1.0, 2.0, 3.0)}, ts=dt.datetime(2024, 6, 21, 12))
    event = collector.events[0]
    assert event["payload"]["direction"] == [0.0, 1.0, 0.0]
    assert event["payload"]["pivot"] == [1.0, 2.0, 3.0]
    assert event["ts"] == "2024-06-21T12:00:00"
    json.dumps(event)


def test_jsonl_writer(tmp_path):
    path = tmp_path / "debug.jsonl"
    writer = JsonlDebugWriter(path)
    writer.emit("stage1", {"z": 1, "y": {"b": 1, "a": 2}}, ts=1)
    writer.emit("stage2", {"b": [2, 1]}, ts=2, component="calculator")
    writer.finalize()

    lines = path.read_text().splitlines()
    assert len(lines) == 2
    events = [json.loads(line) for line in lines]
    assert events[0]["stage"] == "stage1"
    assert list(events[0]["payload"]["y"].keys()) == ["a", "b"]
    assert events[1]["component"] == "calculator"


def test_json_writer_single_document(tmp_path):
    path = tmp_path / "debug.json"
    writer = build_debug_collector(path)
    assert isinstance(writer, JsonDebugWriter)
    writer.emit("a", {"x": 1}, ts=None)
    writer.emit("b", {"x": 2}, ts=None)
    writer.finalize()
    data = json.loads(path.read_text())
    assert [e["stage"] for e in data] == ["a", "b"]


def test_factory_defaults_to_jsonl(tmp_path):
    writer = build_debug_collector(tmp_path / "events.log")
    assert isinstance(writer, JsonlDebugWriter)
    writer.finalize()


def test_scoped_collector_injects_component():
    inner = ListDebugCollector()
    scoped = ScopedDebugCollector(inner, component="geocoder")
    scoped.emit("geocode.request", {}, ts=None)
    scoped.emit("geocode.result", {}, ts=None, component="override")
    assert [e["component"] for e in inner.events] == ["geocoder", "override"]


def test_null_collector_noop():
    NullDebugCollector().emit("stage", {"x": 1}, ts=0)
