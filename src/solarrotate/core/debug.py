"""Deterministic debug collectors for structured JSON events.

Every stage of an evaluation (cache decisions, geocoder traffic, sun position)
is reported through a collector instead of free-form log lines, so a run can be
audited from a single file.
"""
from __future__ import annotations

import datetime as _dt
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol


class DebugCollector(Protocol):
    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any, component: Optional[str] = None) -> None:
        ...


def _json_safe(val: Any) -> Any:
    """Convert datetimes, tuples and numpy scalars/arrays to JSON-friendly values."""
    if isinstance(val, (_dt.datetime, _dt.date, _dt.time)):
        return val.isoformat()
    if hasattr(val, "tolist"):
        return val.tolist()
    if isinstance(val, tuple):
        return [_json_safe(v) for v in val]
    return val


def _ordered(obj: Any) -> Any:
    """Recursively order mappings for deterministic JSON dumps."""
    if isinstance(obj, dict):
        return {k: _ordered(obj[k]) for k in sorted(obj)}
    if isinstance(obj, (list, tuple)):
        return [_ordered(v) for v in obj]
    return _json_safe(obj)


def _event(stage: str, payload: Dict[str, Any], ts: Any, component: Optional[str]) -> Dict[str, Any]:
    return {
        "stage": stage,
        "ts": _json_safe(ts),
        "component": component,
        "payload": _ordered(payload),
    }


class NullDebugCollector:
    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any, component: Optional[str] = None) -> None:  # noqa: D401
        """Discard events (no-op)."""
        return


@dataclass
class ListDebugCollector:
    events: List[Dict[str, Any]] = field(default_factory=list)

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any, component: Optional[str] = None) -> None:
        self.events.append(_event(stage, payload, ts, component))

    def stages(self) -> List[str]:
        return [e["stage"] for e in self.events]


class JsonlDebugWriter:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8")

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any, component: Optional[str] = None) -> None:
        json.dump(_event(stage, payload, ts, component), self._fh, sort_keys=True)
        self._fh.write("\n")
        self._fh.flush()

    def finalize(self) -> None:
        self._fh.close()


class JsonDebugWriter:
    """Collect all events in memory then write a single JSON array.

    Used when the ``--debug`` path ends with ``.json``.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._events: List[Dict[str, Any]] = []

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any, component: Optional[str] = None) -> None:
        self._events.append(_event(stage, payload, ts, component))

    def finalize(self) -> None:
        """Write collected events as a single JSON document."""
        self.path.write_text(json.dumps(self._events, indent=2, sort_keys=True))


def build_debug_collector(path: str | Path) -> JsonlDebugWriter | JsonDebugWriter:
    """Factory: .json → JsonDebugWriter, otherwise JsonlDebugWriter."""
    if str(path).lower().endswith(".json"):
        return JsonDebugWriter(path)
    return JsonlDebugWriter(path)


class ScopedDebugCollector:
    """Wrapper that injects a fixed component name into every emit."""

    def __init__(self, inner: DebugCollector, *, component: str):
        self.inner = inner
        self.component = component

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any, component: Optional[str] = None) -> None:
        self.inner.emit(stage, payload, ts=ts, component=component if component is not None else self.component)


__all__ = [
    "DebugCollector",
    "NullDebugCollector",
    "ListDebugCollector",
    "JsonlDebugWriter",
    "JsonDebugWriter",
    "build_debug_collector",
    "ScopedDebugCollector",
]
