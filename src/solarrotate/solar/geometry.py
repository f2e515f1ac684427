"""Sun direction vectors, rigid rotations about a pivot, and point-set geometry.

Frame: right-handed, East = +X, North = +Y, Up = +Z.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from solarrotate.core.models import SunPosition

NORTH = np.array([0.0, 1.0, 0.0])
EAST = np.array([1.0, 0.0, 0.0])
UP = np.array([0.0, 0.0, 1.0])

_EPS = 1e-12


def sun_direction(position: SunPosition) -> np.ndarray:
    """Unit vector pointing from the observer towards the sun."""
    az = math.radians(position.azimuth_deg)
    alt = math.radians(position.altitude_deg)
    return np.array(
        [
            math.cos(alt) * math.sin(az),
            math.cos(alt) * math.cos(az),
            math.sin(alt),
        ]
    )


def _as_vector(value: Sequence[float], name: str) -> np.ndarray:
    vec = np.asarray(value, dtype=float)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have exactly three components")
    return vec


def _unit(vec: np.ndarray, name: str) -> np.ndarray:
    norm = np.linalg.norm(vec)
    if norm < _EPS:
        raise ValueError(f"{name} must be non-zero")
    return vec / norm


def _axis_angle_matrix(axis: np.ndarray, angle: float) -> np.ndarray:
    """3x3 Rodrigues rotation (right-hand rule) about a unit axis."""
    x, y, z = axis
    k = np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])
    return np.eye(3) + math.sin(angle) * k + (1.0 - math.cos(angle)) * (k @ k)


@dataclass(frozen=True)
class RotationTransform:
    """Rigid rotation about a pivot as a 4x4 homogeneous matrix."""

    matrix: np.ndarray

    def __post_init__(self):
        m = np.asarray(self.matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError("matrix must be 4x4")
        object.__setattr__(self, "matrix", m)

    @staticmethod
    def _about_pivot(rot: np.ndarray, pivot: Sequence[float]) -> "RotationTransform":
        p = _as_vector(pivot, "pivot")
        m = np.eye(4)
        m[:3, :3] = rot
        # translate(p) . R . translate(-p)
        m[:3, 3] = p - rot @ p
        return RotationTransform(m)

    @classmethod
    def identity(cls) -> "RotationTransform":
        return cls(np.eye(4))

    @classmethod
    def about_axis(cls, angle_rad: float, axis: Sequence[float], pivot: Sequence[float] = (0.0, 0.0, 0.0)) -> "RotationTransform":
        unit_axis = _unit(_as_vector(axis, "axis"), "axis")
        return cls._about_pivot(_axis_angle_matrix(unit_axis, angle_rad), pivot)

    @classmethod
    def between(
        cls,
        from_vec: Sequence[float],
        to_vec: Sequence[float],
        pivot: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> "RotationTransform":
        """Smallest rotation taking the direction of ``from_vec`` onto ``to_vec``.

        Opposite directions have no unique smallest rotation; a half turn about Up
        is used when Up is perpendicular to ``from_vec`` (the North reference case),
        otherwise about any axis perpendicular to it.
        """
        a = _unit(_as_vector(from_vec, "from_vec"), "from_vec")
        b = _unit(_as_vector(to_vec, "to_vec"), "to_vec")
        cross = np.cross(a, b)
        sin_angle = float(np.linalg.norm(cross))
        cos_angle = float(np.dot(a, b))

        if sin_angle < 1e-9:
            if cos_angle > 0:
                return cls._about_pivot(np.eye(3), pivot)
            # EAST is perpendicular to UP, so the cross product is non-zero here.
            axis = UP if abs(float(np.dot(a, UP))) < 1e-9 else np.cross(a, EAST)
            return cls._about_pivot(_axis_angle_matrix(_unit(axis, "axis"), math.pi), pivot)

        angle = math.atan2(sin_angle, cos_angle)
        return cls._about_pivot(_axis_angle_matrix(cross / sin_angle, angle), pivot)

    @property
    def rotation(self) -> np.ndarray:
        return self.matrix[:3, :3]

    @property
    def translation(self) -> np.ndarray:
        return self.matrix[:3, 3]

    def apply_points(self, points: np.ndarray) -> np.ndarray:
        pts = np.asarray(points, dtype=float).reshape(-1, 3)
        return pts @ self.rotation.T + self.translation

    def apply_vector(self, vector: Sequence[float]) -> np.ndarray:
        return self.rotation @ _as_vector(vector, "vector")

    def inverse(self) -> "RotationTransform":
        rot_t = self.rotation.T
        m = np.eye(4)
        m[:3, :3] = rot_t
        m[:3, 3] = -rot_t @ self.translation
        return RotationTransform(m)

    def __matmul__(self, other: "RotationTransform") -> "RotationTransform":
        return RotationTransform(self.matrix @ other.matrix)

    def is_rigid(self, tol: float = 1e-9) -> bool:
        rot = self.rotation
        return bool(
            np.allclose(rot @ rot.T, np.eye(3), atol=tol)
            and abs(np.linalg.det(rot) - 1.0) < tol
            and np.allclose(self.matrix[3], [0.0, 0.0, 0.0, 1.0], atol=tol)
        )

    def to_list(self) -> List[List[float]]:
        return self.matrix.tolist()


@dataclass
class Geometry:
    """A set of 3D points (vertices, control points, a marker...)."""

    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))

    def __post_init__(self):
        pts = np.array(self.points, dtype=float)
        if pts.size == 0:
            pts = pts.reshape(0, 3)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError("points must be an (N, 3) array")
        self.points = pts

    @classmethod
    def north_marker(cls) -> "Geometry":
        """Unit segment from the origin towards North."""
        return cls(np.array([[0.0, 0.0, 0.0], NORTH]))

    def duplicate(self) -> "Geometry":
        return Geometry(self.points.copy())

    def transform(self, xform: RotationTransform) -> None:
        """Transform in place."""
        self.points = xform.apply_points(self.points)

    def transformed(self, xform: RotationTransform) -> "Geometry":
        dup = self.duplicate()
        dup.transform(xform)
        return dup

    def to_list(self) -> List[List[float]]:
        return self.points.tolist()


__all__ = ["NORTH", "EAST", "UP", "sun_direction", "RotationTransform", "Geometry"]
