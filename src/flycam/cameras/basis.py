"""Pure camera math: orientation basis and look-at view matrix.

Angles enter in degrees and are converted to radians here and nowhere else.
Matrices use the column-vector convention (``view @ [x, y, z, 1]``); the
values match gl-matrix ``mat4.lookAt`` read in row-major order.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np


WORLD_UP = np.array([0.0, 1.0, 0.0])
_EPS = 1e-6


def as_vec3(value: Sequence[float], *, name: str = "vector") -> np.ndarray:
    """Copy ``value`` into a fresh float64 3-vector."""
    arr = np.array(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got {arr.shape[0]}")
    return arr


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along ``v``; a zero vector stays zero."""
    n = float(np.linalg.norm(v))
    if n > 0.0:
        return v / n
    return np.zeros(3)


def derive_front(pitch: float, yaw: float) -> np.ndarray:
    p = math.radians(float(pitch))
    y = math.radians(float(yaw))
    front = np.array([
        math.cos(p) * math.cos(y),
        math.sin(p),
        math.cos(p) * math.sin(y),
    ])
    return normalize(front)


def derive_basis(pitch: float, yaw: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(front, right, up)`` for the given angles in degrees.

    ``right = cross(world_up, front)`` and ``up = cross(front, right)``. At
    pitch = ±90° front matches world up except for rounding. ``right`` then
    normalises the tiny residual cross product: still a unit vector, with a
    direction set by yaw. No correction is applied.
    """
    front = derive_front(pitch, yaw)
    right = normalize(np.cross(WORLD_UP, front))
    up = normalize(np.cross(front, right))
    return front, right, up


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` toward ``target``."""

    eye = np.asarray(eye, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)

    if np.all(np.abs(eye - target) < _EPS):
        return np.identity(4)

    z = normalize(eye - target)
    x = normalize(np.cross(up, z))
    y = normalize(np.cross(z, x))

    view = np.identity(4)
    view[0, :3] = x
    view[1, :3] = y
    view[2, :3] = z
    view[0, 3] = -float(np.dot(x, eye))
    view[1, 3] = -float(np.dot(y, eye))
    view[2, 3] = -float(np.dot(z, eye))
    return view


def readonly(arr: np.ndarray) -> np.ndarray:
    """Read-only view over ``arr``; later in-place writes to ``arr`` show through."""
    out = arr.view()
    out.flags.writeable = False
    return out


__all__ = [
    "WORLD_UP",
    "as_vec3",
    "derive_basis",
    "derive_front",
    "look_at",
    "normalize",
    "readonly",
]
