"""Environment-derived configuration for the cameras and their input controllers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from flycam.utils.env import env_bool, env_float, env_list


# Local axis slots: 0 follows ``right``, 1 follows world up, 2 follows ``front``.
AXIS_RIGHT = 0
AXIS_UP = 1
AXIS_FRONT = 2

# Movement directions in the order used by FLYCAM_KEYS.
DIRECTIONS: Tuple[str, ...] = ("forward", "back", "left", "right", "up", "down")

# ``right`` is cross(world_up, front), which under the look-at convention points
# to the viewer's left. Strafing left therefore runs along +right.
DIRECTION_AXES: Dict[str, Tuple[int, int]] = {
    "forward": (AXIS_FRONT, +1),
    "back": (AXIS_FRONT, -1),
    "left": (AXIS_RIGHT, +1),
    "right": (AXIS_RIGHT, -1),
    "up": (AXIS_UP, +1),
    "down": (AXIS_UP, -1),
}

DEFAULT_KEYS: Tuple[str, ...] = ("w", "s", "a", "d", "r", "f")


def build_key_bindings(keys: Tuple[str, ...]) -> Dict[str, Tuple[int, int]]:
    """Map key names (lower-cased) to ``(axis, sign)`` in ``DIRECTIONS`` order."""

    if len(keys) != len(DIRECTIONS):
        raise ValueError(
            f"expected {len(DIRECTIONS)} keys ({', '.join(DIRECTIONS)}), got {len(keys)}"
        )
    bindings: Dict[str, Tuple[int, int]] = {}
    for direction, key in zip(DIRECTIONS, keys):
        name = key.strip().lower()
        if not name:
            raise ValueError(f"empty key name for direction {direction!r}")
        if name in bindings:
            raise ValueError(f"key {name!r} bound to more than one direction")
        bindings[name] = DIRECTION_AXES[direction]
    return bindings


def _validate_bindings(bindings: Mapping[str, Tuple[int, int]]) -> None:
    for key, (axis, sign) in bindings.items():
        if axis not in (AXIS_RIGHT, AXIS_UP, AXIS_FRONT):
            raise ValueError(f"key {key!r} bound to unknown axis {axis!r}")
        if sign not in (-1, 1):
            raise ValueError(f"key {key!r} bound with sign {sign!r}; expected -1 or 1")


@dataclass(frozen=True)
class CameraConfig:
    """Rates and bindings shared by ``FirstPersonCamera`` and ``OrbitCamera``."""

    keyboard_translate_rate: float = 10.0
    # Degrees of rotation for a pointer sweep across the full surface extent.
    mouse_rotate_rate: float = math.radians(5000.0)
    zoom_rate: float = 0.025
    repeat_interval_s: float = 0.004
    prefer_vispy_timer: bool = True
    input_log: bool = False
    key_bindings: Mapping[str, Tuple[int, int]] = field(
        default_factory=lambda: build_key_bindings(DEFAULT_KEYS)
    )

    def __post_init__(self) -> None:
        _validate_bindings(self.key_bindings)


def load_camera_config() -> CameraConfig:
    """Resolve ``FLYCAM_*`` environment variables into a ``CameraConfig``."""

    defaults = CameraConfig()
    translate_rate = float(env_float("FLYCAM_KEYBOARD_TRANSLATE_RATE", defaults.keyboard_translate_rate))
    rotate_rate = float(env_float("FLYCAM_MOUSE_ROTATE_RATE", defaults.mouse_rotate_rate))
    zoom_rate = float(env_float("FLYCAM_ZOOM_RATE", defaults.zoom_rate))
    interval_ms = float(env_float("FLYCAM_REPEAT_INTERVAL_MS", defaults.repeat_interval_s * 1000.0))
    prefer_vispy = env_bool("FLYCAM_VISPY_TIMER", defaults.prefer_vispy_timer)
    input_log = env_bool("FLYCAM_INPUT_LOG", defaults.input_log)
    keys = env_list("FLYCAM_KEYS", DEFAULT_KEYS)

    return CameraConfig(
        keyboard_translate_rate=translate_rate,
        mouse_rotate_rate=rotate_rate,
        zoom_rate=zoom_rate,
        repeat_interval_s=max(0.0, interval_ms) / 1000.0,
        prefer_vispy_timer=prefer_vispy,
        input_log=input_log,
        key_bindings=build_key_bindings(keys),
    )


__all__ = [
    "AXIS_FRONT",
    "AXIS_RIGHT",
    "AXIS_UP",
    "CameraConfig",
    "DEFAULT_KEYS",
    "DIRECTIONS",
    "build_key_bindings",
    "load_camera_config",
]
