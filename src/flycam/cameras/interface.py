"""Capability interface shared by the fly and orbit cameras."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from flycam.input.events import InputSurface


@runtime_checkable
class Camera(Protocol):
    """What a renderer and its host application may call on a camera.

    Renderers read ``view_matrix`` once per drawn frame and never keep it
    across frames.
    """

    @property
    def view_matrix(self) -> np.ndarray: ...

    def rotate(self, d_pitch: float, d_yaw: float) -> None: ...

    def translate_relative(self, offset: Sequence[float]) -> None: ...

    def set_position(self, x: float, y: float, z: float) -> None: ...

    def set_rotation(self, pitch: float, yaw: float) -> None: ...

    def add_keyboard_listener(self) -> None: ...

    def remove_keyboard_listener(self) -> None: ...

    def add_mouse_listener(self, surface: InputSurface) -> None: ...

    def remove_mouse_listener(self) -> None: ...

    def add_listeners(self, surface: InputSurface) -> None: ...

    def remove_listeners(self) -> None: ...


__all__ = ["Camera"]
