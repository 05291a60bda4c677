"""Orbit camera: pitch/yaw swing the camera around a pivot at a fixed radius."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence

import numpy as np

from flycam.cameras.basis import derive_front, readonly
from flycam.cameras.first_person import FirstPersonCamera
from flycam.config import CameraConfig
from flycam.input.events import InputDocument, InputSurface
from flycam.input.keyboard import KeyboardMotion
from flycam.input.pointer import WheelZoom
from flycam.input.timers import TimerFactory


logger = logging.getLogger(__name__)


class OrbitCamera:
    """Camera that orbits ``origin`` at ``distance`` and zooms along its look axis.

    Pose state, held-key motion and mouse-look come from a wrapped
    ``FirstPersonCamera``, whose mouse-look rotates this camera.
    ``rotate`` is replaced: the point currently looked at becomes the pivot,
    the angles change, and the camera is placed back on the sphere of radius
    ``distance`` around that pivot, looking at it. ``distance`` only changes
    on zoom.
    """

    def __init__(
        self,
        position: Sequence[float],
        pitch: float,
        yaw: float,
        *,
        config: Optional[CameraConfig] = None,
        document: Optional[InputDocument] = None,
        timer_factory: Optional[TimerFactory] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._camera = FirstPersonCamera(
            position,
            pitch,
            yaw,
            config=config,
            document=document,
            timer_factory=timer_factory,
            clock=clock,
            look_target=self,
        )
        cfg = self._camera.config
        self._zoom_rate = float(cfg.zoom_rate)
        self._origin = np.zeros(3)
        self._distance = float(np.linalg.norm(self._camera.position - self._origin))
        self._wheel = WheelZoom(self, log_input=cfg.input_log)

    # --- Derived state -------------------------------------------------------------
    @property
    def view_matrix(self) -> np.ndarray:
        return self._camera.view_matrix

    @property
    def position(self) -> np.ndarray:
        return self._camera.position

    @property
    def pitch(self) -> float:
        return self._camera.pitch

    @property
    def yaw(self) -> float:
        return self._camera.yaw

    @property
    def front(self) -> np.ndarray:
        return self._camera.front

    @property
    def right(self) -> np.ndarray:
        return self._camera.right

    @property
    def up(self) -> np.ndarray:
        return self._camera.up

    @property
    def origin(self) -> np.ndarray:
        return readonly(self._origin)

    @property
    def distance(self) -> float:
        return self._distance

    @property
    def config(self) -> CameraConfig:
        return self._camera.config

    @property
    def keyboard(self) -> KeyboardMotion:
        return self._camera.keyboard

    # --- Mutators ------------------------------------------------------------------
    def set_position(self, x: float, y: float, z: float) -> None:
        self._camera.set_position(x, y, z)

    def set_rotation(self, pitch: float, yaw: float) -> None:
        self._camera.set_rotation(pitch, yaw)

    def translate(self, offset: Sequence[float]) -> None:
        self._camera.translate(offset)

    def translate_relative(self, offset: Sequence[float]) -> None:
        self._camera.translate_relative(offset)

    def rotate(self, d_pitch: float, d_yaw: float) -> None:
        cam = self._camera
        self._origin[:] = cam.position + cam.front * self._distance
        pitch = cam.pitch + float(d_pitch)
        yaw = cam.yaw + float(d_yaw)
        origin_front = -derive_front(pitch, yaw)
        position = self._origin + origin_front * self._distance
        cam.set_pose(position, pitch, yaw)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "orbit rotate dpitch=%.3f dyaw=%.3f origin=%s distance=%.4f",
                float(d_pitch),
                float(d_yaw),
                self._origin.tolist(),
                self._distance,
            )

    def zoom(self, delta: float) -> None:
        """Dolly along the look axis; positive ``delta`` backs away from the pivot."""
        if delta == 0.0:
            return
        cam = self._camera
        velocity = float(delta) * self._zoom_rate
        position = cam.position - cam.front * velocity
        self._distance = float(np.linalg.norm(position - self._origin))
        cam.set_pose(position, cam.pitch, cam.yaw)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("orbit zoom delta=%.3f distance=%.4f", float(delta), self._distance)

    # --- Listeners -----------------------------------------------------------------
    def add_keyboard_listener(self) -> None:
        self._camera.add_keyboard_listener()

    def remove_keyboard_listener(self) -> None:
        self._camera.remove_keyboard_listener()

    def add_mouse_listener(self, surface: InputSurface) -> None:
        self._camera.add_mouse_listener(surface)
        self._wheel.attach(surface)

    def remove_mouse_listener(self) -> None:
        self._camera.remove_mouse_listener()
        self._wheel.detach()

    def add_listeners(self, surface: InputSurface) -> None:
        self.add_keyboard_listener()
        self.add_mouse_listener(surface)

    def remove_listeners(self) -> None:
        self.remove_keyboard_listener()
        self.remove_mouse_listener()

    def __repr__(self) -> str:
        x, y, z = (float(v) for v in self._camera.position)
        return (
            f"OrbitCamera(position=({x:g}, {y:g}, {z:g}), pitch={self.pitch:g}, "
            f"yaw={self.yaw:g}, distance={self._distance:g})"
        )


__all__ = ["OrbitCamera"]
