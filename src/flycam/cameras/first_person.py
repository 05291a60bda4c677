"""Free-fly first-person camera."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence

import numpy as np

from flycam.cameras.basis import WORLD_UP, as_vec3, derive_basis, look_at, readonly
from flycam.config import CameraConfig, load_camera_config
from flycam.input.events import InputDocument, InputSurface, get_document
from flycam.input.keyboard import KeyboardMotion
from flycam.input.pointer import MouseLook, Rotatable
from flycam.input.timers import TimerFactory, make_repeat_timer


logger = logging.getLogger(__name__)


class FirstPersonCamera:
    """Camera with a position and pitch/yaw look direction.

    The basis (``front``, ``right``, ``up``) and the view matrix are derived
    state: every mutator recomputes them before returning, and the view matrix
    is overwritten in place. Accessors return read-only views, so a renderer
    that held on to ``view_matrix`` sees later mutations; read it once per
    frame instead.

    Parameters
    ----------
    position : sequence of 3 floats
        Initial world-space position.
    pitch, yaw : float
        Initial angles in degrees. Neither is clamped or wrapped.
    config : CameraConfig, optional
        Rates and key bindings; defaults to ``load_camera_config()``.
    document : InputDocument, optional
        Key and pointer-move source; defaults to the process-wide document.
    timer_factory : callable, optional
        Builds the held-key repeat timer; defaults to ``RepeatTimer``.
    clock : callable
        Monotonic seconds, used to integrate held-key motion.
    look_target : object with ``rotate(d_pitch, d_yaw)``, optional
        Receives mouse-look rotation; defaults to this camera. A wrapping
        camera passes itself to substitute its own ``rotate``.
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
        look_target: Optional[Rotatable] = None,
    ) -> None:
        self._config = config if config is not None else load_camera_config()
        self._document = document if document is not None else get_document()

        self._position = as_vec3(position, name="position")
        self._pitch = float(pitch)
        self._yaw = float(yaw)
        self._front = np.zeros(3)
        self._right = np.zeros(3)
        self._up = np.zeros(3)
        self._view = np.identity(4)
        self._update_view()

        cfg = self._config
        self._keyboard = KeyboardMotion(
            self,
            self._document,
            bindings=cfg.key_bindings,
            translate_rate=cfg.keyboard_translate_rate,
            interval_s=cfg.repeat_interval_s,
            timer_factory=timer_factory if timer_factory is not None else make_repeat_timer(cfg.prefer_vispy_timer),
            clock=clock,
            log_input=cfg.input_log,
        )
        self._mouse = MouseLook(
            look_target if look_target is not None else self,
            self._document,
            rotate_rate=cfg.mouse_rotate_rate,
            log_input=cfg.input_log,
        )

    # --- Derived state -------------------------------------------------------------
    @property
    def view_matrix(self) -> np.ndarray:
        return readonly(self._view)

    @property
    def position(self) -> np.ndarray:
        return readonly(self._position)

    @property
    def pitch(self) -> float:
        return self._pitch

    @property
    def yaw(self) -> float:
        return self._yaw

    @property
    def front(self) -> np.ndarray:
        return readonly(self._front)

    @property
    def right(self) -> np.ndarray:
        return readonly(self._right)

    @property
    def up(self) -> np.ndarray:
        return readonly(self._up)

    @property
    def config(self) -> CameraConfig:
        return self._config

    @property
    def document(self) -> InputDocument:
        return self._document

    @property
    def keyboard(self) -> KeyboardMotion:
        return self._keyboard

    # --- Mutators ------------------------------------------------------------------
    def set_position(self, x: float, y: float, z: float) -> None:
        self._position[:] = (float(x), float(y), float(z))
        self._update_view()

    def set_rotation(self, pitch: float, yaw: float) -> None:
        self._pitch = float(pitch)
        self._yaw = float(yaw)
        self._update_view()

    def set_pose(self, position: Sequence[float], pitch: float, yaw: float) -> None:
        """Replace position and both angles with a single recompute."""
        self._position[:] = as_vec3(position, name="position")
        self._pitch = float(pitch)
        self._yaw = float(yaw)
        self._update_view()

    def rotate(self, d_pitch: float, d_yaw: float) -> None:
        self._pitch += float(d_pitch)
        self._yaw += float(d_yaw)
        self._update_view()

    def translate(self, offset: Sequence[float]) -> None:
        """Move by a world-space offset."""
        self._position += as_vec3(offset, name="offset")
        self._update_view()

    def translate_relative(self, offset: Sequence[float]) -> None:
        """Move by an offset in camera-local axes.

        ``offset[0]`` runs along ``right`` and ``offset[2]`` along ``front``, using
        the basis as it is before the move. ``offset[1]`` is vertical along world
        up, so rising or sinking never depends on pitch.
        """
        local = as_vec3(offset, name="offset")
        world = self._right * local[0] + WORLD_UP * local[1] + self._front * local[2]
        self._position += world
        self._update_view()

    # --- Listeners -----------------------------------------------------------------
    def add_keyboard_listener(self) -> None:
        self._keyboard.attach()

    def remove_keyboard_listener(self) -> None:
        self._keyboard.detach()

    def add_mouse_listener(self, surface: InputSurface) -> None:
        self._mouse.attach(surface)

    def remove_mouse_listener(self) -> None:
        self._mouse.detach()

    def add_listeners(self, surface: InputSurface) -> None:
        self.add_keyboard_listener()
        self.add_mouse_listener(surface)

    def remove_listeners(self) -> None:
        self.remove_keyboard_listener()
        self.remove_mouse_listener()

    def _update_view(self) -> None:
        front, right, up = derive_basis(self._pitch, self._yaw)
        self._front[:] = front
        self._right[:] = right
        self._up[:] = up
        self._view[...] = look_at(self._position, self._position + self._front, self._up)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "camera pose pos=(%.3f, %.3f, %.3f) pitch=%.2f yaw=%.2f",
                self._position[0],
                self._position[1],
                self._position[2],
                self._pitch,
                self._yaw,
            )

    def __repr__(self) -> str:
        x, y, z = (float(v) for v in self._position)
        return f"{type(self).__name__}(position=({x:g}, {y:g}, {z:g}), pitch={self._pitch:g}, yaw={self._yaw:g})"


__all__ = ["FirstPersonCamera"]
