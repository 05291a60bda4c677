"""Pointer-lock mouse-look and wheel zoom controllers."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from flycam.input.events import (
    InputDocument,
    InputSurface,
    PointerButtonEvent,
    PointerLockEvent,
    PointerMotionEvent,
    WheelInputEvent,
)


logger = logging.getLogger(__name__)


class Rotatable(Protocol):
    def rotate(self, d_pitch: float, d_yaw: float) -> None: ...


class Zoomable(Protocol):
    def zoom(self, delta: float) -> None: ...


class MouseLook:
    """Toggle pointer lock on mouse press and rotate the target from pointer movement.

    Pitch and yaw deltas are ``rotate_rate`` degrees per full surface extent;
    moving the pointer up looks up.
    """

    def __init__(
        self,
        target: Rotatable,
        document: InputDocument,
        *,
        rotate_rate: float,
        log_input: bool = False,
    ) -> None:
        self._target = target
        self._document = document
        self._rotate_rate = float(rotate_rate)
        self._log_input = bool(log_input)
        self._surface: Optional[InputSurface] = None
        self._looking = False
        self._press_handler = self._on_mouse_press
        self._move_handler = self._on_pointer_move
        self._lock_handler = self._on_pointer_lock_change

    @property
    def surface(self) -> Optional[InputSurface]:
        return self._surface

    @property
    def looking(self) -> bool:
        return self._looking

    def attach(self, surface: InputSurface) -> None:
        if self._surface is surface:
            return
        if self._surface is not None:
            self.detach()
        self._surface = surface
        surface.events.mouse_press.connect(self._press_handler)
        self._document.events.pointer_lock_change.connect(self._lock_handler)
        logger.debug("mouse listener attached to %r", surface)

    def detach(self) -> None:
        surface = self._surface
        self._stop_looking()
        if surface is None:
            return
        surface.events.mouse_press.disconnect(self._press_handler)
        self._document.events.pointer_lock_change.disconnect(self._lock_handler)
        if self._document.pointer_lock_element is surface:
            self._document.exit_pointer_lock()
        self._surface = None
        logger.debug("mouse listener detached from %r", surface)

    def _stop_looking(self) -> None:
        self._document.events.pointer_move.disconnect(self._move_handler)
        self._looking = False

    def _on_mouse_press(self, event: PointerButtonEvent) -> None:
        surface = self._surface
        if surface is None:
            return
        if self._document.pointer_lock_element is not surface:
            surface.request_pointer_lock()
            self._document.events.pointer_move.connect(self._move_handler)
            self._looking = True
        else:
            self._stop_looking()
            self._document.exit_pointer_lock()
        if self._log_input:
            logger.info("mouse press button=%d -> looking=%s", event.button, self._looking)

    def _on_pointer_lock_change(self, event: PointerLockEvent) -> None:
        # Lock lost elsewhere (Escape, another surface): stop listening for moves.
        if self._looking and event.element is not self._surface:
            self._stop_looking()

    def _on_pointer_move(self, event: PointerMotionEvent) -> None:
        surface = self._surface
        if surface is None or self._document.pointer_lock_element is not surface:
            return
        dx, dy = event.movement
        if dx == 0.0 and dy == 0.0:
            return
        width, height = surface.size
        d_pitch = (-dy / max(1, height)) * self._rotate_rate
        d_yaw = (dx / max(1, width)) * self._rotate_rate
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("mouse look dx=%.1f dy=%.1f -> dpitch=%.3f dyaw=%.3f", dx, dy, d_pitch, d_yaw)
        self._target.rotate(d_pitch, d_yaw)


class WheelZoom:
    """Forward nonzero wheel deltas to ``target.zoom``."""

    def __init__(self, target: Zoomable, *, log_input: bool = False) -> None:
        self._target = target
        self._log_input = bool(log_input)
        self._surface: Optional[InputSurface] = None
        self._wheel_handler = self._on_wheel

    @property
    def surface(self) -> Optional[InputSurface]:
        return self._surface

    def attach(self, surface: InputSurface) -> None:
        if self._surface is surface:
            return
        if self._surface is not None:
            self.detach()
        self._surface = surface
        surface.events.mouse_wheel.connect(self._wheel_handler)
        logger.debug("wheel listener attached to %r", surface)

    def detach(self) -> None:
        surface = self._surface
        if surface is None:
            return
        surface.events.mouse_wheel.disconnect(self._wheel_handler)
        self._surface = None
        logger.debug("wheel listener detached from %r", surface)

    def _on_wheel(self, event: WheelInputEvent) -> None:
        if event.delta == 0.0:
            return
        if self._log_input:
            logger.info("wheel delta=%.2f", event.delta)
        self._target.zoom(event.delta)


__all__ = ["MouseLook", "Rotatable", "WheelZoom", "Zoomable"]
