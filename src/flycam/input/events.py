"""Input sources consumed by the camera controllers.

``InputDocument`` is the process-wide source (key press/release, pointer
movement, pointer-lock changes). ``InputSurface`` is one interactive widget
(mouse press, wheel) and the scope of pointer lock. Both expose VisPy
``EmitterGroup``s, so listeners attach with ``events.<name>.connect`` and
detach with ``events.<name>.disconnect``. Connecting the same callback twice is
a no-op and disconnecting an unknown callback is harmless.

The Qt bridge (``flycam.input.qt_bridge``) feeds these from real widget
events; headless code and tests call the ``press_key``/``move_pointer``/...
helpers directly.
"""

from __future__ import annotations

import logging
from typing import Optional, Set, Tuple

from vispy.util.event import EmitterGroup, Event


logger = logging.getLogger(__name__)


class KeyInputEvent(Event):
    """Key press or release; ``key`` is the lower-cased key name."""

    def __init__(self, type: str, key: str = "", **kwargs) -> None:  # noqa: A002
        super().__init__(type, **kwargs)
        self.key = str(key).lower()


class PointerMotionEvent(Event):
    """Relative pointer movement in pixels, reported while pointer lock is held."""

    def __init__(self, type: str, movement: Tuple[float, float] = (0.0, 0.0), **kwargs) -> None:  # noqa: A002
        super().__init__(type, **kwargs)
        self.movement = (float(movement[0]), float(movement[1]))


class PointerButtonEvent(Event):
    def __init__(self, type: str, button: int = 1, pos: Tuple[float, float] = (0.0, 0.0), **kwargs) -> None:  # noqa: A002
        super().__init__(type, **kwargs)
        self.button = int(button)
        self.pos = (float(pos[0]), float(pos[1]))


class WheelInputEvent(Event):
    """Wheel delta, positive when scrolling toward the user."""

    def __init__(self, type: str, delta: float = 0.0, **kwargs) -> None:  # noqa: A002
        super().__init__(type, **kwargs)
        self.delta = float(delta)


class PointerLockEvent(Event):
    def __init__(self, type: str, element: Optional["InputSurface"] = None, **kwargs) -> None:  # noqa: A002
        super().__init__(type, **kwargs)
        self.element = element


class InputDocument:
    """Process-wide input source and owner of the pointer-lock state."""

    def __init__(self) -> None:
        self.events = EmitterGroup(
            source=self,
            auto_connect=False,
            key_press=KeyInputEvent,
            key_release=KeyInputEvent,
            pointer_move=PointerMotionEvent,
            pointer_lock_change=PointerLockEvent,
        )
        # Handler bugs must surface, not be logged and dropped.
        self.events.ignore_callback_errors = False
        self._pointer_lock_element: Optional[InputSurface] = None
        self._held: Set[str] = set()

    @property
    def pointer_lock_element(self) -> Optional["InputSurface"]:
        return self._pointer_lock_element

    @property
    def held_keys(self) -> frozenset[str]:
        return frozenset(self._held)

    def press_key(self, key: str) -> bool:
        """Emit ``key_press`` unless ``key`` is already held. Returns whether it fired."""
        name = str(key).lower()
        if name in self._held:
            return False
        self._held.add(name)
        self.events.key_press(key=name)
        return True

    def release_key(self, key: str) -> bool:
        name = str(key).lower()
        if name not in self._held:
            return False
        self._held.discard(name)
        self.events.key_release(key=name)
        return True

    def release_all_keys(self) -> None:
        for name in sorted(self._held):
            self.release_key(name)

    def move_pointer(self, dx: float, dy: float) -> None:
        self.events.pointer_move(movement=(dx, dy))

    def request_pointer_lock(self, surface: "InputSurface") -> None:
        current = self._pointer_lock_element
        if current is surface:
            return
        if current is not None:
            current._release_pointer_lock()
        surface._engage_pointer_lock()
        self._pointer_lock_element = surface
        logger.debug("pointer lock engaged on %r", surface)
        self.events.pointer_lock_change(element=surface)

    def exit_pointer_lock(self) -> None:
        current = self._pointer_lock_element
        if current is None:
            return
        self._pointer_lock_element = None
        current._release_pointer_lock()
        logger.debug("pointer lock released from %r", current)
        self.events.pointer_lock_change(element=None)


_default_document: Optional[InputDocument] = None


def get_document() -> InputDocument:
    """Return the process-wide ``InputDocument``, creating it on first use."""
    global _default_document
    if _default_document is None:
        _default_document = InputDocument()
    return _default_document


class InputSurface:
    """One interactive widget: mouse-press and wheel source, pointer-lock scope.

    The base class is headless; ``size`` is whatever was set last. Backends
    override ``size`` and the ``_engage_pointer_lock``/``_release_pointer_lock``
    hooks.
    """

    def __init__(self, document: Optional[InputDocument] = None, size: Tuple[int, int] = (1, 1)) -> None:
        self.document = document if document is not None else get_document()
        self.events = EmitterGroup(
            source=self,
            auto_connect=False,
            mouse_press=PointerButtonEvent,
            mouse_wheel=WheelInputEvent,
        )
        self.events.ignore_callback_errors = False
        self._size = (int(size[0]), int(size[1]))

    @property
    def size(self) -> Tuple[int, int]:
        return self._size

    @size.setter
    def size(self, value: Tuple[int, int]) -> None:
        self._size = (int(value[0]), int(value[1]))

    @property
    def pointer_locked(self) -> bool:
        return self.document.pointer_lock_element is self

    def request_pointer_lock(self) -> None:
        self.document.request_pointer_lock(self)

    def press(self, button: int = 1, pos: Tuple[float, float] = (0.0, 0.0)) -> None:
        self.events.mouse_press(button=button, pos=pos)

    def wheel(self, delta: float) -> None:
        self.events.mouse_wheel(delta=delta)

    def _engage_pointer_lock(self) -> None:
        pass

    def _release_pointer_lock(self) -> None:
        pass


__all__ = [
    "InputDocument",
    "InputSurface",
    "KeyInputEvent",
    "PointerButtonEvent",
    "PointerLockEvent",
    "PointerMotionEvent",
    "WheelInputEvent",
    "get_document",
]
