"""Qt event filters feeding ``InputDocument`` and ``InputSurface``.

``QtInputDocument`` filters application-wide key events into the document.
``QtSurface`` wraps one widget: mouse press and wheel become surface events,
and pointer lock is emulated by grabbing the mouse, hiding the cursor and
re-centring it after every move so movement deltas never hit the screen edge.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from qtpy import QtCore, QtGui, QtWidgets  # type: ignore

from flycam.input.events import InputDocument, InputSurface, get_document


logger = logging.getLogger(__name__)

# Qt reports 120 angle units per wheel notch; browsers report ~100 px per notch.
_ANGLE_UNITS_PER_NOTCH = 120.0
_PIXELS_PER_NOTCH = 100.0


def _pointer_xy(event) -> Tuple[float, float]:  # type: ignore[no-untyped-def]
    """Return pointer coordinates, asserting the Qt event exposes them."""

    if hasattr(event, 'position'):
        pos = event.position()
        assert pos is not None, "pointer event returned None from position()"
        return float(pos.x()), float(pos.y())
    assert hasattr(event, 'pos'), "pointer event missing position()/pos()"
    pos = event.pos()
    assert pos is not None, "pointer event returned None from pos()"
    return float(pos.x()), float(pos.y())


def _enum_int(value) -> int:  # type: ignore[no-untyped-def]
    return int(getattr(value, 'value', value))


def key_name(event) -> str:  # type: ignore[no-untyped-def]
    """Lower-cased key name for a ``QKeyEvent`` (``'w'``, ``'esc'``, ...)."""
    key = _enum_int(event.key())
    name = QtGui.QKeySequence(key).toString()
    if not name:
        name = str(event.text())
    return name.lower()


def wheel_delta(event) -> float:  # type: ignore[no-untyped-def]
    """Vertical wheel delta in browser convention: positive scrolls toward the user."""
    pixel_delta = event.pixelDelta()
    py = float(pixel_delta.y()) if pixel_delta is not None else 0.0
    if py != 0.0:
        return -py
    angle_delta = event.angleDelta()
    assert angle_delta is not None, "wheel event missing angleDelta()"
    return -float(angle_delta.y()) / _ANGLE_UNITS_PER_NOTCH * _PIXELS_PER_NOTCH


class QtInputDocument(QtCore.QObject):  # type: ignore[misc]
    """Application-level event filter translating key events for an ``InputDocument``.

    - Auto-repeat presses and releases are dropped; the document already
      ignores a press of a held key.
    - Escape exits pointer lock.
    - Application deactivation releases every held key, since the matching
      key releases go to another application.
    """

    def __init__(
        self,
        document: Optional[InputDocument] = None,
        app: Optional[QtCore.QCoreApplication] = None,
        *,
        log_input: bool = False,
    ) -> None:
        super().__init__()
        self.document = document if document is not None else get_document()
        self._app = app if app is not None else QtWidgets.QApplication.instance()
        assert self._app is not None, "QtInputDocument requires a running QApplication"
        self._log_input = bool(log_input)
        self._app.installEventFilter(self)
        self._installed = True

    def close(self) -> None:
        if not self._installed:
            return
        self._app.removeEventFilter(self)
        self._installed = False
        self.document.release_all_keys()
        logger.debug("QtInputDocument: event filter removed")

    def eventFilter(self, obj, event):  # type: ignore[no-untyped-def]
        event_type = event.type()

        if event_type in (QtCore.QEvent.KeyPress, QtCore.QEvent.KeyRelease):  # type: ignore[attr-defined]
            if event.isAutoRepeat():
                return False
            name = key_name(event)
            if not name:
                return False
            if event_type == QtCore.QEvent.KeyPress:  # type: ignore[attr-defined]
                if _enum_int(event.key()) == _enum_int(QtCore.Qt.Key_Escape):
                    self.document.exit_pointer_lock()
                fired = self.document.press_key(name)
            else:
                fired = self.document.release_key(name)
            if self._log_input and fired:
                logger.info("key %s: %r", "press" if event_type == QtCore.QEvent.KeyPress else "release", name)
            return False

        if event_type == QtCore.QEvent.ApplicationDeactivate:  # type: ignore[attr-defined]
            self.document.release_all_keys()
            self.document.exit_pointer_lock()
            return False

        return False


class _SurfaceEventFilter(QtCore.QObject):  # type: ignore[misc]
    def __init__(self, surface: "QtSurface", widget: QtWidgets.QWidget) -> None:  # type: ignore[valid-type]
        super().__init__(widget)
        self._surface = surface
        self._widget = widget

    def eventFilter(self, obj, event):  # type: ignore[no-untyped-def]
        if obj is not self._widget:
            return False
        event_type = event.type()
        if event_type == QtCore.QEvent.MouseButtonPress:  # type: ignore[attr-defined]
            return self._surface._handle_mouse_press(event)
        if event_type == QtCore.QEvent.Wheel:  # type: ignore[attr-defined]
            return self._surface._handle_wheel(event)
        if event_type == QtCore.QEvent.MouseMove:  # type: ignore[attr-defined]
            return self._surface._handle_mouse_move(event)
        return False


class QtSurface(InputSurface):
    """``InputSurface`` backed by a ``QWidget`` (e.g. a VisPy canvas' ``native``)."""

    def __init__(
        self,
        widget: QtWidgets.QWidget,  # type: ignore[valid-type]
        document: Optional[InputDocument] = None,
        *,
        log_input: bool = False,
    ) -> None:
        super().__init__(document)
        self._widget = widget
        self._log_input = bool(log_input)
        self._filter = _SurfaceEventFilter(self, widget)
        widget.installEventFilter(self._filter)
        widget.setMouseTracking(True)

    @property
    def widget(self) -> QtWidgets.QWidget:  # type: ignore[valid-type]
        return self._widget

    @property
    def size(self) -> Tuple[int, int]:
        return int(self._widget.width()), int(self._widget.height())

    def close(self) -> None:
        if self.pointer_locked:
            self.document.exit_pointer_lock()
        self._widget.removeEventFilter(self._filter)
        logger.debug("QtSurface: event filter removed from %r", self._widget)

    # --- Pointer lock --------------------------------------------------------------
    def _center(self) -> QtCore.QPoint:
        return QtCore.QPoint(int(self._widget.width()) // 2, int(self._widget.height()) // 2)

    def _recenter_cursor(self) -> None:
        QtGui.QCursor.setPos(self._widget.mapToGlobal(self._center()))

    def _engage_pointer_lock(self) -> None:
        self._widget.grabMouse()
        self._widget.setCursor(QtGui.QCursor(QtCore.Qt.BlankCursor))
        self._recenter_cursor()

    def _release_pointer_lock(self) -> None:
        self._widget.releaseMouse()
        self._widget.unsetCursor()

    # --- Event handling ------------------------------------------------------------
    def _handle_mouse_press(self, ev) -> bool:  # type: ignore[no-untyped-def]
        x, y = _pointer_xy(ev)
        button = _enum_int(ev.button())
        if self._log_input:
            logger.info("mouse press button=%d pos=(%.1f,%.1f)", button, x, y)
        self.press(button=button, pos=(x, y))
        return False

    def _handle_wheel(self, ev) -> bool:  # type: ignore[no-untyped-def]
        delta = wheel_delta(ev)
        if delta == 0.0:
            return False
        if self._log_input:
            logger.info("wheel delta=%.2f", delta)
        self.wheel(delta)
        ev.accept()
        return True

    def _handle_mouse_move(self, ev) -> bool:  # type: ignore[no-untyped-def]
        if not self.pointer_locked:
            return False
        x, y = _pointer_xy(ev)
        center = self._center()
        dx = x - float(center.x())
        dy = y - float(center.y())
        if dx == 0.0 and dy == 0.0:
            # Echo of our own re-centring.
            return True
        self.document.move_pointer(dx, dy)
        self._recenter_cursor()
        return True


__all__ = ["QtInputDocument", "QtSurface", "key_name", "wheel_delta"]
