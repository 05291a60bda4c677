"""Cancellable periodic task used for held-key motion.

Prefers VisPy's ``Timer`` for steady cadence, with a fallback to Qt's
``QTimer``. ``start`` is a no-op while running and ``stop`` is safe at any
time, including from inside the callback.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from qtpy import QtCore
from vispy import app as vispy_app  # type: ignore


logger = logging.getLogger(__name__)


class PeriodicTask(Protocol):
    """What ``KeyboardMotion`` needs from a timer."""

    @property
    def running(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], PeriodicTask]


class RepeatTimer:
    def __init__(
        self,
        interval_s: float,
        callback: Callable[[], None],
        *,
        prefer_vispy: bool = True,
    ) -> None:
        self._interval_s = max(0.0, float(interval_s))
        self._callback = callback
        self._prefer_vispy = bool(prefer_vispy)
        # Backend timers are kept after stop(); stop() may run inside their tick.
        self._timer = None
        self._qt_timer = None
        self._running = False
        self._using_vispy = False

    @property
    def interval_s(self) -> float:
        return self._interval_s

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        if self._prefer_vispy:
            try:
                t = vispy_app.Timer(
                    interval=self._interval_s,
                    connect=lambda evt: self._tick(),
                    start=True,
                )
                self._timer = t
                self._using_vispy = True
                logger.debug("RepeatTimer: started vispy.Timer every %.4fs", self._interval_s)
                return
            except Exception:
                logger.debug("RepeatTimer: vispy.Timer failed; falling back to Qt", exc_info=True)
        if self._qt_timer is None:
            qt_timer = QtCore.QTimer()
            qt_timer.setTimerType(QtCore.Qt.PreciseTimer)
            qt_timer.setInterval(int(round(1000.0 * self._interval_s)))
            qt_timer.timeout.connect(self._tick)
            self._qt_timer = qt_timer
        self._qt_timer.start()
        self._timer = self._qt_timer
        self._using_vispy = False
        logger.debug("RepeatTimer: started Qt QTimer every %.4fs", self._interval_s)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._timer is not None:
            self._timer.stop()
        logger.debug("RepeatTimer: stopped (%s)", "vispy" if self._using_vispy else "qt")

    def _tick(self) -> None:
        # A tick already queued by the backend may land after stop().
        if not self._running:
            return
        self._callback()


def make_repeat_timer(prefer_vispy: bool = True) -> TimerFactory:
    """Return a ``TimerFactory`` building ``RepeatTimer``s with the given backend preference."""

    def factory(interval_s: float, callback: Callable[[], None]) -> PeriodicTask:
        return RepeatTimer(interval_s, callback, prefer_vispy=prefer_vispy)

    return factory


__all__ = ["PeriodicTask", "RepeatTimer", "TimerFactory", "make_repeat_timer"]
