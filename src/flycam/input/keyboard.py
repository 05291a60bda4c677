"""Held-key accumulator that turns key state into continuous camera motion."""

from __future__ import annotations

import logging
import time
from typing import Callable, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np

from flycam.input.events import InputDocument, KeyInputEvent
from flycam.input.timers import PeriodicTask, TimerFactory, make_repeat_timer


logger = logging.getLogger(__name__)


class Translatable(Protocol):
    def translate_relative(self, offset: Sequence[float]) -> None: ...


class KeyboardMotion:
    """Integrate held movement keys into ``translate_relative`` calls.

    Each local axis has a positive and a negative slot. A press sets the bound
    slot to ``translate_rate`` and a release clears it. While any slot is set a
    repeat timer runs; each tick moves the target by
    ``(positive - negative) * elapsed_seconds``. The timer starts on the
    transition from no key held to some key held and stops once every slot is
    clear again.
    """

    def __init__(
        self,
        target: Translatable,
        document: InputDocument,
        *,
        bindings: Mapping[str, Tuple[int, int]],
        translate_rate: float,
        interval_s: float,
        timer_factory: Optional[TimerFactory] = None,
        clock: Callable[[], float] = time.perf_counter,
        log_input: bool = False,
    ) -> None:
        self._target = target
        self._document = document
        self._bindings = {str(k).lower(): (int(a), int(s)) for k, (a, s) in bindings.items()}
        self._translate_rate = float(translate_rate)
        self._clock = clock
        self._log_input = bool(log_input)
        factory = timer_factory if timer_factory is not None else make_repeat_timer()
        self._timer: PeriodicTask = factory(float(interval_s), self.tick)

        self.positive = np.zeros(3)
        self.negative = np.zeros(3)
        self.last_time = 0.0

        self._attached = False
        self._press_handler = self._on_key_press
        self._release_handler = self._on_key_release

    @property
    def attached(self) -> bool:
        return self._attached

    @property
    def active(self) -> bool:
        return bool(np.any(self.positive != 0.0) or np.any(self.negative != 0.0))

    @property
    def net(self) -> np.ndarray:
        return self.positive - self.negative

    def attach(self) -> None:
        if self._attached:
            return
        self._document.events.key_press.connect(self._press_handler)
        self._document.events.key_release.connect(self._release_handler)
        self._attached = True
        logger.debug("keyboard listener attached to %r", self._document)

    def detach(self) -> None:
        self._document.events.key_press.disconnect(self._press_handler)
        self._document.events.key_release.disconnect(self._release_handler)
        self.positive[:] = 0.0
        self.negative[:] = 0.0
        self._timer.stop()
        if self._attached:
            logger.debug("keyboard listener detached from %r", self._document)
        self._attached = False

    def press(self, key: str) -> bool:
        """Set the slot bound to ``key``. Returns False for unbound keys."""
        binding = self._bindings.get(str(key).lower())
        if binding is None:
            return False
        axis, sign = binding
        slots = self.positive if sign > 0 else self.negative
        slots[axis] = self._translate_rate
        if self.active and not self._timer.running:
            self.last_time = self._clock()
            self._timer.start()
        return True

    def release(self, key: str) -> bool:
        binding = self._bindings.get(str(key).lower())
        if binding is None:
            return False
        axis, sign = binding
        slots = self.positive if sign > 0 else self.negative
        slots[axis] = 0.0
        if not self.active:
            self._timer.stop()
        return True

    def tick(self) -> None:
        if not self.active:
            self._timer.stop()
            return
        now = self._clock()
        elapsed = now - self.last_time
        self.last_time = now
        offset = self.net * elapsed
        self._target.translate_relative(offset)

    def _on_key_press(self, event: KeyInputEvent) -> None:
        handled = self.press(event.key)
        if self._log_input and handled:
            logger.info("key press %r -> net=%s", event.key, self.net.tolist())

    def _on_key_release(self, event: KeyInputEvent) -> None:
        handled = self.release(event.key)
        if self._log_input and handled:
            logger.info("key release %r -> net=%s", event.key, self.net.tolist())


__all__ = ["KeyboardMotion", "Translatable"]
