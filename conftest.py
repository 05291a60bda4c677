from __future__ import annotations

import os
from typing import Callable, List

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from flycam.config import CameraConfig  # noqa: E402
from flycam.input.events import InputDocument, InputSurface  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += float(seconds)


class ManualTimer:
    """Periodic task fired by hand through ``fire()``."""

    def __init__(self, interval_s: float, callback: Callable[[], None]) -> None:
        self.interval_s = interval_s
        self._callback = callback
        self.running = False
        self.starts = 0
        self.stops = 0

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self.starts += 1

    def stop(self) -> None:
        if self.running:
            self.stops += 1
        self.running = False

    def fire(self) -> None:
        if self.running:
            self._callback()


class ManualTimerFactory:
    def __init__(self) -> None:
        self.created: List[ManualTimer] = []

    def __call__(self, interval_s: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval_s, callback)
        self.created.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.created[-1]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture
def document() -> InputDocument:
    return InputDocument()


@pytest.fixture
def surface(document: InputDocument) -> InputSurface:
    return InputSurface(document, size=(800, 600))


@pytest.fixture
def config() -> CameraConfig:
    return CameraConfig()


@pytest.fixture
def camera_kwargs(config, document, timers, clock):  # type: ignore[no-untyped-def]
    return {
        "config": config,
        "document": document,
        "timer_factory": timers,
        "clock": clock,
    }
