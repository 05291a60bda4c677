"""Input sources and the controllers that turn input into camera motion.

The Qt bridge is not imported here; use ``flycam.input.qt_bridge`` directly.
"""

from flycam.input.events import InputDocument, InputSurface, get_document
from flycam.input.keyboard import KeyboardMotion
from flycam.input.pointer import MouseLook, WheelZoom
from flycam.input.timers import RepeatTimer, make_repeat_timer

__all__ = [
    "InputDocument",
    "InputSurface",
    "KeyboardMotion",
    "MouseLook",
    "RepeatTimer",
    "WheelZoom",
    "get_document",
    "make_repeat_timer",
]
