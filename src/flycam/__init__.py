"""
flycam: first-person and orbit cameras for interactive 3D viewers

Cameras keep a position and pitch/yaw orientation, derive a look-at view
matrix from it, and turn keyboard, pointer-lock and wheel input into motion.
"""

from flycam.cameras import Camera, FirstPersonCamera, OrbitCamera
from flycam.config import CameraConfig, load_camera_config
from flycam.input import InputDocument, InputSurface, get_document

__version__ = "0.1.0"

__all__ = [
    "Camera",
    "CameraConfig",
    "FirstPersonCamera",
    "InputDocument",
    "InputSurface",
    "OrbitCamera",
    "get_document",
    "load_camera_config",
    "__version__",
]
