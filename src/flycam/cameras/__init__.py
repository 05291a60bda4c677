"""First-person and orbit cameras."""

from flycam.cameras.first_person import FirstPersonCamera
from flycam.cameras.interface import Camera
from flycam.cameras.orbit import OrbitCamera

__all__ = ["Camera", "FirstPersonCamera", "OrbitCamera"]
