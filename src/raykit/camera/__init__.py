"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera with look-at positioning

The camera frame is computed on the host with NumPy, uploaded into
module-level Taichi fields by setup_camera() and read by get_ray()/get_pixel_ray() inside
kernels. Every generated ray carries a unit direction.
"""

from .pinhole import (
    CameraFrame,
    PinholeCamera,
    compute_camera_frame,
    get_camera_info,
    get_pixel_ray,
    get_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "CameraFrame",
    "compute_camera_frame",
    "setup_camera",
    "get_ray",
    "get_pixel_ray",
    "get_camera_info",
]
