"""Pinhole camera for primary rays.

A camera is described on the host by a PinholeCamera and turned into a
CameraFrame with NumPy. setup_camera() uploads the frame into module-level
Taichi fields, from which get_ray() and get_pixel_ray() build rays inside
kernels. All rays start at lookfrom and carry a unit direction.

Frame conventions:
    w   unit vector from lookat back to lookfrom
    u   unit vector to the right of the image
    v   unit vector toward the top of the image

The image plane sits at distance 1 in front of the camera; (u, v) image
coordinates run from the lower-left (0, 0) to the upper-right (1, 1) corner.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykit.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>> setup_camera(PinholeCamera(
    ...     lookfrom=(0.0, 1.0, 4.0),
    ...     lookat=(0.0, 0.0, -1.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=45.0,
    ...     aspect_ratio=2.0,
    ... ))
    >>> @ti.kernel
    ... def trace():
    ...     ray = get_ray(0.5, 0.5)  # Looks straight at lookat
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from raykit.core.ray import Ray, make_ray


@dataclass
class PinholeCamera:
    """View parameters of a pinhole camera.

    Attributes:
        lookfrom: Eye position (x, y, z).
        lookat: Point in the center of the view (x, y, z).
        vup: World-space up hint; must not be parallel to the view direction.
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Image width over image height.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float


@dataclass(frozen=True)
class CameraFrame:
    """Host-side camera frame and image-plane geometry.

    Attributes:
        origin: Ray origin (the eye).
        u: Right vector.
        v: Up vector.
        w: Backward vector.
        horizontal: Image-plane edge spanning the full width.
        vertical: Image-plane edge spanning the full height.
        lower_left: Lower-left corner of the image plane.
    """

    origin: npt.NDArray[np.float64]
    u: npt.NDArray[np.float64]
    v: npt.NDArray[np.float64]
    w: npt.NDArray[np.float64]
    horizontal: npt.NDArray[np.float64]
    vertical: npt.NDArray[np.float64]
    lower_left: npt.NDArray[np.float64]


def compute_camera_frame(camera: PinholeCamera) -> CameraFrame:
    """Compute the camera frame for a set of view parameters.

    Raises:
        ValueError: If vfov or aspect_ratio is out of range, lookfrom equals
            lookat, or vup is parallel to the view direction.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Vertical field of view = {camera.vfov} must be in (0, 180).")
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"Aspect ratio = {camera.aspect_ratio} must be positive.")

    eye = np.array(camera.lookfrom, dtype=np.float64)
    target = np.array(camera.lookat, dtype=np.float64)
    up_hint = np.array(camera.vup, dtype=np.float64)

    backward = eye - target
    distance = np.linalg.norm(backward)
    if distance == 0.0:
        raise ValueError("lookfrom and lookat must be different points.")
    w = backward / distance

    right = np.cross(up_hint, w)
    right_len = np.linalg.norm(right)
    if right_len == 0.0:
        raise ValueError("vup must not be parallel to the view direction.")
    u = right / right_len
    v = np.cross(w, u)

    plane_height = 2.0 * math.tan(math.radians(camera.vfov) / 2.0)
    plane_width = camera.aspect_ratio * plane_height
    horizontal = plane_width * u
    vertical = plane_height * v

    return CameraFrame(
        origin=eye,
        u=u,
        v=v,
        w=w,
        horizontal=horizontal,
        vertical=vertical,
        lower_left=eye - w - 0.5 * horizontal - 0.5 * vertical,
    )


# Device-side copy of the active CameraFrame
_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_basis_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_basis_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_basis_w = ti.Vector.field(3, dtype=ti.f32, shape=())
_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left = ti.Vector.field(3, dtype=ti.f32, shape=())

_FRAME_FIELDS = {
    "origin": _origin,
    "u": _basis_u,
    "v": _basis_v,
    "w": _basis_w,
    "horizontal": _horizontal,
    "vertical": _vertical,
    "lower_left": _lower_left,
}


def setup_camera(camera: PinholeCamera) -> None:
    """Make camera the active camera for get_ray() and get_pixel_ray().

    Raises:
        ValueError: If the view parameters are invalid (see
            compute_camera_frame).
    """
    frame = compute_camera_frame(camera)
    for name, target in _FRAME_FIELDS.items():
        target[None] = getattr(frame, name).tolist()


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Build the primary ray through image coordinates (u, v).

    Args:
        u: 0 at the left edge, 1 at the right edge.
        v: 0 at the bottom edge, 1 at the top edge.

    Returns:
        A Ray from the eye with unit direction.
    """
    target = _lower_left[None] + u * _horizontal[None] + v * _vertical[None]
    return make_ray(_origin[None], target - _origin[None])


@ti.func
def get_pixel_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Build the primary ray through the center of pixel (i, j).

    Pixel (0, 0) is the bottom-left pixel of a width x height image.
    """
    u = (ti.cast(pixel_i, ti.f32) + 0.5) / ti.cast(width, ti.f32)
    v = (ti.cast(pixel_j, ti.f32) + 0.5) / ti.cast(height, ti.f32)
    return get_ray(u, v)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Read back the active camera frame, keyed like CameraFrame's fields."""
    info = {}
    for name, source in _FRAME_FIELDS.items():
        vec = source[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info
