"""Infinite plane primitive with ray-plane intersection.

A plane is described implicitly by a unit normal N and a signed offset d:

    P . N + d = 0

so the plane passes through the point -d * N. Substituting the ray
P(t) = O + t * D gives

    t = -(O . N + d) / (D . N)

Rays whose direction is (almost) perpendicular to the normal never meet the
plane in a well-conditioned way and are rejected with an epsilon test on the
denominator.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykit.geometry.plane import Plane, hit_plane
    >>> # Ground plane y = -1
    >>> plane = Plane(normal=ti.math.vec3(0, 1, 0), offset=1.0)
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raykit.core.numeric import in_interval, near_zero_scalar
from raykit.core.ray import Ray

from .hit_record import HitRecord, make_hit_record, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane defined by a unit normal and a signed offset.

    Attributes:
        normal: The unit normal of the plane (vec3). Also the outward normal
            used for front-face resolution.
        offset: The signed offset d in P . N + d = 0 (float).
    """

    normal: vec3
    offset: ti.f32


@ti.func
def hit_plane(ray: Ray, plane: Plane, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray: The ray to test (unit direction).
        plane: The plane to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    result = make_miss_record()

    denom = tm.dot(ray.direction, plane.normal)

    # Ray parallel (or nearly so) to the plane
    if not near_zero_scalar(denom):
        t = -(tm.dot(ray.origin, plane.normal) + plane.offset) / denom
        if in_interval(t, t_min, t_max):
            result = make_hit_record(ray, t, plane.normal)

    return result


@ti.func
def make_plane(normal: vec3, offset: ti.f32) -> Plane:
    """Create a plane from a normal and offset, normalizing the normal.

    The offset is rescaled with the normal so the described surface is
    unchanged.

    Args:
        normal: The plane normal (any non-zero length).
        offset: The signed offset matching the given normal.

    Returns:
        A new Plane instance with a unit normal.
    """
    n_len = tm.length(normal)
    return Plane(normal=normal / n_len, offset=offset / n_len)
