"""Sphere primitive with ray-sphere intersection.

This module provides a Sphere dataclass and intersection function. Rays are
assumed to carry a unit direction (see raykit.core.ray.make_ray), which
simplifies the quadratic

    |O + t * D - C|^2 = r^2

to

    t^2 + 2 * h * t + c = 0,  h = D . (O - C),  c = |O - C|^2 - r^2

with discriminant h^2 - c. The nearer root is tried first so that the entry
point is preferred over the exit point; the farther root is used when the
nearer one falls outside [t_min, t_max] (for example when the ray starts
inside the sphere).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykit.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raykit.core.numeric import in_interval
from raykit.core.ray import Ray, dot, length_squared

from .hit_record import HitRecord, make_hit_record, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray: The ray to test. The direction must be unit length.
        sphere: The sphere to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord for the closest root inside [t_min, t_max]. Check hit
        field to determine if intersection occurred.
    """
    result = make_miss_record()

    oc = ray.origin - sphere.center
    h = dot(ray.direction, oc)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = h * h - c

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # Nearer root first, then the farther one
        t = -h - sqrt_d
        valid = in_interval(t, t_min, t_max)
        if not valid:
            t = -h + sqrt_d
            valid = in_interval(t, t_min, t_max)

        if valid:
            hit_point = ray.origin + t * ray.direction
            result = make_hit_record(ray, t, hit_point - sphere.center)

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
