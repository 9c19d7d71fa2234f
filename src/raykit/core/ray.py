"""Ray data structure and vector utilities for ray intersection queries.

Everything here lives in Taichi scope: Ray is a Taichi struct and the helpers
are Taichi functions, usable from kernels only.

Rays built with make_ray() always carry a unit direction, so the ray parameter
t is the Euclidean distance from the origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -2.0)
    >>> ray = make_ray(origin, direction)  # direction becomes (0, 0, -1)
    >>> far = ray_at(ray, 5.0)  # (0, 0, -5)
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class Ray:
    """Half-line O + t * D for t >= 0.

    Attributes:
        origin: Start point O.
        direction: Direction D; unit length for rays built by make_ray().
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Return the point reached after travelling t along the ray."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Build a ray with a normalized copy of direction.

    A zero direction is not checked: it normalizes to NaN components and
    every intersection test against the ray then misses.

    Args:
        origin: Start point of the ray.
        direction: Any non-zero direction vector.
    """
    return Ray(origin=origin, direction=tm.normalize(direction))


# Thin wrappers over taichi.math used by the intersection routines


@ti.func
def length(v: vec3) -> ti.f32:
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)
