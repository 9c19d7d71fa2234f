"""Triangle primitive with Moller-Trumbore ray-triangle intersection.

The Moller-Trumbore test solves

    O + t * D = (1 - u - v) * v0 + u * v1 + v * v2

for (t, u, v) with Cramer's rule, using the edges e1 = v1 - v0 and
e2 = v2 - v0. The ray is rejected when:

1. the determinant a = e1 . (D x e2) is within EPSILON of zero (ray parallel
   to the triangle plane),
2. u lies outside [0, 1],
3. v < 0 or u + v > 1 (hit point outside the triangle),
4. t < EPSILON or t > t_max.

Note that the lower bound on t is EPSILON rather than the caller's t_min.
Every other primitive honours t_min; the triangle keeps the fixed epsilon so
that hits just in front of the origin are discarded regardless of the query.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykit.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(
    ...     v0=ti.math.vec3(0, 0, 0),
    ...     v1=ti.math.vec3(1, 0, 0),
    ...     v2=ti.math.vec3(0, 1, 0),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raykit.core.numeric import EPSILON, in_interval, near_zero_scalar
from raykit.core.ray import Ray, cross, dot

from .hit_record import HitRecord, make_hit_record, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    The outward normal is cross(v1 - v0, v2 - v0), so counter-clockwise
    winding (seen from the front) faces the viewer.

    Attributes:
        v0: First vertex (vec3).
        v1: Second vertex (vec3).
        v2: Third vertex (vec3).
    """

    v0: vec3
    v1: vec3
    v2: vec3


@ti.func
def barycentric(ray: Ray, tri: Triangle):
    """Compute the Moller-Trumbore terms for a ray and a triangle.

    Args:
        ray: The ray to test.
        tri: The triangle to test against.

    Returns:
        Tuple of (a, u, v, t). When |a| < EPSILON the ray is parallel to the
        triangle plane and u, v, t are zero.
    """
    e1 = tri.v1 - tri.v0
    e2 = tri.v2 - tri.v0
    h = cross(ray.direction, e2)
    a = dot(e1, h)

    u = 0.0
    v = 0.0
    t = 0.0
    if not near_zero_scalar(a):
        f = 1.0 / a
        s = ray.origin - tri.v0
        u = f * dot(s, h)
        q = cross(s, e1)
        v = f * dot(ray.direction, q)
        t = f * dot(e2, q)

    return a, u, v, t


@ti.func
def hit_triangle(ray: Ray, tri: Triangle, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        ray: The ray to test (unit direction).
        tri: The triangle to test intersection against.
        t_min: Accepted for signature compatibility with the other
            primitives. The lower bound actually applied is EPSILON.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    result = make_miss_record()

    a, u, v, t = barycentric(ray, tri)

    if not near_zero_scalar(a):
        inside = u >= 0.0 and u <= 1.0 and v >= 0.0 and u + v <= 1.0
        if inside and t >= EPSILON and in_interval(t, EPSILON, t_max):
            e1 = tri.v1 - tri.v0
            e2 = tri.v2 - tri.v0
            result = make_hit_record(ray, t, cross(e1, e2))

    return result


@ti.func
def triangle_centroid(tri: Triangle) -> vec3:
    """Compute the centroid (mean of the vertices) of a triangle."""
    return (tri.v0 + tri.v1 + tri.v2) / 3.0


@ti.func
def make_triangle(v0: vec3, v1: vec3, v2: vec3) -> Triangle:
    """Create a triangle from three vertices."""
    return Triangle(v0=v0, v1=v1, v2=v2)
