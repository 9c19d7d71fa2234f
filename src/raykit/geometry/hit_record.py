"""Hit record structure and front-face resolution.

Every primitive reports its result as a HitRecord. The hit field plays the
role of the boolean "did the ray hit" result; the remaining fields are only
meaningful when hit == 1.

Front-face resolution is shared by all primitives: given the outward normal
derived from the surface geometry, set_face_normal() normalizes it and flips
it when the ray approaches from the back side, so the stored normal always
opposes the incoming ray.
"""

import taichi as ti
import taichi.math as tm

from raykit.core.ray import Ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The surface normal at the intersection point (unit length,
            always points against the incoming ray direction).
            Only valid if hit == 1.
        front_face: Whether the ray hit the outward-facing side (1) or the
            back side (0). Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def set_face_normal(ray: Ray, outward_normal: vec3):
    """Orient a surface normal against the incoming ray.

    Args:
        ray: The incoming ray.
        outward_normal: The geometric normal of the surface. Need not be
            normalized.

    Returns:
        Tuple of (normal, front_face) where normal is unit length and
        front_face is 1 when dot(ray.direction, outward_normal) < 0.
    """
    n = tm.normalize(outward_normal)
    front_face = 1
    if tm.dot(ray.direction, n) >= 0.0:
        front_face = 0
        n = -n
    return n, front_face


@ti.func
def make_hit_record(ray: Ray, t: ti.f32, outward_normal: vec3) -> HitRecord:
    """Build a successful HitRecord at parameter t.

    Args:
        ray: The ray that hit the surface.
        t: The accepted hit distance.
        outward_normal: The geometric normal at the hit point.

    Returns:
        A HitRecord with hit=1, the hit point ray_at(ray, t) and the
        oriented normal.
    """
    normal, front_face = set_face_normal(ray, outward_normal)
    return HitRecord(
        hit=1,
        t=t,
        point=ray_at(ray, t),
        normal=normal,
        front_face=front_face,
    )


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )
