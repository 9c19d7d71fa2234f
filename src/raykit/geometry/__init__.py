"""Geometry module for shape primitives and intersection algorithms.

This module provides geometric primitives and their closest-hit tests:

Components:
    hit_record: HitRecord structure and shared front-face resolution
    plane: Infinite plane primitive (P . N + d = 0)
    sphere: Sphere primitive with ray-sphere intersection
    triangle: Triangle primitive with Moller-Trumbore intersection

All intersection routines are Taichi functions (@ti.func) that share one
contract:

    rec = hit_<shape>(ray, shape, t_min, t_max)

where rec.hit is 1 for a hit inside the parametric interval and the other
record fields describe the closest such hit.
"""

from .hit_record import HitRecord, make_hit_record, make_miss_record, set_face_normal
from .plane import Plane, hit_plane, make_plane
from .sphere import Sphere, hit_sphere, make_sphere
from .triangle import Triangle, barycentric, hit_triangle, make_triangle, triangle_centroid

__all__ = [
    "HitRecord",
    "make_hit_record",
    "make_miss_record",
    "set_face_normal",
    "Plane",
    "hit_plane",
    "make_plane",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "Triangle",
    "barycentric",
    "hit_triangle",
    "make_triangle",
    "triangle_centroid",
]
