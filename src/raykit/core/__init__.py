"""Core module.

This module contains the fundamental building blocks shared by every
intersection routine:

Components:
    ray: Ray data structure, ray construction and vector utilities
    numeric: Epsilon thresholds, interval membership and host-side validation

Rays created through make_ray() carry a unit direction, which lets the
sphere test use the simplified quadratic and makes the hit distance t a
Euclidean distance.
"""

from .numeric import (
    EPSILON,
    T_MAX_UNBOUNDED,
    in_interval,
    near_zero_scalar,
)
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    vec3,
)

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "EPSILON",
    "T_MAX_UNBOUNDED",
    "in_interval",
    "near_zero_scalar",
]
