"""Shared numeric helpers for intersection tests.

Intersection routines reject near-degenerate configurations (a ray almost
parallel to a plane, an almost zero Moller-Trumbore determinant) with an
absolute epsilon instead of an exact zero test, and accept a hit distance only
when it lies in the closed interval [t_min, t_max].

The host-side helpers at the bottom of the module validate primitive
parameters before they are written into Taichi fields.
"""

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti

# Threshold for near-zero denominators and determinants
EPSILON = 1e-5

# Upper bound used by callers that want an "unbounded" query
T_MAX_UNBOUNDED = 1e30


@ti.func
def in_interval(t: ti.f32, t_min: ti.f32, t_max: ti.f32) -> ti.i32:
    """Check closed-interval membership t_min <= t <= t_max.

    Uses clamp-equality so that equal bounds (t_min == t_max) behave cleanly.

    Returns:
        1 if t lies in the interval, 0 otherwise.
    """
    return ti.select(ti.math.clamp(t, t_min, t_max) == t, 1, 0)


@ti.func
def near_zero_scalar(x: ti.f32) -> ti.i32:
    """Check whether |x| is below EPSILON.

    Returns:
        1 if x is near zero, 0 otherwise.
    """
    return ti.select(ti.abs(x) < EPSILON, 1, 0)


# =============================================================================
# Host-side validation
# =============================================================================


def as_vec3_array(value: Sequence[float], name: str) -> npt.NDArray[np.float64]:
    """Convert a 3-sequence to a finite float64 array.

    Args:
        value: The sequence to convert.
        name: Parameter name used in error messages.

    Returns:
        A float64 array of shape (3,).

    Raises:
        ValueError: If value does not have three components or any
            component is not finite.
    """
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} has non-finite components: {tuple(arr.tolist())}")
    return arr


def as_vec3_tuple(value: Sequence[float], name: str) -> tuple[float, float, float]:
    """Validate a 3-sequence and return it as a tuple of Python floats."""
    arr = as_vec3_array(value, name)
    return (float(arr[0]), float(arr[1]), float(arr[2]))


def require_finite(value: float, name: str) -> float:
    """Return value as a float, raising ValueError if it is not finite."""
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"{name} = {value} is not finite.")
    return result
