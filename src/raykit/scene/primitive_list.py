"""Primitive list: closest-hit resolution over a heterogeneous set of primitives.

A PrimitiveList owns Taichi fields for planes, spheres and triangles in a
Structure-of-Arrays layout, plus an ordered member table of (kind, slot)
pairs. The member table is the tagged union: kind selects the intersection
routine, slot indexes the storage for that kind.

PrimitiveList.intersect() has the same contract as the per-shape hit
functions, so a list can be queried anywhere a single primitive can. Lists
nest by reference: add(other_list) makes the members of other_list part of
this list, and every list containing other_list rewrites its member table
when other_list changes. The closest hit is the same as querying the nested
list as one member.

Closest-hit resolution narrows the upper bound of the interval as hits are
found, so each member only reports hits closer than the best one so far and
the final record is the globally closest one, independent of member order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykit.scene.primitive_list import PrimitiveList
    >>> world = PrimitiveList()
    >>> world.add_sphere((0.0, 0.0, -1.0), 0.5)
    >>> world.add_plane((0.0, 1.0, 0.0), 0.5)
    >>> result = world.closest_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> result.t
    0.5
"""

import math
import weakref
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum

import numpy as np
import taichi as ti
import taichi.math as tm

from raykit.core.numeric import (
    EPSILON,
    T_MAX_UNBOUNDED,
    as_vec3_array,
    as_vec3_tuple,
    require_finite,
)
from raykit.core.ray import Ray, make_ray
from raykit.geometry.hit_record import HitRecord, make_miss_record
from raykit.geometry.plane import Plane, hit_plane
from raykit.geometry.sphere import Sphere, hit_sphere
from raykit.geometry.triangle import Triangle, hit_triangle

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Default number of members a list can hold
MAX_PRIMITIVES = 1024

# Twice the triangle area below which a triangle counts as degenerate
_MIN_TRIANGLE_CROSS = 1e-12


class PrimitiveKind(IntEnum):
    """Enumeration of supported primitive kinds.

    Stored per member in the GPU-side member table for dispatch.
    """

    PLANE = 0
    SPHERE = 1
    TRIANGLE = 2


@dataclass(frozen=True)
class PlaneInfo:
    """A plane as stored in a PrimitiveList.

    Attributes:
        normal: Unit normal of the plane.
        offset: Signed offset d in P . N + d = 0.
    """

    normal: tuple[float, float, float]
    offset: float


@dataclass(frozen=True)
class SphereInfo:
    """A sphere as stored in a PrimitiveList.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere.
    """

    center: tuple[float, float, float]
    radius: float


@dataclass(frozen=True)
class TriangleInfo:
    """A triangle as stored in a PrimitiveList.

    Attributes:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
    """

    v0: tuple[float, float, float]
    v1: tuple[float, float, float]
    v2: tuple[float, float, float]

    @property
    def centroid(self) -> tuple[float, float, float]:
        """The mean of the three vertices."""
        return (
            (self.v0[0] + self.v1[0] + self.v2[0]) / 3.0,
            (self.v0[1] + self.v1[1] + self.v2[1]) / 3.0,
            (self.v0[2] + self.v1[2] + self.v2[2]) / 3.0,
        )


PrimitiveInfo = PlaneInfo | SphereInfo | TriangleInfo


@dataclass(frozen=True)
class IntersectionResult:
    """Host-side copy of a successful hit.

    Attributes:
        t: Hit distance along the (normalized) ray.
        point: The hit point.
        normal: Unit normal opposing the incoming ray.
        front_face: True if the ray hit the outward-facing side.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    front_face: bool


def _vec_to_tuple(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


@ti.data_oriented
class PrimitiveList:
    """An ordered collection of primitives resolving the closest hit.

    Attributes:
        capacity: Maximum number of members.
    """

    def __init__(self, capacity: int = MAX_PRIMITIVES) -> None:
        """Allocate storage for up to capacity members.

        Args:
            capacity: Maximum number of members (of any kind).

        Raises:
            ValueError: If capacity is not positive.
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        # Direct entries; nested lists stay live and are expanded by members()
        self._entries: list["PrimitiveInfo | PrimitiveList"] = []
        # Lists that contain this one and must be rebuilt when it changes
        self._parents: weakref.WeakSet[PrimitiveList] = weakref.WeakSet()
        self._num_stored = 0
        self._kind_counts = {kind: 0 for kind in PrimitiveKind}

        # Member table: kind tag and slot into the per-kind storage
        self.member_kinds = ti.field(dtype=ti.i32, shape=capacity)
        self.member_slots = ti.field(dtype=ti.i32, shape=capacity)
        self.num_members = ti.field(dtype=ti.i32, shape=())

        # Plane storage
        self.plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.plane_offsets = ti.field(dtype=ti.f32, shape=capacity)

        # Sphere storage
        self.sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.sphere_radii = ti.field(dtype=ti.f32, shape=capacity)

        # Triangle storage
        self.triangle_v0 = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.triangle_v1 = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.triangle_v2 = ti.Vector.field(3, dtype=ti.f32, shape=capacity)

        # One-ray query results for closest_hit()
        self._query_hit = ti.field(dtype=ti.i32, shape=())
        self._query_t = ti.field(dtype=ti.f32, shape=())
        self._query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._query_front_face = ti.field(dtype=ti.i32, shape=())

        self.num_members[None] = 0

    # =========================================================================
    # Scene Assembly
    # =========================================================================

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._num_stored

    def __iter__(self) -> Iterator[PrimitiveInfo]:
        return iter(self.members())

    def members(self) -> tuple[PrimitiveInfo, ...]:
        """Return the members in insertion order, with nested lists expanded."""
        flat: list[PrimitiveInfo] = []
        for entry in self._entries:
            if isinstance(entry, PrimitiveList):
                flat.extend(entry.members())
            else:
                flat.append(entry)
        return tuple(flat)

    def count(self, kind: PrimitiveKind) -> int:
        """Return the number of members of the given kind."""
        return self._kind_counts[PrimitiveKind(kind)]

    def clear(self) -> None:
        """Remove all members and detach any nested lists.

        The field data is not cleared but will be overwritten when new
        primitives are added. Lists containing this one are refreshed.
        """
        for entry in self._entries:
            if isinstance(entry, PrimitiveList):
                entry._parents.discard(self)
        self._entries.clear()
        self._reset_storage()
        self._notify_parents()

    def _contains_list(self, other: "PrimitiveList") -> bool:
        for entry in self._entries:
            if isinstance(entry, PrimitiveList) and (entry is other or entry._contains_list(other)):
                return True
        return False

    def _reserve(self, extra: int) -> None:
        """Check that extra members fit here and in every enclosing list."""
        if self._num_stored + extra > self._capacity:
            raise RuntimeError(f"Maximum number of primitives ({self._capacity}) exceeded")
        for parent in self._parents:
            parent._reserve(extra)

    def _reset_storage(self) -> None:
        self._num_stored = 0
        self._kind_counts = {kind: 0 for kind in PrimitiveKind}
        self.num_members[None] = 0

    def _store(self, info: PrimitiveInfo) -> int:
        """Write info into the next member slot and return its member index."""
        idx = self._num_stored
        if isinstance(info, PlaneInfo):
            kind = PrimitiveKind.PLANE
        elif isinstance(info, SphereInfo):
            kind = PrimitiveKind.SPHERE
        else:
            kind = PrimitiveKind.TRIANGLE
        slot = self._kind_counts[kind]
        self.member_kinds[idx] = int(kind)
        self.member_slots[idx] = slot

        if kind == PrimitiveKind.PLANE:
            self.plane_normals[slot] = info.normal
            self.plane_offsets[slot] = info.offset
        elif kind == PrimitiveKind.SPHERE:
            self.sphere_centers[slot] = info.center
            self.sphere_radii[slot] = info.radius
        else:
            self.triangle_v0[slot] = info.v0
            self.triangle_v1[slot] = info.v1
            self.triangle_v2[slot] = info.v2

        self._kind_counts[kind] = slot + 1
        self._num_stored = idx + 1
        self.num_members[None] = idx + 1
        return idx

    def _rebuild(self) -> None:
        """Rewrite the member table from the current entries."""
        self._reset_storage()
        for info in self.members():
            self._store(info)
        self._notify_parents()

    def _notify_parents(self) -> None:
        for parent in list(self._parents):
            parent._rebuild()

    def _append_member(self, info: PrimitiveInfo) -> int:
        self._reserve(1)
        self._entries.append(info)
        idx = self._store(info)
        self._notify_parents()
        return idx


    def add_plane(self, normal: Sequence[float], offset: float) -> int:
        """Add a plane P . N + offset = 0.

        The normal is normalized and the offset rescaled accordingly, so any
        non-zero normal describes the same surface.

        Args:
            normal: The plane normal (non-zero length).
            offset: The signed offset matching the given normal.

        Returns:
            The member index of the added plane.

        Raises:
            ValueError: If the normal has (near) zero length or any value is
                not finite.
            RuntimeError: If the list, or a list containing it, is full.
        """
        n = as_vec3_array(normal, "normal")
        d = require_finite(offset, "offset")
        n_len = float(np.linalg.norm(n))
        if n_len < EPSILON:
            raise ValueError(f"Plane normal {tuple(n.tolist())} has near-zero length.")
        n = n / n_len
        info = PlaneInfo(normal=_vec_to_tuple(n), offset=d / n_len)

        return self._append_member(info)

    def add_sphere(self, center: Sequence[float], radius: float) -> int:
        """Add a sphere.

        Args:
            center: The center point of the sphere.
            radius: The radius of the sphere (must be positive).

        Returns:
            The member index of the added sphere.

        Raises:
            ValueError: If the radius is not positive or any value is not
                finite.
            RuntimeError: If the list, or a list containing it, is full.
        """
        c = as_vec3_tuple(center, "center")
        r = require_finite(radius, "radius")
        if r <= 0.0:
            raise ValueError(f"Sphere radius = {radius} must be positive.")
        info = SphereInfo(center=c, radius=r)

        return self._append_member(info)

    def add_triangle(
        self,
        v0: Sequence[float],
        v1: Sequence[float],
        v2: Sequence[float],
    ) -> int:
        """Add a triangle.

        Args:
            v0: First vertex.
            v1: Second vertex.
            v2: Third vertex.

        Returns:
            The member index of the added triangle.

        Raises:
            ValueError: If the triangle has (near) zero area or any value is
                not finite.
            RuntimeError: If the list, or a list containing it, is full.
        """
        a = as_vec3_array(v0, "v0")
        b = as_vec3_array(v1, "v1")
        c = as_vec3_array(v2, "v2")
        if float(np.linalg.norm(np.cross(b - a, c - a))) < _MIN_TRIANGLE_CROSS:
            raise ValueError("Triangle vertices are collinear (zero area).")
        info = TriangleInfo(v0=_vec_to_tuple(a), v1=_vec_to_tuple(b), v2=_vec_to_tuple(c))

        return self._append_member(info)

    def add(self, primitive: "PrimitiveInfo | PrimitiveList") -> int:
        """Append a primitive or another list.

        A nested list is held by reference: its members are queried as part
        of this list, and later changes to it (adds or clear) are reflected
        here. The same list may be nested in several parents.

        Args:
            primitive: A PlaneInfo, SphereInfo, TriangleInfo, or another
                PrimitiveList whose members are appended in order.

        Returns:
            The member index of the last appended member, or -1 when an
            empty list was added.

        Raises:
            TypeError: If primitive is not a supported type.
            ValueError: If adding the list would make a list contain itself.
            RuntimeError: If the list, or a list containing it, overflows.
        """
        if isinstance(primitive, PrimitiveList):
            if primitive is self or primitive._contains_list(self):
                raise ValueError("A PrimitiveList cannot contain itself.")
            nested = primitive.members()
            self._reserve(len(nested))
            self._entries.append(primitive)
            primitive._parents.add(self)
            last = -1
            for info in nested:
                last = self._store(info)
            self._notify_parents()
            return last
        if isinstance(primitive, PlaneInfo):
            return self.add_plane(primitive.normal, primitive.offset)
        if isinstance(primitive, SphereInfo):
            return self.add_sphere(primitive.center, primitive.radius)
        if isinstance(primitive, TriangleInfo):
            return self.add_triangle(primitive.v0, primitive.v1, primitive.v2)
        raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}")

    # =========================================================================
    # Intersection (Taichi-side)
    # =========================================================================

    @ti.func
    def _hit_member(self, i: ti.i32, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
        """Dispatch member i to the intersection routine for its kind."""
        kind = self.member_kinds[i]
        slot = self.member_slots[i]
        rec = make_miss_record()
        if kind == int(PrimitiveKind.PLANE):
            plane = Plane(normal=self.plane_normals[slot], offset=self.plane_offsets[slot])
            rec = hit_plane(ray, plane, t_min, t_max)
        elif kind == int(PrimitiveKind.SPHERE):
            sphere = Sphere(center=self.sphere_centers[slot], radius=self.sphere_radii[slot])
            rec = hit_sphere(ray, sphere, t_min, t_max)
        elif kind == int(PrimitiveKind.TRIANGLE):
            tri = Triangle(
                v0=self.triangle_v0[slot],
                v1=self.triangle_v1[slot],
                v2=self.triangle_v2[slot],
            )
            rec = hit_triangle(ray, tri, t_min, t_max)
        return rec

    @ti.func
    def intersect(self, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
        """Find the closest hit among all members.

        Each member is tested against [t_min, closest], where closest starts
        at t_max and shrinks to the distance of the best hit found so far.

        Args:
            ray: The ray to test (unit direction).
            t_min: Minimum t value to consider a valid hit.
            t_max: Maximum t value to consider a valid hit.

        Returns:
            The HitRecord of the closest hit, or a miss record.
        """
        closest = t_max
        result = make_miss_record()

        n = self.num_members[None]
        ti.loop_config(serialize=True)
        for i in range(n):
            rec = self._hit_member(i, ray, t_min, closest)
            if rec.hit == 1:
                closest = rec.t
                result = rec

        return result

    @ti.func
    def intersect_any(self, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> ti.i32:
        """Test if the ray hits any member within [t_min, t_max].

        Returns:
            1 if any member was hit, 0 otherwise.
        """
        hit_any = 0
        n = self.num_members[None]
        ti.loop_config(serialize=True)
        for i in range(n):
            if hit_any == 0:
                rec = self._hit_member(i, ray, t_min, t_max)
                if rec.hit == 1:
                    hit_any = 1
        return hit_any

    @ti.kernel
    def _query(
        self,
        ox: ti.f32,
        oy: ti.f32,
        oz: ti.f32,
        dx: ti.f32,
        dy: ti.f32,
        dz: ti.f32,
        t_min: ti.f32,
        t_max: ti.f32,
    ):
        ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
        rec = self.intersect(ray, t_min, t_max)
        self._query_hit[None] = rec.hit
        self._query_t[None] = rec.t
        self._query_point[None] = rec.point
        self._query_normal[None] = rec.normal
        self._query_front_face[None] = rec.front_face

    # =========================================================================
    # Host-side Queries
    # =========================================================================

    def closest_hit(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
        t_min: float = 0.0,
        t_max: float = T_MAX_UNBOUNDED,
    ) -> IntersectionResult | None:
        """Trace a single ray from Python and return the closest hit.

        Convenience wrapper for scene debugging and tests; rendering code
        should call intersect() from inside a kernel instead.

        Args:
            origin: The ray origin.
            direction: The ray direction (normalized before tracing).
            t_min: Minimum t value to consider a valid hit (finite).
            t_max: Maximum t value to consider a valid hit; +inf means
                unbounded.

        Returns:
            An IntersectionResult, or None if the ray hits nothing.

        Raises:
            ValueError: If the direction has (near) zero length, a bound is
                NaN, t_min is infinite, or the origin or direction is not
                finite.
        """
        o = as_vec3_array(origin, "origin")
        d = as_vec3_array(direction, "direction")
        if float(np.linalg.norm(d)) < EPSILON:
            raise ValueError(f"Ray direction {tuple(d.tolist())} must be non-zero.")
        lo = require_finite(t_min, "t_min")
        hi = float(t_max)
        if hi == math.inf:
            hi = T_MAX_UNBOUNDED
        else:
            hi = require_finite(hi, "t_max")

        self._query(
            float(o[0]),
            float(o[1]),
            float(o[2]),
            float(d[0]),
            float(d[1]),
            float(d[2]),
            lo,
            hi,
        )
        if self._query_hit[None] == 0:
            return None
        return IntersectionResult(
            t=float(self._query_t[None]),
            point=_vec_to_tuple(self._query_point[None]),
            normal=_vec_to_tuple(self._query_normal[None]),
            front_face=bool(self._query_front_face[None]),
        )
