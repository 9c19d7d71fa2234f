"""Ray intersection core built on Taichi.

This package provides closest-hit ray queries against a heterogeneous set of
primitives, with support for:
- Planes, spheres and triangles sharing one intersection contract
- Primitive lists that resolve the closest hit among their members
- Pinhole camera ray generation and normal visualization

Subpackages:
    core: Ray structure, vector utilities and numeric helpers
    geometry: Hit records and per-shape intersection routines
    scene: Primitive lists, scene configuration and the demo scene
    camera: Pinhole camera with primary ray generation
    render: Normal-visualization renderer
    preview: Image export utilities

Taichi must be initialized (ti.init) before importing the camera, scene or
render subpackages, since they allocate Taichi fields.
"""

__version__ = "0.1.0"
