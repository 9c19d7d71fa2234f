"""Scene module for primitive aggregation and scene description.

Components:
    primitive_list: PrimitiveList, the closest-hit aggregate over planes,
        spheres and triangles
    config: SceneConfig and JSON (de)serialization of primitive lists
    demo: A small demo scene with a matching camera

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout per primitive kind
    - An ordered member table of (kind, slot) pairs for dispatch
"""

from .config import (
    SceneConfig,
    build_primitive_list,
    config_from_primitive_list,
    config_to_primitives,
    load_scene_config,
    save_scene_config,
)
from .demo import create_demo_scene
from .primitive_list import (
    MAX_PRIMITIVES,
    IntersectionResult,
    PlaneInfo,
    PrimitiveKind,
    PrimitiveList,
    SphereInfo,
    TriangleInfo,
)

__all__ = [
    # Primitive list
    "PrimitiveList",
    "PrimitiveKind",
    "PlaneInfo",
    "SphereInfo",
    "TriangleInfo",
    "IntersectionResult",
    "MAX_PRIMITIVES",
    # Configuration
    "SceneConfig",
    "build_primitive_list",
    "config_from_primitive_list",
    "config_to_primitives",
    "load_scene_config",
    "save_scene_config",
    # Demo scene
    "create_demo_scene",
]
