"""Scene configuration and serialization.

A SceneConfig is a plain-data description of a primitive list, suitable for
JSON files:

    {
        "planes": [{"normal": [0, 1, 0], "offset": 1.0}],
        "spheres": [{"center": [0, 0, -3], "radius": 1.0}],
        "triangles": [{"v0": [0, 0, -2], "v1": [1, 0, -2], "v2": [0, 1, -2]}]
    }

Primitives are added to the list kind by kind (planes, then spheres, then
triangles). Member order has no effect on closest-hit results.

Example:
    >>> from raykit.scene.config import load_scene_config, build_primitive_list
    >>> config = load_scene_config("scene.json")
    >>> world = build_primitive_list(config)
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from raykit.scene.primitive_list import (
    MAX_PRIMITIVES,
    PlaneInfo,
    PrimitiveList,
    SphereInfo,
    TriangleInfo,
)

_SCENE_KEYS = ("planes", "spheres", "triangles")


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        planes: List of plane configurations.
        spheres: List of sphere configurations.
        triangles: List of triangle configurations.
    """

    planes: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    triangles: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SceneConfig":
        """Create a configuration from a dictionary.

        Args:
            data: Dictionary with optional 'planes', 'spheres' and
                'triangles' keys.

        Raises:
            ValueError: If data contains unknown keys or non-list values.
        """
        unknown = sorted(set(data) - set(_SCENE_KEYS))
        if unknown:
            raise ValueError(f"Unknown scene keys: {', '.join(unknown)}")
        for key in _SCENE_KEYS:
            if not isinstance(data.get(key, []), list):
                raise ValueError(f"Scene entry '{key}' must be a list")
        return cls(
            planes=list(data.get("planes", [])),
            spheres=list(data.get("spheres", [])),
            triangles=list(data.get("triangles", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a dictionary (for JSON serialization)."""
        return {
            "planes": self.planes,
            "spheres": self.spheres,
            "triangles": self.triangles,
        }

    def primitive_count(self) -> int:
        """Get the total number of primitives described."""
        return len(self.planes) + len(self.spheres) + len(self.triangles)


def _require(entry: dict[str, Any], key: str, kind: str) -> Any:
    if key not in entry:
        raise ValueError(f"{kind} entry is missing '{key}': {entry}")
    return entry[key]


def config_to_primitives(
    config: SceneConfig,
) -> list[PlaneInfo | SphereInfo | TriangleInfo]:
    """Convert a configuration into primitive descriptions.

    Raises:
        ValueError: If an entry is missing a required key.
    """
    primitives: list[PlaneInfo | SphereInfo | TriangleInfo] = []
    for entry in config.planes:
        primitives.append(
            PlaneInfo(
                normal=tuple(_require(entry, "normal", "Plane")),
                offset=_require(entry, "offset", "Plane"),
            )
        )
    for entry in config.spheres:
        primitives.append(
            SphereInfo(
                center=tuple(_require(entry, "center", "Sphere")),
                radius=_require(entry, "radius", "Sphere"),
            )
        )
    for entry in config.triangles:
        primitives.append(
            TriangleInfo(
                v0=tuple(_require(entry, "v0", "Triangle")),
                v1=tuple(_require(entry, "v1", "Triangle")),
                v2=tuple(_require(entry, "v2", "Triangle")),
            )
        )
    return primitives


def build_primitive_list(config: SceneConfig, capacity: int | None = None) -> PrimitiveList:
    """Build a PrimitiveList from a configuration.

    Args:
        config: The scene configuration to load.
        capacity: List capacity. Defaults to MAX_PRIMITIVES, or the number of
            primitives in config if that is larger.

    Returns:
        A new PrimitiveList holding every configured primitive.

    Raises:
        ValueError: If the configuration contains invalid data.
    """
    if capacity is None:
        capacity = max(MAX_PRIMITIVES, config.primitive_count())
    world = PrimitiveList(capacity=capacity)
    for primitive in config_to_primitives(config):
        world.add(primitive)
    return world


def config_from_primitive_list(world: PrimitiveList) -> SceneConfig:
    """Export the members of a PrimitiveList to a configuration."""
    config = SceneConfig()
    for member in world.members():
        if isinstance(member, PlaneInfo):
            config.planes.append({"normal": list(member.normal), "offset": member.offset})
        elif isinstance(member, SphereInfo):
            config.spheres.append({"center": list(member.center), "radius": member.radius})
        else:
            config.triangles.append(
                {"v0": list(member.v0), "v1": list(member.v1), "v2": list(member.v2)}
            )
    return config


def load_scene_config(path: str | Path) -> SceneConfig:
    """Load a scene configuration from a JSON file.

    Raises:
        ValueError: If the file does not contain a JSON object or the object
            is not a valid scene.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")
    return SceneConfig.from_dict(data)


def save_scene_config(config: SceneConfig, path: str | Path) -> None:
    """Save a scene configuration as a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
