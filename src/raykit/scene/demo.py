"""Demo scene configuration.

A small scene exercising every primitive kind: a ground plane, two spheres
resting on it and a triangle standing behind them. It is the default scene of
the render_normals example.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykit.scene.demo import create_demo_scene
    >>> from raykit.scene.config import build_primitive_list
    >>> config, camera = create_demo_scene()
    >>> world = build_primitive_list(config)
"""

from raykit.camera.pinhole import PinholeCamera
from raykit.scene.config import SceneConfig

# Ground plane y = GROUND_HEIGHT
GROUND_HEIGHT = -1.0


def create_demo_scene(aspect_ratio: float = 16.0 / 9.0) -> tuple[SceneConfig, PinholeCamera]:
    """Create the demo scene and a camera looking at it.

    The coordinate system is right-handed with Y up; the camera sits on the
    +Z side looking toward -Z.

    Args:
        aspect_ratio: Width divided by height of the output image.

    Returns:
        A tuple of (SceneConfig, PinholeCamera).
    """
    config = SceneConfig(
        planes=[
            # y - GROUND_HEIGHT = 0
            {"normal": [0.0, 1.0, 0.0], "offset": -GROUND_HEIGHT},
        ],
        spheres=[
            {"center": [0.0, 0.0, -3.0], "radius": 1.0},
            {"center": [2.0, -0.5, -4.0], "radius": 0.5},
        ],
        triangles=[
            {"v0": [-3.0, -1.0, -6.0], "v1": [-1.0, -1.0, -6.0], "v2": [-2.0, 1.5, -6.0]},
        ],
    )

    camera = PinholeCamera(
        lookfrom=(0.0, 0.5, 2.0),
        lookat=(0.0, 0.0, -3.0),
        vup=(0.0, 1.0, 0.0),
        vfov=60.0,
        aspect_ratio=aspect_ratio,
    )
    return config, camera
