"""Unit tests for scene configuration and serialization.

Tests cover:
- SceneConfig dictionary conversion and validation
- Building a PrimitiveList from a configuration and back
- JSON save/load
- The demo scene
"""

import json

import pytest


def _sample_config():
    from raykit.scene.config import SceneConfig

    return SceneConfig(
        planes=[{"normal": [0.0, 0.0, 1.0], "offset": 10.0}],
        spheres=[{"center": [0.0, 0.0, -3.0], "radius": 1.0}],
        triangles=[{"v0": [0.0, 0.0, -8.0], "v1": [1.0, 0.0, -8.0], "v2": [0.0, 1.0, -8.0]}],
    )


class TestSceneConfig:
    """Tests for SceneConfig."""

    def test_from_dict_defaults(self):
        from raykit.scene.config import SceneConfig

        config = SceneConfig.from_dict({"spheres": [{"center": [0, 0, 0], "radius": 1}]})
        assert config.planes == []
        assert config.triangles == []
        assert config.primitive_count() == 1

    def test_to_dict_from_dict(self):
        from raykit.scene.config import SceneConfig

        config = _sample_config()
        restored = SceneConfig.from_dict(config.to_dict())
        assert restored == config
        assert restored.primitive_count() == 3

    def test_unknown_key(self):
        from raykit.scene.config import SceneConfig

        with pytest.raises(ValueError, match="Unknown scene keys: quads"):
            SceneConfig.from_dict({"quads": []})

    def test_non_list_entry(self):
        from raykit.scene.config import SceneConfig

        with pytest.raises(ValueError, match="must be a list"):
            SceneConfig.from_dict({"spheres": {"center": [0, 0, 0], "radius": 1}})

    def test_missing_key(self):
        from raykit.scene.config import SceneConfig, config_to_primitives

        config = SceneConfig(spheres=[{"center": [0.0, 0.0, 0.0]}])
        with pytest.raises(ValueError, match="missing 'radius'"):
            config_to_primitives(config)

    def test_config_to_primitives_order(self):
        from raykit.scene.config import config_to_primitives
        from raykit.scene.primitive_list import PlaneInfo, SphereInfo, TriangleInfo

        primitives = config_to_primitives(_sample_config())
        assert [type(p) for p in primitives] == [PlaneInfo, SphereInfo, TriangleInfo]
        assert primitives[1] == SphereInfo(center=(0.0, 0.0, -3.0), radius=1.0)


class TestBuildPrimitiveList:
    """Tests for building and exporting primitive lists."""

    def test_build_and_query(self):
        from raykit.scene.config import build_primitive_list

        world = build_primitive_list(_sample_config(), capacity=8)
        assert len(world) == 3
        assert world.capacity == 8
        result = world.closest_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert result.t == pytest.approx(2.0, abs=1e-5)

    def test_default_capacity(self):
        from raykit.scene.config import build_primitive_list
        from raykit.scene.primitive_list import MAX_PRIMITIVES

        world = build_primitive_list(_sample_config())
        assert world.capacity == MAX_PRIMITIVES

    def test_invalid_primitive_rejected(self):
        from raykit.scene.config import SceneConfig, build_primitive_list

        config = SceneConfig(spheres=[{"center": [0.0, 0.0, 0.0], "radius": -1.0}])
        with pytest.raises(ValueError, match="must be positive"):
            build_primitive_list(config, capacity=4)

    def test_export_round_trip(self):
        from raykit.scene.config import build_primitive_list, config_from_primitive_list

        config = _sample_config()
        world = build_primitive_list(config, capacity=8)
        exported = config_from_primitive_list(world)
        assert exported == config


class TestSceneFiles:
    """Tests for JSON scene files."""

    def test_save_and_load(self, tmp_path):
        from raykit.scene.config import load_scene_config, save_scene_config

        path = tmp_path / "scene.json"
        save_scene_config(_sample_config(), path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) == {"planes", "spheres", "triangles"}

        assert load_scene_config(path) == _sample_config()

    def test_load_non_object(self, tmp_path):
        from raykit.scene.config import load_scene_config

        path = tmp_path / "scene.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            load_scene_config(path)

    def test_load_missing_file(self, tmp_path):
        from raykit.scene.config import load_scene_config

        with pytest.raises(FileNotFoundError):
            load_scene_config(tmp_path / "missing.json")


class TestDemoScene:
    """Tests for the demo scene."""

    def test_demo_scene_contents(self):
        from raykit.scene.demo import GROUND_HEIGHT, create_demo_scene

        config, camera = create_demo_scene()
        assert len(config.planes) == 1
        assert len(config.spheres) == 2
        assert len(config.triangles) == 1
        assert camera.aspect_ratio == pytest.approx(16.0 / 9.0)
        assert config.planes[0]["offset"] == -GROUND_HEIGHT

    def test_demo_scene_aspect_ratio(self):
        from raykit.scene.demo import create_demo_scene

        _, camera = create_demo_scene(aspect_ratio=2.0)
        assert camera.aspect_ratio == 2.0

    def test_demo_ground_hit(self):
        from raykit.scene.config import build_primitive_list
        from raykit.scene.demo import GROUND_HEIGHT, create_demo_scene

        config, _ = create_demo_scene()
        world = build_primitive_list(config, capacity=8)
        result = world.closest_hit((0.0, 5.0, 10.0), (0.0, -1.0, 0.0))
        assert result is not None
        assert result.point[1] == pytest.approx(GROUND_HEIGHT, abs=1e-5)
        assert result.normal == pytest.approx((0.0, 1.0, 0.0), abs=1e-5)
        assert result.front_face is True

    def test_demo_sphere_hit(self):
        from raykit.scene.config import build_primitive_list
        from raykit.scene.demo import create_demo_scene

        config, camera = create_demo_scene()
        world = build_primitive_list(config, capacity=8)
        # From the camera straight at the front sphere's center
        direction = tuple(b - a for a, b in zip(camera.lookfrom, camera.lookat))
        result = world.closest_hit(camera.lookfrom, direction)
        assert result is not None
        dist = sum((p - c) ** 2 for p, c in zip(result.point, (0.0, 0.0, -3.0))) ** 0.5
        assert dist == pytest.approx(1.0, abs=1e-4)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
