"""Shared pytest fixtures for the raykit test suite."""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize the Taichi runtime once, before any raykit import.

    raykit.camera allocates module-level fields on import, so the runtime
    must exist first; repeated ti.init() calls within a session would
    invalidate fields created by earlier tests.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def world():
    """An empty PrimitiveList with room for 16 members."""
    from raykit.scene.primitive_list import PrimitiveList

    primitives = PrimitiveList(capacity=16)
    yield primitives
    primitives.clear()
