"""Render module.

Components:
    normals: NormalRenderer, one ray per pixel colored by the hit normal
"""

from .normals import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, NormalRenderer, normal_to_color

__all__ = [
    "NormalRenderer",
    "normal_to_color",
    "MAX_IMAGE_WIDTH",
    "MAX_IMAGE_HEIGHT",
]
