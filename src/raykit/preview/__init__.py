"""Preview and output utilities.

Components:
    export: PNG export of rendered images via Pillow
"""

from .export import image_to_uint8, save_png, save_png_from_array

__all__ = [
    "image_to_uint8",
    "save_png",
    "save_png_from_array",
]
