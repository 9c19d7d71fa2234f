"""Image export utilities for rendered images.

This module provides functions for saving rendered images to files.

Supported formats:
    - PNG (8-bit via Pillow)

Normal visualizations are already in [0, 1] and are saved without gamma
correction by default, so the stored channel values map linearly to normal
components.

Example:
    >>> from raykit.preview.export import save_png
    >>> from raykit.render.normals import NormalRenderer
    >>>
    >>> renderer = NormalRenderer(320, 180)
    >>> renderer.render(world)
    >>> save_png(renderer, "normals.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from raykit.render.normals import NormalRenderer


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float32 image in [0, 1] to uint8 for export.

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma correction value (1.0 leaves values unchanged).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the image is not (H, W, 3) or gamma is not positive.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image of shape (H, W, 3), got {image.shape}")
    if gamma <= 0.0:
        raise ValueError(f"Gamma = {gamma} must be positive.")

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    result = np.clip(image, 0.0, 1.0)
    if gamma != 1.0:
        result = np.power(result, 1.0 / gamma)

    return (result * 255.0 + 0.5).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    gamma: float = 1.0,
) -> None:
    """Save a NumPy array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 1].
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (default 1.0, none).
    """
    image_uint8 = image_to_uint8(image, gamma=gamma)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)


def save_png(
    renderer: NormalRenderer,
    filepath: str,
    *,
    gamma: float = 1.0,
) -> None:
    """Save the rendered image as a PNG file.

    Args:
        renderer: The NormalRenderer instance to save.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (default 1.0, none).

    Raises:
        RuntimeError: If the renderer has not rendered anything yet.
    """
    save_png_from_array(renderer.get_image_numpy(), filepath, gamma=gamma)
