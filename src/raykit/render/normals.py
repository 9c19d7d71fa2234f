"""Normal-visualization renderer.

Traces one primary ray through the center of every pixel, queries a
PrimitiveList for the closest hit and maps the hit normal from [-1, 1] to the
displayable range [0, 1]:

    color = 0.5 * (normal + 1)

Pixels whose ray hits nothing receive the background color. There is no
shading, sampling or accumulation.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykit.camera.pinhole import setup_camera
    >>> from raykit.render.normals import NormalRenderer
    >>> from raykit.scene.config import build_primitive_list
    >>> from raykit.scene.demo import create_demo_scene
    >>>
    >>> config, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> renderer = NormalRenderer(320, 180)
    >>> renderer.render(build_primitive_list(config))
    >>> image = renderer.get_image_numpy()  # (180, 320, 3) float32
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raykit.camera.pinhole import get_pixel_ray
from raykit.core.numeric import T_MAX_UNBOUNDED
from raykit.scene.primitive_list import PrimitiveList

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum supported image dimensions
MAX_IMAGE_WIDTH = 4096
MAX_IMAGE_HEIGHT = 4096

DEFAULT_BACKGROUND = (0.0, 0.0, 0.0)


@ti.func
def normal_to_color(normal: vec3) -> vec3:
    """Map a unit normal with components in [-1, 1] to an RGB color in [0, 1]."""
    return 0.5 * (normal + vec3(1.0, 1.0, 1.0))


@ti.data_oriented
class NormalRenderer:
    """Renders the normals of the closest hits as colors.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        image: Taichi field of shape (width, height) holding RGB colors,
            with pixel (0, 0) at the bottom-left.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: Sequence[float] = DEFAULT_BACKGROUND,
    ) -> None:
        """Allocate the image buffer.

        Args:
            width: Image width in pixels (max MAX_IMAGE_WIDTH).
            height: Image height in pixels (max MAX_IMAGE_HEIGHT).
            background: RGB color for pixels whose ray hits nothing.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
        if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({width}x{height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if len(background) != 3:
            raise ValueError(f"Background color must have 3 components, got {len(background)}")

        self.width = width
        self.height = height
        self.image = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))
        self._background = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._background[None] = [float(c) for c in background]
        self._rendered = False

    @property
    def rendered(self) -> bool:
        """Whether render() has been called since construction."""
        return self._rendered

    @ti.kernel
    def _render(self, world: ti.template(), t_min: ti.f32, t_max: ti.f32):
        for i, j in self.image:
            ray = get_pixel_ray(i, j, self.width, self.height)
            rec = world.intersect(ray, t_min, t_max)
            color = self._background[None]
            if rec.hit == 1:
                color = normal_to_color(rec.normal)
            self.image[i, j] = color

    def render(
        self,
        world: PrimitiveList,
        t_min: float = 0.0,
        t_max: float = T_MAX_UNBOUNDED,
    ) -> None:
        """Render the world through the current camera.

        The camera must have been configured with setup_camera().

        Args:
            world: The primitive list to render.
            t_min: Minimum hit distance (excludes hits behind the camera).
            t_max: Maximum hit distance.
        """
        self._render(world, t_min, t_max)
        self._rendered = True

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Returns:
            Array of shape (height, width, 3) with values in [0, 1] and the
            first row at the top of the image.

        Raises:
            RuntimeError: If render() has not been called.
        """
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")

        image = self.image.to_numpy()

        # Transpose from (width, height, 3) to (height, width, 3) for standard image format
        image = np.transpose(image, (1, 0, 2))

        # Flip vertically (Taichi uses bottom-left origin, images use top-left)
        image = np.flipud(image)

        return np.clip(image, 0.0, 1.0).astype(np.float32)
