"""Renderer that drives a camera over the current scene.

This module wraps the integrator with a camera-aware interface:
- Sets up the camera, the render target and the per-pixel random streams
- Renders the camera's samples_per_pixel in batches
- Reports progress through callbacks or a generator
- Supports cooperative cancellation between batches

Rendering is deterministic: for a fixed scene, camera and seed the image
is the same regardless of how the work is batched or how many threads run
the kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.glint.core.renderer import Renderer
    >>> from src.glint.scene.presets import create_random_spheres_scene
    >>>
    >>> scene, camera = create_random_spheres_scene()
    >>> renderer = Renderer(camera, seed=7)
    >>> renderer.render(batch_size=10)
    >>> image = renderer.get_image_numpy()
"""

from collections.abc import Callable, Generator, Iterator

import numpy as np
import numpy.typing as npt

from src.glint.camera.thin_lens import Camera, CameraGeometry, setup_camera
from src.glint.core.integrator import (
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)
from src.glint.core.sampler import seed_streams

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]

# Polled between batches; returning True stops the render
CancelCheck = Callable[[], bool]


class Renderer:
    """Progressive renderer for one camera configuration.

    The renderer owns the global render target while it is in use. Creating
    a second renderer sets the target up again for its own camera.

    Attributes:
        camera: The camera configuration.
        geometry: Camera values derived by setup_camera.
        seed: Seed of the per-pixel random streams.
    """

    def __init__(self, camera: Camera, seed: int = 0) -> None:
        """Initialize the renderer.

        Args:
            camera: Camera configuration. Its image size must fit the
                preallocated render target (2048 x 2048).
            seed: Seed for the per-pixel random streams.

        Raises:
            ValueError: If the camera basis is degenerate or the image is
                larger than the render target.
        """
        self.camera = camera
        self.seed = seed
        self.geometry: CameraGeometry = setup_camera(camera)
        setup_render_target(self.width, self.height)
        seed_streams(seed, self.width * self.height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.geometry.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.geometry.image_height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    @property
    def target_samples(self) -> int:
        """Samples per pixel requested by the camera."""
        return self.camera.samples_per_pixel

    def reset(self) -> None:
        """Discard accumulated samples and restart the random streams."""
        clear_render_target()
        seed_streams(self.seed, self.width * self.height)

    def render(
        self,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> bool:
        """Render the remaining samples of the camera's budget.

        Args:
            batch_size: Number of samples to render before each callback.
                A larger batch size reduces callback overhead but provides
                less frequent updates.
            callback: Optional callback function called after each batch.
                Receives (current_total_samples, target_total_samples).
            should_cancel: Optional function polled after each batch (and
                its callback). When it returns True the render stops and the
                partial average stays available.

        Returns:
            True if the full sample budget was reached, False if cancelled.

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} samples")
            >>> renderer.render(batch_size=10, callback=progress)
        """
        for current, target in self.render_progressive(batch_size):
            if callback is not None:
                callback(current, target)
            if should_cancel is not None and should_cancel():
                break

        return self.sample_count >= self.target_samples

    def render_progressive(
        self,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the remaining samples, yielding progress after each batch.

        This is a generator-based alternative to render() with callbacks.
        Stopping the iteration early leaves a valid partial image.

        Args:
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.

        Example:
            >>> for current, target in renderer.render_progressive(batch_size=10):
            ...     print(f"Progress: {current}/{target} samples")
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        target = self.target_samples
        remaining = target - self.sample_count
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self.camera.max_depth)
            remaining -= batch
            yield (self.sample_count, target)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear image.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32,
            row 0 = top scanline.
        """
        return get_image_numpy()

    def iter_scanline_colors(self) -> Iterator[tuple[float, float, float]]:
        """Yield every pixel's averaged color in scan order.

        Rows run from the top of the image down, and each row from left to
        right.
        """
        image = self.get_image_numpy()
        for row in image:
            for pixel in row:
                yield (float(pixel[0]), float(pixel[1]), float(pixel[2]))

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count}/{self.target_samples})"
        )
