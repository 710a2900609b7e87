"""Path tracing integrator for Monte Carlo light transport.

Each camera sample follows a path through the scene: at every hit the
material decides whether the ray scatters (and how much of each color
channel survives) or is absorbed. A path that leaves the scene picks up
the sky gradient, attenuated by every bounce on the way. A path that runs
out of bounces contributes black.

Key features:
    - Material dispatch (Lambertian, Metal, Dielectric)
    - Bounded path depth (no Russian roulette)
    - One random stream per pixel for reproducible parallel rendering
    - Progressive accumulation of per-pixel sample sums

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.glint.camera.thin_lens import Camera, setup_camera
    >>> from src.glint.core.integrator import (
    ...     get_image_numpy, render_image, setup_render_target
    ... )
    >>> from src.glint.core.sampler import seed_streams
    >>> from src.glint.scene.presets import create_random_spheres_scene
    >>>
    >>> scene, camera = create_random_spheres_scene()
    >>> geometry = setup_camera(camera)
    >>> setup_render_target(geometry.image_width, geometry.image_height)
    >>> seed_streams(0, geometry.image_width * geometry.image_height)
    >>> render_image(num_samples=100, max_depth=camera.max_depth)
    >>> image = get_image_numpy()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.glint.camera.thin_lens import get_ray
from src.glint.core.interval import Interval
from src.glint.core.ray import Ray, make_ray
from src.glint.materials.material import scatter_material
from src.glint.scene.intersection import hit_scene

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound of the hit window; skips hits on the surface a ray just left
T_MIN = 0.001

# Sky gradient endpoints (horizon and zenith)
SKY_HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_ZENITH_COLOR = vec3(0.5, 0.7, 1.0)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel sum of samples, indexed [column, row] with row 0 at the top
_color_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Samples accumulated into every pixel of _color_sum
_samples_taken = ti.field(dtype=ti.i32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.
    The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT
    to avoid Taichi kernel recompilation issues.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

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

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the accumulated samples to zero."""
    _color_sum.fill(0.0)
    _samples_taken[None] = 0


def reset_render_target() -> None:
    """Forget the render target entirely; it must be set up again."""
    clear_render_target()
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky color seen along a direction.

    Blends white at the horizon into light blue overhead, based on the
    height of the unit direction.

    Args:
        direction: Ray direction (any length).

    Returns:
        The background radiance (RGB).
    """
    unit_direction = tm.normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * SKY_HORIZON_COLOR + a * SKY_ZENITH_COLOR


@ti.func
def ray_color(ray: Ray, depth: ti.i32, stream: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Follows the ray for at most ``depth`` scene queries. The running
    attenuation is the product of every bounce's attenuation so far.

    Args:
        ray: The ray to trace.
        depth: Remaining bounce budget. Zero or less gives black.
        stream: The random stream to draw from.

    Returns:
        The estimated radiance (RGB) for this path sample.
    """
    origin = ray.origin
    direction = ray.direction

    color = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(1.0, 1.0, 1.0)

    # Taichi funcs cannot recurse, so the bounce chain is an explicit loop
    active = 1
    for _ in range(depth):
        if active == 1:
            current = make_ray(origin, direction)
            rec = hit_scene(current, Interval(min=T_MIN, max=tm.inf))

            if rec.hit == 0:
                color = attenuation * background_color(direction)
                active = 0
            else:
                scattered, bounce_attenuation, did_scatter = scatter_material(
                    rec.material_id, current, rec, stream
                )
                if did_scatter == 0:
                    active = 0
                else:
                    attenuation *= bounce_attenuation
                    origin = scattered.origin
                    direction = scattered.direction

    return color


@ti.func
def pixel_stream(i: ti.i32, j: ti.i32, width: ti.i32) -> ti.i32:
    """Random stream owned by pixel (i, j)."""
    return j * width + i


@ti.func
def sample_pixel(i: ti.i32, j: ti.i32, width: ti.i32, max_depth: ti.i32) -> vec3:
    """Trace one camera sample through pixel (i, j).

    Non-finite components are replaced by zero.
    """
    stream = pixel_stream(i, j, width)
    color = ray_color(get_ray(i, j, stream), max_depth, stream)

    for c in ti.static(range(3)):
        if tm.isnan(color[c]) or tm.isinf(color[c]):
            color[c] = 0.0

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_pass(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Add one sample to every pixel of the color sum.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Bounce budget for each path.
    """
    for i, j in ti.ndrange(width, height):
        _color_sum[i, j] += sample_pixel(i, j, width, max_depth)


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, max_depth: ti.i32
) -> vec3:
    return sample_pixel(pixel_i, pixel_j, width, max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_sample(pixel_i: int, pixel_j: int, max_depth: int = 10) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    This is a Python-callable function for testing. The sample is not
    accumulated into the render target. For production rendering, use
    render_image() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        max_depth: Bounce budget for the path.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, _ = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, max_depth)

    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(num_samples: int = 1, max_depth: int = 10) -> None:
    """Add samples to every pixel of the render target.

    Can be called multiple times to add more samples for convergence.

    Args:
        num_samples: Number of samples to render per pixel.
        max_depth: Bounce budget for each path.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    for _ in range(num_samples):
        _render_pass(width, height, max_depth)
        _samples_taken[None] += 1


def get_total_samples() -> int:
    """Get the number of samples accumulated into every pixel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    return int(_samples_taken[None])


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the averaged linear image as a NumPy array.

    Each pixel is its sample sum scaled by 1 / samples. Values are not
    clamped or gamma corrected. Before any sample is taken the image is
    black.

    Returns:
        NumPy array of shape (height, width, 3), row 0 = top scanline.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    samples = int(_samples_taken[None])

    # Extract active region and transpose (width, height, 3) -> (height, width, 3)
    image = _color_sum.to_numpy()[:width, :height, :]
    image = np.transpose(image, (1, 0, 2))

    if samples == 0:
        return np.zeros_like(image, dtype=np.float32)

    scale = np.float32(1.0 / samples)
    return (image * scale).astype(np.float32)
