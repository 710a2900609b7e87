"""Thin-lens camera model for primary ray generation.

The camera is positioned with look-at parameters (lookfrom, lookat, vup)
and builds an orthonormal basis (u, v, w):
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits on the focus plane, ``focus_dist`` in front of the
camera. Pixel (i, j) counts columns from the left and rows from the top,
so pixel (0, 0) is the upper-left corner of the image.

With ``defocus_angle > 0`` ray origins are spread over a disk centered on
the camera (the lens), producing depth of field: points on the focus plane
stay sharp and everything else blurs. With ``defocus_angle <= 0`` every
ray starts at the camera center (a pinhole).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.glint.camera.thin_lens import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(
    ...     aspect_ratio=16.0 / 9.0,
    ...     image_width=400,
    ...     vfov=30.0,
    ...     lookfrom=(13.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     defocus_angle=0.6,
    ...     focus_dist=10.0,
    ... )
    >>> geometry = setup_camera(camera)
    >>> geometry.image_height
    225
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0, 0)  # Ray through the upper-left pixel
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.glint.core.ray import Ray, make_ray, random_in_unit_disk, random_unit_square_offset, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a thin-lens camera.

    Attributes:
        aspect_ratio: Ideal width divided by height of the output image.
        image_width: Rendered image width in pixels.
        samples_per_pixel: Number of random samples averaged per pixel.
        max_depth: Maximum number of ray bounces into the scene.
        vfov: Vertical field of view in degrees, strictly between 0 and 180.
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Camera-relative "up" direction.
        defocus_angle: Variation angle of rays through each pixel, in degrees.
            0 disables depth of field.
        focus_dist: Distance from lookfrom to the plane of perfect focus.

    Raises:
        ValueError: If any scalar setting is out of range.
    """

    aspect_ratio: float = 1.0
    image_width: int = 100
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    defocus_angle: float = 0.0
    focus_dist: float = 10.0

    def __post_init__(self) -> None:
        if self.image_width <= 0:
            raise ValueError(f"image_width must be positive, got {self.image_width}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.focus_dist <= 0.0:
            raise ValueError(f"focus_dist must be positive, got {self.focus_dist}")
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must lie in (0, 180) degrees, got {self.vfov}")

    @property
    def image_height(self) -> int:
        """Image height in pixels, at least 1."""
        return max(1, int(self.image_width / self.aspect_ratio))

    @property
    def pixel_samples_scale(self) -> float:
        """Color scale factor for a sum of pixel samples."""
        return 1.0 / self.samples_per_pixel


@dataclass(frozen=True)
class CameraGeometry:
    """Derived camera values, computed once by setup_camera.

    Attributes:
        image_width: Image width in pixels.
        image_height: Image height in pixels.
        pixel_samples_scale: 1 / samples_per_pixel.
        center: Camera center (lookfrom).
        pixel00_loc: Location of the center of pixel (0, 0).
        pixel_delta_u: Offset to the pixel to the right.
        pixel_delta_v: Offset to the pixel below.
        u: Camera frame unit vector pointing right.
        v: Camera frame unit vector pointing up.
        w: Camera frame unit vector opposite the view direction.
        defocus_disk_u: Defocus disk horizontal radius vector.
        defocus_disk_v: Defocus disk vertical radius vector.
        defocus_angle: Defocus angle in degrees.
    """

    image_width: int
    image_height: int
    pixel_samples_scale: float
    center: tuple[float, float, float]
    pixel00_loc: tuple[float, float, float]
    pixel_delta_u: tuple[float, float, float]
    pixel_delta_v: tuple[float, float, float]
    u: tuple[float, float, float]
    v: tuple[float, float, float]
    w: tuple[float, float, float]
    defocus_disk_u: tuple[float, float, float]
    defocus_disk_v: tuple[float, float, float]
    defocus_angle: float


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_angle = ti.field(dtype=ti.f32, shape=())

# Last geometry written by setup_camera
_current_geometry: CameraGeometry | None = None


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def _to_tuple(v: np.ndarray) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def compute_camera_geometry(camera: Camera) -> CameraGeometry:
    """Derive the viewport and lens geometry for a camera.

    Args:
        camera: Camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        ValueError: If lookfrom equals lookat, or vup is parallel to the
            view direction.
    """
    image_width = int(camera.image_width)
    image_height = camera.image_height

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    # w points from lookat toward lookfrom (backward)
    w = lookfrom - lookat
    w_len = np.linalg.norm(w)
    if w_len == 0.0:
        raise ValueError("lookfrom and lookat must be different points")
    w = w / w_len

    # u points right (perpendicular to w and vup)
    u = np.cross(vup, w)
    u_len = np.linalg.norm(u)
    if u_len < 1e-12:
        raise ValueError("vup must not be parallel to the view direction")
    u = u / u_len

    # v points up in the camera's frame
    v = np.cross(w, u)

    # Viewport on the focus plane. The width uses the real pixel ratio
    # because image_height was rounded to an integer.
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * camera.focus_dist
    viewport_width = viewport_height * (image_width / image_height)

    # Vectors across the horizontal and down the vertical viewport edges
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = lookfrom - camera.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = camera.focus_dist * math.tan(math.radians(camera.defocus_angle / 2.0))

    return CameraGeometry(
        image_width=image_width,
        image_height=image_height,
        pixel_samples_scale=camera.pixel_samples_scale,
        center=_to_tuple(lookfrom),
        pixel00_loc=_to_tuple(pixel00_loc),
        pixel_delta_u=_to_tuple(pixel_delta_u),
        pixel_delta_v=_to_tuple(pixel_delta_v),
        u=_to_tuple(u),
        v=_to_tuple(v),
        w=_to_tuple(w),
        defocus_disk_u=_to_tuple(u * defocus_radius),
        defocus_disk_v=_to_tuple(v * defocus_radius),
        defocus_angle=float(camera.defocus_angle),
    )


def setup_camera(camera: Camera) -> CameraGeometry:
    """Initialize camera state from configuration.

    Computes the camera geometry and writes it to the Taichi fields read by
    get_ray. This must be called before rendering.

    Args:
        camera: Camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        ValueError: If the camera basis is degenerate.
    """
    global _current_geometry

    geometry = compute_camera_geometry(camera)

    _camera_center[None] = list(geometry.center)
    _pixel00_loc[None] = list(geometry.pixel00_loc)
    _pixel_delta_u[None] = list(geometry.pixel_delta_u)
    _pixel_delta_v[None] = list(geometry.pixel_delta_v)
    _defocus_disk_u[None] = list(geometry.defocus_disk_u)
    _defocus_disk_v[None] = list(geometry.defocus_disk_v)
    _defocus_angle[None] = geometry.defocus_angle

    _current_geometry = geometry
    return geometry


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def defocus_disk_sample(stream: ti.i32) -> vec3:
    """Return a random point on the camera defocus disk."""
    p = random_in_unit_disk(stream)
    return _camera_center[None] + p[0] * _defocus_disk_u[None] + p[1] * _defocus_disk_v[None]


@ti.func
def get_ray(i: ti.i32, j: ti.i32, stream: ti.i32) -> Ray:
    """Generate a camera ray for pixel (i, j).

    The ray passes through a random point in the unit square around the
    pixel center and starts on the defocus disk (or at the camera center
    when defocus is disabled). The direction is not normalized.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).
        stream: The random stream to draw from.

    Returns:
        The primary Ray for this sample.
    """
    offset = random_unit_square_offset(stream)
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(i, ti.f32) + offset[0]) * _pixel_delta_u[None]
        + (ti.cast(j, ti.f32) + offset[1]) * _pixel_delta_v[None]
    )

    ray_origin = _camera_center[None]
    if _defocus_angle[None] > 0.0:
        ray_origin = defocus_disk_sample(stream)

    return make_ray(ray_origin, pixel_sample - ray_origin)


# =============================================================================
# Utility Functions
# =============================================================================

_sampled_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_sampled_direction = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _sample_ray_kernel(i: ti.i32, j: ti.i32, stream: ti.i32):
    ray = get_ray(i, j, stream)
    _sampled_origin[None] = ray.origin
    _sampled_direction[None] = ray.direction


def sample_ray(
    i: int, j: int, stream: int = 0
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Generate one camera ray from Python.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).
        stream: The random stream to draw from.

    Returns:
        Tuple of (origin, direction).
    """
    _sample_ray_kernel(i, j, stream)
    return _to_tuple(_sampled_origin[None]), _to_tuple(_sampled_direction[None])


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v,
        u, v, w, defocus_disk_u and defocus_disk_v.

    Raises:
        RuntimeError: If setup_camera has not been called.
    """
    if _current_geometry is None:
        raise RuntimeError("Camera not set up. Call setup_camera() first.")

    g = _current_geometry
    return {
        "center": g.center,
        "pixel00_loc": g.pixel00_loc,
        "pixel_delta_u": g.pixel_delta_u,
        "pixel_delta_v": g.pixel_delta_v,
        "u": g.u,
        "v": g.v,
        "w": g.w,
        "defocus_disk_u": g.defocus_disk_u,
        "defocus_disk_v": g.defocus_disk_v,
    }
