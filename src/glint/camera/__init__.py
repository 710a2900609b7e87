"""Camera module for view and ray generation.

Components:
    thin_lens: Look-at camera with an optional defocus disk

Camera responsibilities:
    - Derive the viewport on the focus plane from vfov and focus_dist
    - Jitter each sample inside its pixel for anti-aliasing
    - Spread ray origins over the lens for depth of field

Pixel (i, j) counts columns from the left and rows from the top.
"""

from .thin_lens import (
    Camera,
    CameraGeometry,
    compute_camera_geometry,
    defocus_disk_sample,
    get_camera_info,
    get_ray,
    sample_ray,
    setup_camera,
)

__all__ = [
    "Camera",
    "CameraGeometry",
    "compute_camera_geometry",
    "setup_camera",
    "get_ray",
    "defocus_disk_sample",
    "get_camera_info",
    "sample_ray",
]
