"""Preview module for output and visualization.

Components:
    display: Gamma/clamp display pipeline and Matplotlib preview
    export: PPM and PNG image export

Example:
    >>> from src.glint.preview import save_ppm, show_preview
    >>> from src.glint.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(camera)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
    >>> save_ppm(image, "image.ppm")
    >>> show_preview(image)
"""

from src.glint.preview.display import (
    DISPLAY_MAX,
    linear_to_gamma,
    process_image_for_display,
    show_preview,
)
from src.glint.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png_from_array,
    save_ppm,
    write_ppm,
)

__all__ = [
    # Display functions
    "DISPLAY_MAX",
    "linear_to_gamma",
    "process_image_for_display",
    "show_preview",
    # Export functions
    "image_to_uint8",
    "write_ppm",
    "save_ppm",
    "save_png_from_array",
    "compute_rmse",
]
