"""Display conversion and Matplotlib preview for rendered images.

Rendered images are linear RGB averages. Before display or export they go
through the same pipeline:
    1. Gamma 2 encoding (square root; non-positive values map to 0)
    2. Clamping to [0, 0.999]

so that scaling by 256 and truncating yields bytes in [0, 255].

Example:
    >>> from src.glint.preview.display import show_preview
    >>> from src.glint.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(camera)
    >>> renderer.render()
    >>> show_preview(renderer.get_image_numpy())
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

# Display intensities are clamped to [0, DISPLAY_MAX] before quantization
DISPLAY_MAX = 0.999


def linear_to_gamma(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Apply gamma 2 encoding to linear values.

    Args:
        image: Linear image array of any shape.

    Returns:
        sqrt(value) for positive values and 0 elsewhere.
    """
    image = np.asarray(image, dtype=np.float32)
    result = np.sqrt(np.maximum(image, 0.0))
    return result.astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Process a linear image for display.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Gamma encoded image clamped to [0, DISPLAY_MAX].
    """
    result = linear_to_gamma(image)
    result = np.clip(result, 0.0, DISPLAY_MAX)
    return result.astype(np.float32)


def show_preview(
    image: npt.NDArray[np.float32],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3).
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
