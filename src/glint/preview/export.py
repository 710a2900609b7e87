"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3, 8 bits per channel)
    - PNG (8-bit via Pillow)

Both formats use the quantization of image_to_uint8: gamma 2, clamp to
[0, 0.999], scale by 256 and truncate.

Example:
    >>> from src.glint.preview.export import save_ppm
    >>> from src.glint.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(camera)
    >>> renderer.render()
    >>> save_ppm(renderer.get_image_numpy(), "image.ppm")
"""

from __future__ import annotations

from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.glint.preview.display import process_image_for_display


def image_to_uint8(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to 8-bit display values.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(image)
    return (processed * 256.0).astype(np.uint8)


def write_ppm(image: npt.NDArray[np.float32], stream: TextIO) -> None:
    """Write an image to a text stream as a plain (P3) PPM.

    The header is ``P3``, the width and height, and 255. Each pixel follows
    on its own line as ``r g b``, top row first, left to right.

    Args:
        image: Linear image array of shape (H, W, 3).
        stream: Writable text stream.

    Raises:
        ValueError: If the image is not an (H, W, 3) array.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")

    height, width = image.shape[:2]
    pixels = image_to_uint8(image).reshape(-1, 3)

    stream.write(f"P3\n{width} {height}\n255\n")
    stream.writelines(f"{r} {g} {b}\n" for r, g, b in pixels.tolist())


def save_ppm(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Save a linear image as a plain (P3) PPM file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .ppm).
    """
    with open(filepath, "w", encoding="ascii", newline="\n") as f:
        write_ppm(image, f)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
) -> None:
    """Save a linear image as an 8-bit PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
