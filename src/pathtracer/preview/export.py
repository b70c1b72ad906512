"""Image export utilities for rendered images.

Rendered images are (height, width, 3) uint8 arrays of gamma-encoded
colors, row 0 at the top.

Supported formats:
    - PPM (plain-text P3, the renderer's native output)
    - PNG (8-bit sRGB via Pillow)

Example:
    >>> import sys
    >>> from pathtracer.core.integrator import render
    >>> from pathtracer.preview.export import write_ppm
    >>>
    >>> image = render(camera, seed=0)
    >>> write_ppm(image, sys.stdout)
"""

from __future__ import annotations

from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Upper bound of the clamped intensity range before byte scaling
INTENSITY_MAX = 0.999


def _check_image(image: npt.NDArray[np.uint8]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def format_ppm(image: npt.NDArray[np.uint8]) -> str:
    """Format an image as plain-text PPM (P3).

    The header is `P3`, `<width> <height>` and `255`, followed by one
    `<r> <g> <b>` line per pixel, rows top to bottom, pixels left to right.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 255].

    Returns:
        The complete PPM text, newline terminated.

    Raises:
        ValueError: If the array does not have shape (H, W, 3).
    """
    _check_image(image)
    height, width = image.shape[0], image.shape[1]

    lines = ["P3", f"{width} {height}", "255"]
    for r, g, b in image.reshape(-1, 3).tolist():
        lines.append(f"{r} {g} {b}")
    return "\n".join(lines) + "\n"


def write_ppm(image: npt.NDArray[np.uint8], stream: TextIO) -> None:
    """Write an image as plain-text PPM (P3) to a text stream."""
    stream.write(format_ppm(image))


def save_ppm(image: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an image as a plain-text PPM (P3) file."""
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(image, f)


def save_png(image: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an image as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with dtype uint8.
        filepath: Output file path (should end in .png).
    """
    _check_image(image)
    pil_image = PILImage.fromarray(image.astype(np.uint8), mode="RGB")
    pil_image.save(filepath)


def quantize(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear color image to gamma-encoded bytes.

    Host-side counterpart of the renderer's byte conversion: take the
    square root of each positive component (0 otherwise), clamp into
    [0, 0.999] and scale by 255.999.

    Args:
        image: Linear color array of any shape.

    Returns:
        uint8 array of the same shape.
    """
    linear = np.asarray(image, dtype=np.float64)
    gamma = np.sqrt(np.maximum(linear, 0.0))
    clamped = np.clip(gamma, 0.0, INTENSITY_MAX)
    return np.floor(255.999 * clamped).astype(np.uint8)
