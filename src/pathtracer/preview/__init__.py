"""Preview module for image output.

Components:
    export: Plain-text PPM and PNG export

Example:
    >>> from pathtracer.preview import save_ppm
    >>> save_ppm(image, "image.ppm")
"""

from pathtracer.preview.export import (
    format_ppm,
    quantize,
    save_png,
    save_ppm,
    write_ppm,
)

__all__ = [
    "format_ppm",
    "write_ppm",
    "save_ppm",
    "save_png",
    "quantize",
]
