"""Camera module for view setup and ray generation.

Components:
    thin_lens: Look-at camera with optional defocus blur

Pixel (0, 0) is the top-left pixel. Rays are jittered within each pixel
for anti-aliasing.
"""

from .thin_lens import (
    Camera,
    CameraState,
    compute_image_height,
    get_camera_info,
    get_ray,
    sample_defocus_disk,
    setup_camera,
)

__all__ = [
    "Camera",
    "CameraState",
    "compute_image_height",
    "setup_camera",
    "get_ray",
    "sample_defocus_disk",
    "get_camera_info",
]
