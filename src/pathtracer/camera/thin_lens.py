"""Thin-lens camera model for ray generation with optional depth of field.

The camera is configured through the public fields of a Camera dataclass
and initialized once per render by setup_camera(), which derives the view
geometry and stores it in Taichi fields for use inside kernels.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits at focus_dist in front of the camera. Pixel (0, 0) is the
top-left pixel; pixel_delta_v points down the image. With a positive
defocus_angle, rays start from a random point on a disk around the camera
center, which blurs everything away from the focus plane.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.camera.thin_lens import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(aspect_ratio=16.0 / 9.0, image_width=400)
    >>> state = setup_camera(camera)
    >>> state.image_height
    225
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(200, 112)  # Jittered ray through the image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.core.random import random_float
from pathtracer.core.ray import Ray, make_ray, random_in_unit_disk

vec3 = tm.vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Public configuration of the camera.

    Attributes:
        aspect_ratio: Ratio of image width over height.
        image_width: Rendered image width in pixels. Values below 1 become 1.
        samples_per_pixel: Count of random samples for each pixel.
        max_depth: Maximum number of ray bounces into the scene.
        vfov: Vertical view angle (field of view) in degrees.
        lookfrom: Point the camera is looking from.
        lookat: Point the camera is looking at.
        vup: Camera-relative "up" direction.
        defocus_angle: Variation angle of rays through each pixel, in degrees.
            0 gives a pinhole camera.
        focus_dist: Distance from lookfrom to the plane of perfect focus.
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


@dataclass(frozen=True)
class CameraState:
    """Derived view geometry, computed once by setup_camera()."""

    image_width: int
    image_height: int
    samples_per_pixel: int
    max_depth: int
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


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Defocus disk
_defocus_angle = ti.field(dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per render)
# =============================================================================


def compute_image_height(image_width: int, aspect_ratio: float) -> int:
    """Image height for the given width and aspect ratio, at least 1."""
    return max(1, int(image_width / aspect_ratio))


def _validate_camera(camera: Camera) -> None:
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {camera.aspect_ratio}")
    if camera.samples_per_pixel <= 0:
        raise ValueError(
            f"samples_per_pixel must be positive, got {camera.samples_per_pixel}"
        )
    if camera.max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {camera.max_depth}")

    view = np.subtract(camera.lookfrom, camera.lookat, dtype=np.float64)
    if not np.any(view):
        raise ValueError(f"lookfrom and lookat must differ, both are {tuple(camera.lookfrom)}")
    if not np.any(np.cross(camera.vup, view)):
        raise ValueError(f"vup {tuple(camera.vup)} must not be parallel to the view direction")


def _as_tuple(a: np.ndarray) -> tuple[float, float, float]:
    return (float(a[0]), float(a[1]), float(a[2]))


def setup_camera(camera: Camera) -> CameraState:
    """Initialize camera state from configuration.

    Computes the image height, the camera's orthonormal basis and the
    viewport geometry, then writes them to Taichi fields. This must be
    called before any kernel uses get_ray().

    Args:
        camera: Camera configuration.

    Returns:
        A frozen snapshot of the derived geometry.

    Raises:
        ValueError: If the configuration is invalid (non-positive aspect
            ratio or sample count, negative max depth, lookfrom equal to
            lookat, or vup parallel to the view direction).
    """
    _validate_camera(camera)

    # Zero or negative widths floor to a single pixel
    image_width = max(1, camera.image_width)
    image_height = compute_image_height(image_width, camera.aspect_ratio)

    center = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    # Viewport dimensions at the focus plane
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * camera.focus_dist
    viewport_width = viewport_height * (image_width / image_height)

    w = center - lookat
    w = w / np.linalg.norm(w)
    u = np.cross(vup, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    # Vectors across the horizontal and down the vertical viewport edges
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = (
        center - camera.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    )
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = camera.focus_dist * math.tan(math.radians(camera.defocus_angle / 2.0))
    defocus_disk_u = u * defocus_radius
    defocus_disk_v = v * defocus_radius

    _camera_center[None] = center.tolist()
    _pixel00_loc[None] = pixel00_loc.tolist()
    _pixel_delta_u[None] = pixel_delta_u.tolist()
    _pixel_delta_v[None] = pixel_delta_v.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _defocus_angle[None] = camera.defocus_angle
    _defocus_disk_u[None] = defocus_disk_u.tolist()
    _defocus_disk_v[None] = defocus_disk_v.tolist()

    return CameraState(
        image_width=image_width,
        image_height=image_height,
        samples_per_pixel=camera.samples_per_pixel,
        max_depth=camera.max_depth,
        pixel_samples_scale=1.0 / camera.samples_per_pixel,
        center=_as_tuple(center),
        pixel00_loc=_as_tuple(pixel00_loc),
        pixel_delta_u=_as_tuple(pixel_delta_u),
        pixel_delta_v=_as_tuple(pixel_delta_v),
        u=_as_tuple(u),
        v=_as_tuple(v),
        w=_as_tuple(w),
        defocus_disk_u=_as_tuple(defocus_disk_u),
        defocus_disk_v=_as_tuple(defocus_disk_v),
    )


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def sample_square() -> vec3:
    """Random offset in the [-0.5, 0.5) x [-0.5, 0.5) unit square."""
    return vec3(random_float() - 0.5, random_float() - 0.5, 0.0)


@ti.func
def sample_defocus_disk() -> vec3:
    """Random point on the camera defocus disk."""
    p = random_in_unit_disk()
    return _camera_center[None] + (p[0] * _defocus_disk_u[None]) + (p[1] * _defocus_disk_v[None])


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Construct a camera ray toward a random point around pixel (i, j).

    The ray originates from the camera center, or from the defocus disk
    when defocus_angle > 0. The direction is not normalized.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).
    """
    offset = sample_square()
    pixel_sample = (
        _pixel00_loc[None]
        + ((ti.cast(i, ti.f32) + offset[0]) * _pixel_delta_u[None])
        + ((ti.cast(j, ti.f32) + offset[1]) * _pixel_delta_v[None])
    )

    ray_origin = _camera_center[None]
    if _defocus_angle[None] > 0.0:
        ray_origin = sample_defocus_disk()

    ray_direction = pixel_sample - ray_origin
    return make_ray(ray_origin, ray_direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel deltas, basis vectors
        and defocus disk vectors.
    """
    fields = {
        "center": _camera_center,
        "pixel00_loc": _pixel00_loc,
        "pixel_delta_u": _pixel_delta_u,
        "pixel_delta_v": _pixel_delta_v,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
        "defocus_disk_u": _defocus_disk_u,
        "defocus_disk_v": _defocus_disk_v,
    }
    info = {}
    for name, field in fields.items():
        vec = field[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info
