"""Path tracing integrator for Monte Carlo light transport.

This module implements the per-ray color estimator and the scanline
rendering kernels. A ray's color is found by following it through the
scene, bouncing off surfaces according to their material, and multiplying
the attenuation of every bounce into the sky color the path finally
escapes to.

Key features:
    - Material dispatch (Lambertian, Metal, Dielectric)
    - Bounce limit from the camera's max_depth
    - Sky gradient from white at the horizon to light blue overhead
    - Gamma-2 encoding and 8-bit quantization of the averaged samples
    - Explicitly seeded random stream, so equal seeds give equal images

Rendering is single-threaded: every kernel serializes its outer loop and
the random generator is shared by all samples in scan order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.integrator import render
    >>> from pathtracer.scene.demo import create_two_sphere_scene
    >>>
    >>> scene, camera = create_two_sphere_scene()
    >>> image = render(camera, seed=0)
    >>> image.shape
    (225, 400, 3)
"""

from typing import Callable

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.camera.thin_lens import Camera, get_ray, setup_camera
from pathtracer.core.interval import INFINITY, interval_clamp, make_interval
from pathtracer.core.random import seed_random
from pathtracer.core.ray import Ray, make_ray, normalize
from pathtracer.materials.dielectric import scatter_dielectric_by_id
from pathtracer.materials.lambertian import scatter_lambertian_by_id
from pathtracer.materials.metal import scatter_metal_by_id
from pathtracer.scene.intersection import intersect_scene
from pathtracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound of the hit interval; ignores hits from round-off at the origin
T_MIN = 0.001

# Sky gradient endpoints
SKY_HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_ZENITH_COLOR = vec3(0.5, 0.7, 1.0)

# Intensity range for 8-bit quantization
INTENSITY_MIN = 0.000
INTENSITY_MAX = 0.999

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Host-side images of shape (height, width, 3), sized per render.
# Row 0 is the top of the image.
_linear_image: np.ndarray | None = None
_byte_image: np.ndarray | None = None

_samples_per_pixel = ti.field(dtype=ti.i32, shape=())
_max_depth = ti.field(dtype=ti.i32, shape=())
_pixel_samples_scale = ti.field(dtype=ti.f32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Allocate zeroed render target buffers of the given size.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        ValueError: If either dimension is not positive.
    """
    global _linear_image, _byte_image

    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    _linear_image = np.zeros((height, width, 3), dtype=np.float32)
    _byte_image = np.zeros((height, width, 3), dtype=np.int32)


def clear_render_target() -> None:
    """Zero the render target buffers, keeping their size."""
    if _linear_image is not None:
        _linear_image.fill(0.0)
        _byte_image.fill(0)


def release_render_target() -> None:
    """Drop the render target buffers."""
    global _linear_image, _byte_image

    _linear_image = None
    _byte_image = None


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height), or (0, 0) if no render target exists.
    """
    if _linear_image is None:
        return 0, 0
    return int(_linear_image.shape[1]), int(_linear_image.shape[0])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _linear_image is None:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Dispatch to the appropriate material scattering function.

    Args:
        material_id: The unified material ID.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal (unit length, facing toward ray).
        front_face: 1 if hit front face, 0 if back face.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        did_scatter is 0 for absorbed rays and unknown material IDs.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian_by_id(
            type_index, normal
        )

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal_by_id(
            type_index, incident_direction, normal
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric_by_id(
            type_index, incident_direction, normal, front_face
        )

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background color seen along a direction that hits nothing."""
    unit_direction = normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * SKY_HORIZON_COLOR + a * SKY_ZENITH_COLOR


@ti.func
def ray_color(ray: Ray, depth: ti.i32) -> vec3:
    """Estimate the light arriving along a ray.

    Follows the ray for at most `depth` bounces. Each scatter multiplies
    its attenuation into the path throughput; the path ends black when it
    runs out of bounces or is absorbed, and with the sky color times the
    throughput when it escapes the scene.

    Args:
        ray: The ray to trace.
        depth: Remaining bounce budget. Values <= 0 give black.

    Returns:
        The estimated linear RGB color.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction

    # Active flag for path continuation
    active = 1
    remaining = depth

    while active == 1:
        if remaining <= 0:
            active = 0
        else:
            rec = intersect_scene(make_ray(origin, direction), make_interval(T_MIN, INFINITY))

            if rec.hit == 0:
                color = throughput * sky_color(direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = _scatter_material(
                    rec.material_id, direction, rec.normal, rec.front_face
                )

                if did_scatter == 0:
                    active = 0
                else:
                    throughput = throughput * attenuation
                    origin = rec.point
                    direction = scattered_direction
                    remaining -= 1

    return color


# =============================================================================
# Color Output
# =============================================================================


@ti.func
def linear_to_gamma(linear_component: ti.f32) -> ti.f32:
    """Gamma-2 encode a linear color component; non-positive values give 0."""
    result = 0.0
    if linear_component > 0.0:
        result = ti.sqrt(linear_component)
    return result


@ti.func
def color_to_bytes(pixel_color: vec3) -> tm.ivec3:
    """Convert a linear color to gamma-encoded bytes in [0, 255]."""
    intensity = make_interval(INTENSITY_MIN, INTENSITY_MAX)
    result = tm.ivec3(0, 0, 0)
    for c in ti.static(range(3)):
        g = interval_clamp(intensity, linear_to_gamma(pixel_color[c]))
        result[c] = ti.cast(255.999 * g, ti.i32)
    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_row(
    j: ti.i32,
    linear_image: ti.types.ndarray(dtype=ti.f32, ndim=3),
    byte_image: ti.types.ndarray(dtype=ti.i32, ndim=3),
):
    """Render every pixel of row j, left to right, into the (H, W, 3) images."""
    ti.loop_config(serialize=True)
    for i in range(linear_image.shape[1]):
        pixel_color = vec3(0.0, 0.0, 0.0)
        for _ in range(_samples_per_pixel[None]):
            ray = get_ray(i, j)
            pixel_color += ray_color(ray, _max_depth[None])

        pixel_color = pixel_color * _pixel_samples_scale[None]
        pixel_bytes = color_to_bytes(pixel_color)
        for c in ti.static(range(3)):
            linear_image[j, i, c] = pixel_color[c]
            byte_image[j, i, c] = pixel_bytes[c]


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32) -> vec3:
    return ray_color(get_ray(pixel_i, pixel_j), _max_depth[None])


@ti.kernel
def _trace_ray(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    return ray_color(make_ray(origin, direction), depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int,
) -> tuple[float, float, float]:
    """Evaluate the color estimator for a single ray.

    Args:
        origin: Ray origin.
        direction: Ray direction (any non-zero length).
        depth: Bounce budget.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    color = _trace_ray(vec3(*origin), vec3(*direction), depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_sample(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    This is a Python-callable function for testing. For production rendering,
    use render() which processes every pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(pixel_i, pixel_j)
    return (float(color[0]), float(color[1]), float(color[2]))


def render(
    camera: Camera,
    *,
    seed: int = 0,
    progress: Callable[[int], None] | None = None,
) -> np.ndarray:
    """Render the current scene through the camera.

    Initializes the camera and render target, seeds the random generator,
    then renders rows from top to bottom.

    Args:
        camera: Camera configuration.
        seed: Random seed. Equal seeds with equal scenes give identical images.
        progress: Optional callback invoked before each row with the number
            of rows remaining (including that row).

    Returns:
        A (height, width, 3) uint8 array of gamma-encoded colors.

    Raises:
        ValueError: If the camera configuration is invalid.
    """
    state = setup_camera(camera)
    width, height = state.image_width, state.image_height
    setup_render_target(width, height)

    _samples_per_pixel[None] = state.samples_per_pixel
    _max_depth[None] = state.max_depth
    _pixel_samples_scale[None] = state.pixel_samples_scale

    seed_random(seed)

    for j in range(height):
        if progress is not None:
            progress(height - j)
        _render_row(j, _linear_image, _byte_image)

    return get_byte_image_numpy()


def get_linear_image_numpy() -> np.ndarray:
    """Get a copy of the averaged linear colors as a (height, width, 3) float32 array.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _linear_image.copy()


def get_byte_image_numpy() -> np.ndarray:
    """Get the gamma-encoded colors as a (height, width, 3) uint8 array.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _byte_image.astype(np.uint8)
