"""Ray data structure and vector utilities for the path tracer.

This module provides the Ray dataclass and the small geometry kernel every
other module builds on: vector arithmetic helpers, reflection and
refraction, Schlick's reflectance approximation, and the rejection samplers
used for diffuse scattering and lens defocus. All per-ray operations are
Taichi functions and must be called from inside a kernel.

Points, free directions and RGB colors share the same ``vec3`` type.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Inside a kernel: (0, 0, -5)
"""

import math

import taichi as ti
import taichi.math as tm

from pathtracer.core.random import random_float, random_range

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Components below this magnitude count as zero for scatter degeneracy checks
NEAR_ZERO_EPSILON = 1e-8

# Lower bound on the squared length of an accepted unit-vector sample.
# Keeps the normalization away from 0/0 while staying in f32 normal range.
UNIT_VECTOR_EPSILON = 1e-30


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; ``t`` is measured in multiples of this vector.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. No range checking is performed.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


def degrees_to_radians(degrees: float) -> float:
    """Convert an angle in degrees to radians (Python scope)."""
    return degrees * math.pi / 180.0


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Squared Euclidean length of a vector."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The zero vector has no direction; callers must guard against it
    (see near_zero()).
    """
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Used to detect a Lambertian scatter direction that cancelled out.

    Args:
        v: The vector to check.

    Returns:
        1 if every component is below NEAR_ZERO_EPSILON in magnitude,
        0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect a vector about a normal.

    Args:
        v: The incoming direction (pointing toward the surface).
        n: The surface normal (unit length).

    Returns:
        v - 2 * dot(v, n) * n
    """
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: ti.f32) -> vec3:
    """Refract a unit direction through a surface using Snell's law.

    The refracted ray is split into a component perpendicular to the normal
    and one parallel to it. Callers decide beforehand whether refraction is
    possible; this function does not detect total internal reflection.

    Args:
        uv: The incoming direction (unit length).
        n: The surface normal facing the incoming ray (unit length).
        etai_over_etat: Ratio of refractive indices, incident over
            transmitted.

    Returns:
        The refracted direction.
    """
    cos_theta = ti.min(dot(-uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def reflectance(cosine: ti.f32, refraction_index: ti.f32) -> ti.f32:
    """Schlick's approximation of Fresnel reflectance.

    Args:
        cosine: Cosine of the incident angle.
        refraction_index: Ratio of refractive indices at the interface.

    Returns:
        The probability that the ray reflects instead of refracting.
    """
    r0 = (1.0 - refraction_index) / (1.0 + refraction_index)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_vec3() -> vec3:
    """Random vector with each component uniform in [0, 1)."""
    return vec3(random_float(), random_float(), random_float())


@ti.func
def random_vec3_range(lo: ti.f32, hi: ti.f32) -> vec3:
    """Random vector with each component uniform in [lo, hi)."""
    return vec3(random_range(lo, hi), random_range(lo, hi), random_range(lo, hi))


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere.

    Draws points in the [-1, 1]^3 cube and rejects those outside the unit
    ball (or so close to the origin that normalizing would blow up), then
    projects the survivor onto the sphere.

    Returns:
        A random unit vector.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    while found == 0:
        candidate = random_vec3_range(-1.0, 1.0)
        lensq = length_squared(candidate)
        if UNIT_VECTOR_EPSILON < lensq and lensq <= 1.0:
            p = candidate / ti.sqrt(lensq)
            found = 1
    return p


@ti.func
def random_on_hemisphere(normal: vec3) -> vec3:
    """Generate a random unit vector in the hemisphere around a normal.

    Args:
        normal: The surface normal defining the hemisphere orientation.

    Returns:
        A random unit vector with non-negative dot product against normal.
    """
    on_unit_sphere = random_unit_vector()
    result = on_unit_sphere
    if dot(on_unit_sphere, normal) < 0.0:
        result = -on_unit_sphere
    return result


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Models a circular lens aperture for defocus blur.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    while found == 0:
        candidate = vec3(random_range(-1.0, 1.0), random_range(-1.0, 1.0), 0.0)
        if length_squared(candidate) < 1.0:
            p = candidate
            found = 1
    return p
