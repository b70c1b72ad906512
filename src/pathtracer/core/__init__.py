"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    interval: Closed real intervals used for hit ranges and clamping
    random: Explicitly seeded random number source
    integrator: Color estimator and scanline rendering

All per-ray operations are Taichi functions meant to be called from kernels.
"""

from .interval import (
    EMPTY,
    INFINITY,
    UNIVERSE,
    Interval,
    empty_interval,
    interval_clamp,
    interval_contains,
    interval_size,
    interval_surrounds,
    make_interval,
    universe_interval,
)
from .random import get_random_state, random_float, random_range, seed_random
from .ray import (
    Ray,
    cross,
    degrees_to_radians,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    random_in_unit_disk,
    random_on_hemisphere,
    random_unit_vector,
    random_vec3,
    random_vec3_range,
    ray_at,
    reflect,
    reflectance,
    refract,
    vec3,
)

# Note: integrator is NOT imported here to avoid circular imports.
# Import directly from pathtracer.core.integrator when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "reflectance",
    "near_zero",
    "degrees_to_radians",
    "random_vec3",
    "random_vec3_range",
    "random_unit_vector",
    "random_on_hemisphere",
    "random_in_unit_disk",
    "seed_random",
    "get_random_state",
    "random_float",
    "random_range",
    "Interval",
    "make_interval",
    "empty_interval",
    "universe_interval",
    "interval_size",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "INFINITY",
    "EMPTY",
    "UNIVERSE",
]
