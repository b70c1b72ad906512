"""Closed numeric intervals for ray parameters and color channels.

An Interval bounds the ``t`` values a surface may report for a ray and also
bounds color channels before quantization. The default, empty interval runs
from +inf to -inf so every membership test on it is false.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.interval import make_interval, interval_clamp
    >>> @ti.kernel
    ... def clamp_it() -> ti.f32:
    ...     return interval_clamp(make_interval(0.0, 0.999), 1.5)
    >>> clamp_it()  # 0.999
"""

import math

import taichi as ti

INFINITY = math.inf

# Host-side (min, max) pairs for the two named intervals
EMPTY = (INFINITY, -INFINITY)
UNIVERSE = (-INFINITY, INFINITY)


@ti.dataclass
class Interval:
    """A real range [min, max].

    Attributes:
        min: Lower bound.
        max: Upper bound. An interval with max < min is empty.
    """

    min: ti.f32
    max: ti.f32


@ti.func
def make_interval(lo: ti.f32, hi: ti.f32) -> Interval:
    return Interval(min=lo, max=hi)


@ti.func
def empty_interval() -> Interval:
    """The interval containing nothing: (+inf, -inf)."""
    return Interval(min=INFINITY, max=-INFINITY)


@ti.func
def universe_interval() -> Interval:
    """The interval containing every real number: (-inf, +inf)."""
    return Interval(min=-INFINITY, max=INFINITY)


@ti.func
def interval_size(interval: Interval) -> ti.f32:
    """Width of the interval. Negative for an empty interval."""
    return interval.max - interval.min


@ti.func
def interval_contains(interval: Interval, x: ti.f32) -> ti.i32:
    """Inclusive membership test: min <= x <= max."""
    return interval.min <= x and x <= interval.max


@ti.func
def interval_surrounds(interval: Interval, x: ti.f32) -> ti.i32:
    """Exclusive membership test: min < x < max."""
    return interval.min < x and x < interval.max


@ti.func
def interval_clamp(interval: Interval, x: ti.f32) -> ti.f32:
    """Saturate x into [min, max]."""
    result = x
    if x < interval.min:
        result = interval.min
    if x > interval.max:
        result = interval.max
    return result
