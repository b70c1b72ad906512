"""Seedable random number source for Monte Carlo sampling.

All stochastic decisions in the renderer (pixel jitter, lens sampling,
scatter directions, Fresnel coin flips) draw from a single xorshift32
generator whose state lives in a 0-d Taichi field. Rendering kernels
serialize their outer loop, so exactly one thread advances the generator
and a render is fully reproducible from its seed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.random import seed_random, random_float
    >>> seed_random(7)
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     return random_float()
    >>> value = draw()  # Same value every time after seed_random(7)
"""

import taichi as ti

# Golden-ratio multiplier used to spread small integer seeds across 32 bits
_SEED_MULTIPLIER = 0x9E3779B9
_SEED_INCREMENT = 0x7F4A7C15

# Any non-zero state works for xorshift; zero is a fixed point
_FALLBACK_STATE = 0x6D2B79F5

_U32_MASK = 0xFFFFFFFF

# 1 / 2^24: converts the top 24 bits of a draw into [0, 1)
_INV_2_24 = 1.0 / 16777216.0

_rng_state = ti.field(dtype=ti.u32, shape=())


def _mix_seed(seed: int) -> int:
    state = (seed * _SEED_MULTIPLIER + _SEED_INCREMENT) & _U32_MASK
    if state == 0:
        state = _FALLBACK_STATE
    return state


def seed_random(seed: int = 0) -> None:
    """Reset the generator so that the next draws follow ``seed``'s stream.

    Args:
        seed: Any Python integer. Equal seeds always give equal streams.
    """
    _rng_state[None] = _mix_seed(int(seed))


def get_random_state() -> int:
    """Return the raw 32-bit generator state."""
    return int(_rng_state[None])


@ti.func
def _next_u32() -> ti.u32:
    x = _rng_state[None]
    x ^= x << ti.u32(13)
    x ^= x >> ti.u32(17)
    x ^= x << ti.u32(5)
    _rng_state[None] = x
    return x


@ti.func
def random_float() -> ti.f32:
    """Draw a uniform float in [0, 1).

    Only the top 24 bits are used so the result is exactly representable
    in f32 and can never round up to 1.0.
    """
    return ti.cast(_next_u32() >> ti.u32(8), ti.f32) * _INV_2_24


@ti.func
def random_range(lo: ti.f32, hi: ti.f32) -> ti.f32:
    """Draw a uniform float in [lo, hi)."""
    return lo + (hi - lo) * random_float()
