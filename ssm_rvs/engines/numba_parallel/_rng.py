"""
Counter-based random streams for the Numba kernels.

Every output index ``i`` owns an independent xoroshiro128+ state seeded by
two rounds of splitmix64 over ``seed ^ (i * GOLDEN)``. A draw therefore
depends only on ``(seed, i)``: the block size used to split work across
threads never changes a result.

Uniforms carry 24 random bits in single precision and 53 in double
precision; all arithmetic is done in float64 and rounded to the output
precision at the end (``_round``).
"""

import numpy as np
from numba import njit

# Kernels compare against +-inf and emit NaN for failed draws, so the
# no-NaN / no-inf fastmath flags must stay off.
FASTMATH = {"nsz", "arcp", "contract", "afn"}

_GOLDEN = np.uint64(0x9E3779B97F4A7C15)
_MIX1 = np.uint64(0xBF58476D1CE4E5B9)
_MIX2 = np.uint64(0x94D049BB133111EB)
_INDEX_MULT = np.uint64(0xD1B54A32D192ED03)

_INV_2_24 = 1.0 / 16777216.0
_INV_2_53 = 1.0 / 9007199254740992.0


@njit(cache=True)
def _rotl(x, k):
    """Rotate left helper for xoroshiro128+"""
    return (x << np.uint64(k)) | (x >> np.uint64(64 - k))


@njit(cache=True)
def _splitmix64(z):
    """Advance a splitmix64 counter, returning ``(counter, output)``."""
    z = z + _GOLDEN
    x = (z ^ (z >> np.uint64(30))) * _MIX1
    x = (x ^ (x >> np.uint64(27))) * _MIX2
    return z, x ^ (x >> np.uint64(31))


@njit(cache=True)
def _init_stream(seed, idx):
    """Initialize the stream of output index ``idx``."""
    z = np.uint64(seed) ^ (np.uint64(idx) * _INDEX_MULT)
    z, s0 = _splitmix64(z)
    z, s1 = _splitmix64(z)
    if s0 == 0 and s1 == 0:
        s0 = np.uint64(1)
    return s0, s1


@njit(cache=True)
def _next(s0, s1):
    """Generate next random uint64 using xoroshiro128+"""
    result = s0 + s1
    s1 = s1 ^ s0
    new_s0 = _rotl(s0, 24) ^ s1 ^ (s1 << np.uint64(16))
    new_s1 = _rotl(s1, 37)
    return result, new_s0, new_s1


@njit(cache=True)
def _uniform(s0, s1, single):
    """Uniform on [0, 1) at the resolution of the output precision."""
    x, s0, s1 = _next(s0, s1)
    if single:
        u = np.float64(x >> np.uint64(40)) * _INV_2_24
    else:
        u = np.float64(x >> np.uint64(11)) * _INV_2_53
    return u, s0, s1


@njit(cache=True)
def _uniform_pos(s0, s1, single):
    """Uniform on (0, 1)."""
    u, s0, s1 = _uniform(s0, s1, single)
    while u == 0.0:
        u, s0, s1 = _uniform(s0, s1, single)
    return u, s0, s1


@njit(cache=True, fastmath=FASTMATH)
def _gaussian(s0, s1, single):
    """Standard normal using Box-Muller"""
    u1, s0, s1 = _uniform_pos(s0, s1, single)
    u2, s0, s1 = _uniform(s0, s1, single)
    g = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
    return g, s0, s1


@njit(cache=True, fastmath=FASTMATH)
def _exponential(s0, s1, single):
    """Standard exponential by inversion."""
    u, s0, s1 = _uniform_pos(s0, s1, single)
    return -np.log(u), s0, s1


@njit(cache=True)
def _round(x, single):
    """Round a float64 to the output precision (kept as float64)."""
    if single:
        return np.float64(np.float32(x))
    return x
