# terrain_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides a seeded permutation table and functions for evaluating
2D improved-Perlin gradient noise. It is designed to be a pure, stateless
utility: the permutation table *is* the noise state.

Data Contract:
---------------
- Inputs:
    - seed: A real number. The same seed always yields the same table.
    - p: A 512-entry NumPy permutation table (int array).
    - x, y: Scalar coordinates, or NumPy arrays of coordinates.
- Outputs:
    - Noise values (approximately in the range [-1, 1]).
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and y.
================================================================================
"""

import math

import numpy as np
from numba import njit

from . import config as DEFAULTS


def create_permutation_table(seed: float) -> np.ndarray:
    """
    Builds the 512-entry permutation table for a seed.

    The identity permutation of 0..255 is shuffled with a small linear
    congruential generator seeded from floor(seed * 65536), then duplicated so
    that lattice lookups never need to wrap.
    """
    if not math.isfinite(seed):
        raise ValueError(f"Noise seed must be a finite number, got {seed!r}")

    size = DEFAULTS.PERMUTATION_SIZE
    state = math.floor(seed * DEFAULTS.LCG_SEED_SCALE)

    perm = list(range(size))
    for i in range(size):
        state = (state * DEFAULTS.LCG_MULTIPLIER + DEFAULTS.LCG_INCREMENT) % DEFAULTS.LCG_MODULUS
        # Divide first, then scale: the float result must match the reference table.
        j = math.floor(state / DEFAULTS.LCG_MODULUS * size)
        perm[i], perm[j] = perm[j], perm[i]

    base = np.array(perm, dtype=np.int64)
    return np.concatenate([base, base])


@njit
def _lerp(t, a, b):
    "Linear interpolation."
    return a + t * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _gradient(hash_value, x, y, z):
    """
    Dot product of (x, y, z) with one of the 12 cube-edge gradients, selected
    by the low 4 bits of the hash. Hashes 12 and 14 reuse x for v.
    """
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = z
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


@njit
def perlin_noise_2d(p, x, y):
    """Samples 2D improved-Perlin noise at a single point (z fixed at 0)."""
    x_floor = np.floor(x)
    y_floor = np.floor(y)
    xi = int(x_floor) & 255
    yi = int(y_floor) & 255

    xf = x - x_floor
    yf = y - y_floor

    u = _fade(xf)
    v = _fade(yf)

    a = p[xi] + yi
    aa = p[a]
    ab = p[a + 1]
    b = p[xi + 1] + yi
    ba = p[b]
    bb = p[b + 1]

    x1 = _lerp(u, _gradient(p[aa], xf, yf, 0.0), _gradient(p[ba], xf - 1, yf, 0.0))
    x2 = _lerp(u, _gradient(p[ab], xf, yf - 1, 0.0), _gradient(p[bb], xf - 1, yf - 1, 0.0))
    return _lerp(v, x1, x2)


@njit
def perlin_noise_grid(p, x, y):
    """
    Evaluate perlin_noise_2d over a 2D grid of coordinates.
    This function is JIT-compiled with Numba; explicit loops compile to
    efficient machine code.
    """
    rows, cols = x.shape
    total_noise = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            total_noise[i, j] = perlin_noise_2d(p, x[i, j], y[i, j])

    return total_noise
