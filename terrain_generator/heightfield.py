# terrain_generator/heightfield.py

"""
================================================================================
HEIGHT FIELD SYNTHESIS
================================================================================
This module samples the noise generator over the terrain's vertex grid,
combines two octaves, and shapes the result into normalized heights and
scene elevations.

Data Contract:
---------------
- Inputs:
    - p: A permutation table from noise.create_permutation_table.
    - size, resolution, zoom: Grid extent, subdivisions and noise frequency.
- Outputs:
    - A HeightField holding the planar vertex coordinates, normalized shaped
      heights [0, 1] and elevations (heights * height_multiplier).
- Side Effects: None.
- Invariants: Given the same inputs, the output is identical.
================================================================================
"""
import math
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import noise


@dataclass(frozen=True)
class HeightField:
    x: np.ndarray
    y: np.ndarray
    heights: np.ndarray
    elevations: np.ndarray

    @property
    def shape(self) -> tuple:
        return self.heights.shape


def require_finite(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")


def require_positive(name: str, value) -> None:
    require_finite(name, value)
    if value <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value}")


def validate_grid_parameters(size: float, resolution: int, zoom: float) -> None:
    """Rejects inputs that would produce empty or degenerate geometry."""
    require_positive("size", size)
    require_positive("zoom", zoom)
    if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)):
        raise ValueError(f"resolution must be an integer, got {resolution!r}")
    if not 1 <= resolution <= DEFAULTS.MAX_RESOLUTION:
        raise ValueError(f"resolution must lie in [1, {DEFAULTS.MAX_RESOLUTION}], got {resolution}")


def get_vertex_grid(size: float, resolution: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Generates the planar (x, y) coordinates of a square plane of
    (2 * resolution + 1)^2 vertices centred on the origin.

    Rows run from y = +size/2 down to -size/2 and columns from x = -size/2 to
    +size/2, matching the vertex order of a subdivided plane mesh.
    """
    segments = resolution * DEFAULTS.SEGMENTS_PER_RESOLUTION
    segment_size = size / segments
    half_size = size / 2

    steps = np.arange(segments + 1, dtype=np.float64)
    x_coords = steps * segment_size - half_size
    y_coords = -(steps * segment_size - half_size)

    return np.meshgrid(x_coords, y_coords)


def sample_octaves(p: np.ndarray, x_coords: np.ndarray, y_coords: np.ndarray, zoom: float) -> np.ndarray:
    """Base octave plus a detail octave at double frequency and half amplitude."""
    base_noise = noise.perlin_noise_grid(p, x_coords * zoom, y_coords * zoom)

    frequency = DEFAULTS.DETAIL_OCTAVE_FREQUENCY
    detail_noise = noise.perlin_noise_grid(
        p,
        x_coords * zoom * frequency,
        y_coords * zoom * frequency,
    )
    return base_noise + DEFAULTS.DETAIL_OCTAVE_WEIGHT * detail_noise


def normalize_noise(noise_values: np.ndarray) -> np.ndarray:
    """
    Maps raw noise from approx [-1, 1] to [0, 1]. The octave sum can overshoot,
    so the result is clipped before any fractional power is applied.
    """
    return np.clip((noise_values + 1) / 2, 0.0, 1.0)


def shape_height(normalized: np.ndarray, exponent: float = DEFAULTS.SHAPING_EXPONENT) -> np.ndarray:
    """Power curve: flattens valleys and sharpens peaks. Monotonic on [0, 1]."""
    return np.power(normalized, exponent)


def build_height_field(
    p: np.ndarray,
    size: float,
    resolution: int,
    zoom: float,
    height_multiplier: float = DEFAULTS.HEIGHT_MULTIPLIER,
    shaping_exponent: float = DEFAULTS.SHAPING_EXPONENT,
) -> HeightField:
    validate_grid_parameters(size, resolution, zoom)
    require_positive("height_multiplier", height_multiplier)
    require_positive("shaping_exponent", shaping_exponent)

    x_coords, y_coords = get_vertex_grid(size, resolution)
    raw_noise = sample_octaves(p, x_coords, y_coords, zoom)
    heights = shape_height(normalize_noise(raw_noise), shaping_exponent)

    return HeightField(
        x=x_coords,
        y=y_coords,
        heights=heights,
        elevations=heights * height_multiplier,
    )
