# terrain_generator/features.py

"""
================================================================================
FEATURE (VEGETATION) PLACEMENT
================================================================================
Scatters decorative features over the grass band of a classified terrain.

Data Contract:
---------------
- Inputs:
    - Vertex coordinates, shaped heights, elevations and the band map.
    - A biome profile.
    - rng (np.random.Generator, optional): The random stream used for the
      scatter. When omitted a fresh, unseeded generator is created, so the
      scatter varies between runs even for the same terrain seed.
- Outputs:
    - A list of FeaturePlacement records, in vertex order.
- Side Effects: Advances the given random stream.
- Invariants: Every placement comes from a grass-band vertex whose height lies
  in (water_level + 0.1, rock_level).
================================================================================
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from . import config as DEFAULTS
from .biomes import BiomeProfile
from .color_maps import BAND_ID_GRASS, classify_height


@dataclass(frozen=True)
class FeaturePlacement:
    position: tuple[float, float, float]
    scale: float
    profile: BiomeProfile
    height: float

    @property
    def style(self) -> str:
        return self.profile.feature_style

    @property
    def render_scale(self) -> float:
        return self.scale * DEFAULTS.FEATURE_RENDER_SCALE

    def to_dict(self) -> dict:
        return {
            "position": [float(v) for v in self.position],
            "scale": float(self.scale),
            "render_scale": float(self.render_scale),
            "style": self.style,
            "foliage_color": self.profile.tree_color,
            "wood_color": self.profile.wood_color,
        }


def place_feature(
    position: tuple[float, float, float],
    height: float,
    profile: BiomeProfile,
    rng: np.random.Generator,
) -> Optional[FeaturePlacement]:
    """
    Rolls for a feature at one vertex. Only grass-band vertices are eligible;
    the density roll is drawn for each of them, the scale roll only on success.
    """
    _, is_candidate = classify_height(height, profile)
    if not is_candidate:
        return None

    if rng.random() < profile.tree_density and height > profile.water_level + DEFAULTS.FEATURE_SHORE_MARGIN:
        scale = DEFAULTS.FEATURE_SCALE_MIN + rng.random() * DEFAULTS.FEATURE_SCALE_RANGE
        return FeaturePlacement(position=position, scale=scale, profile=profile, height=height)
    return None


def place_features(
    x_coords: np.ndarray,
    y_coords: np.ndarray,
    heights: np.ndarray,
    elevations: np.ndarray,
    band_map: np.ndarray,
    profile: BiomeProfile,
    rng: Optional[np.random.Generator] = None,
) -> list[FeaturePlacement]:
    """
    Places features over every grass vertex of the grid. The planar y axis
    becomes -z in world space, so positions are (x, elevation, -y).
    """
    if rng is None:
        rng = np.random.default_rng()

    placements = []
    rows, cols = np.nonzero(band_map == BAND_ID_GRASS)
    for i, j in zip(rows, cols):
        position = (float(x_coords[i, j]), float(elevations[i, j]), -float(y_coords[i, j]))
        placement = place_feature(position, float(heights[i, j]), profile, rng)
        if placement is not None:
            placements.append(placement)
    return placements
