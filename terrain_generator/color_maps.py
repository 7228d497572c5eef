# terrain_generator/color_maps.py

"""
================================================================================
SURFACE BAND CLASSIFICATION & COLOR MAPPING
================================================================================
This module classifies shaped heights into surface bands using a biome
profile's threshold ladder, and converts band maps into per-vertex RGB color
arrays.

It is a pure, stateless utility with no dependency on any rendering target,
so both the generator and the command-line baker can use it.
================================================================================
"""
import numpy as np

from . import config as DEFAULTS
from .biomes import BiomeProfile, hex_to_rgb

# --- Band ID Constants ---
# Shore fringe and underwater vertices are both painted as sand.
BAND_ID_SAND = 0
BAND_ID_GRASS = 1
BAND_ID_ROCK = 2
BAND_ID_SNOW = 3

BAND_NAMES = {
    BAND_ID_SAND: "sand",
    BAND_ID_GRASS: "grass",
    BAND_ID_ROCK: "rock",
    BAND_ID_SNOW: "snow",
}


def classify_height(height: float, profile: BiomeProfile) -> tuple[int, bool]:
    """
    Assigns a single shaped height to a surface band. The ladder is evaluated
    in order and the first match wins. Returns (band_id, is_feature_candidate).
    """
    if height < profile.water_level:
        return BAND_ID_SAND, False
    if height < profile.water_level + DEFAULTS.SHORE_MARGIN:
        return BAND_ID_SAND, False
    if height < profile.rock_level:
        return BAND_ID_GRASS, True
    if height < profile.snow_level:
        return BAND_ID_ROCK, False
    return BAND_ID_SNOW, False


def calculate_band_map(heights: np.ndarray, profile: BiomeProfile) -> np.ndarray:
    """Vectorized classify_height: returns an integer array of band IDs."""
    conditions = [
        heights < profile.water_level + DEFAULTS.SHORE_MARGIN,
        heights < profile.rock_level,
        heights < profile.snow_level,
    ]
    choices = [BAND_ID_SAND, BAND_ID_GRASS, BAND_ID_ROCK]
    return np.select(conditions, choices, default=BAND_ID_SNOW).astype(np.uint8)


def create_band_color_lut(profile: BiomeProfile) -> np.ndarray:
    """Creates a LUT where the index is the band ID and the value is the RGB color."""
    colors = profile.colors
    return np.array([
        hex_to_rgb(colors.sand),
        hex_to_rgb(colors.grass),
        hex_to_rgb(colors.rock),
        hex_to_rgb(colors.snow),
    ], dtype=np.float32)


def get_vertex_color_array(band_map: np.ndarray, band_lut: np.ndarray) -> np.ndarray:
    """
    Converts a band map into a float RGB array of shape band_map.shape + (3,)
    using a pre-computed lookup table.
    """
    return band_lut[band_map]


def get_preview_image_array(color_array: np.ndarray) -> np.ndarray:
    """Converts float RGB colors [0, 1] into an 8-bit array for image export."""
    return np.round(np.clip(color_array, 0.0, 1.0) * 255).astype(np.uint8)
