# terrain_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC TERRAIN.
Instead, pass a configuration dictionary to the TerrainGenerator instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 0.5
# Constants of the linear congruential generator that shuffles the
# permutation table. They must not change, or every seed produces new terrain.
LCG_SEED_SCALE = 65536
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280
PERMUTATION_SIZE = 256

# --- Grid ---
# The world extent of the terrain plane, in scene units.
DEFAULT_SIZE = 30.0
# Subdivisions per unit of world size; the plane has size * 2 segments a side
# when the resolution is left at its default of matching the size.
SEGMENTS_PER_RESOLUTION = 2
# Upper bound on resolution; 1024 gives a 2049 x 2049 vertex grid.
MAX_RESOLUTION = 1024
# Noise "zoom": multiplies vertex coordinates before sampling.
DEFAULT_ZOOM = 0.1

# --- Octaves ---
# A second octave at double frequency and half amplitude adds detail.
DETAIL_OCTAVE_FREQUENCY = 2.0
DETAIL_OCTAVE_WEIGHT = 0.5

# --- Height Shaping ---
# Power curve applied to normalized heights. Values > 1.0 flatten lowlands
# and sharpen peaks.
SHAPING_EXPONENT = 2.5
# Converts a shaped height [0, 1] into a scene elevation.
HEIGHT_MULTIPLIER = 6.0

# --- Classification Margins (normalized height units) ---
# Heights just above the water level are still painted as sand.
SHORE_MARGIN = 0.05
# Features are kept off the immediate shoreline.
FEATURE_SHORE_MARGIN = 0.1

# --- Feature Placement ---
FEATURE_SCALE_MIN = 0.8
FEATURE_SCALE_RANGE = 0.5
# Uniform scale the front end applies to every feature model.
FEATURE_RENDER_SCALE = 0.3

# --- Scene Hints for the Front End ---
# The water plane is lowered slightly so it does not z-fight with the shore.
WATER_PLANE_OFFSET = 0.2
# The "skirt" box under the terrain.
BASE_DEPTH = 5.0

# --- Output ---
DEFAULT_OUTPUT_DIR = "baked_terrains"
