# terrain_generator/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the main TerrainGenerator class, responsible for running
one full generation pass: noise table, height field, band classification,
vertex colors and feature scatter.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'seed', 'size', 'resolution',
      'zoom' and 'biome'.
    - logger: A configured Python logging object for runtime messages.
    - rng (np.random.Generator, optional): Random stream for feature scatter.
- Outputs (from generate()):
    - A TerrainData record of NumPy arrays and feature placements.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, heights and colors are
  deterministic. Feature scatter depends only on the random stream.
================================================================================
"""

import logging
import math
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

import numpy as np

from . import biomes
from . import color_maps
from . import config as DEFAULTS
from . import features
from . import heightfield
from . import mesh
from . import noise


def random_seed(rng: Optional[np.random.Generator] = None) -> float:
    """A fresh terrain seed in [0, 1), used to 'regenerate' a world."""
    if rng is None:
        rng = np.random.default_rng()
    return float(rng.random())


@dataclass(frozen=True)
class TerrainData:
    """
    Everything one generation pass produces. Arrays are (rows, cols[, 3]).
    The record is read-only: arrays are flagged non-writable on creation.
    """
    settings: dict
    profile: biomes.BiomeProfile
    x: np.ndarray
    y: np.ndarray
    heights: np.ndarray
    elevations: np.ndarray
    band_map: np.ndarray
    colors: np.ndarray
    features: tuple
    water_level_elevation: float

    def __post_init__(self):
        object.__setattr__(self, 'settings', MappingProxyType(dict(self.settings)))
        object.__setattr__(self, 'features', tuple(self.features))
        for array in (self.x, self.y, self.heights, self.elevations, self.band_map, self.colors):
            array.setflags(write=False)

    @property
    def vertex_count(self) -> int:
        return self.heights.size

    def get_world_positions(self) -> np.ndarray:
        return mesh.get_world_positions(self.x, self.y, self.elevations)

    def get_mesh(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Returns (positions, faces, normals) ready for a front end."""
        positions = self.get_world_positions()
        faces = mesh.build_plane_indices(self.heights.shape[0] - 1)
        normals = mesh.compute_vertex_normals(positions, faces)
        return positions, faces, normals

    def band_counts(self) -> dict:
        counts = np.bincount(self.band_map.ravel(), minlength=len(color_maps.BAND_NAMES))
        return {name: int(counts[band_id]) for band_id, name in color_maps.BAND_NAMES.items()}

    def to_manifest(self) -> dict:
        """A JSON-ready summary of the pass, excluding the large arrays."""
        rows, cols = self.heights.shape
        return {
            "biome": self.settings['biome'].value,
            "biome_name": self.profile.name,
            "seed": self.settings['seed'],
            "size": self.settings['size'],
            "resolution": self.settings['resolution'],
            "zoom": self.settings['zoom'],
            "height_multiplier": self.settings['height_multiplier'],
            "grid": {"rows": rows, "cols": cols},
            "height_range": [float(self.heights.min()), float(self.heights.max())],
            "bands": self.band_counts(),
            "water_plane": {
                "elevation": self.water_level_elevation,
                "color": self.profile.colors.water,
            },
            "base": {
                "color": self.profile.colors.base,
                "depth": DEFAULTS.BASE_DEPTH,
                "center_y": -DEFAULTS.BASE_DEPTH / 2,
            },
            "features": [placement.to_dict() for placement in self.features],
        }


class TerrainGenerator:
    """
    Generates the data for a procedurally generated terrain.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger, rng: Optional[np.random.Generator] = None):
        """
        Initializes the terrain generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            rng (np.random.Generator, optional): Random stream for feature
                scatter. If None, each generate() call uses a fresh unseeded one.

        Raises:
            ValueError: If the biome is unknown or a grid parameter is invalid.
        """
        self.logger = logger
        self.user_config = config
        self.rng = rng
        self.logger.info("TerrainGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'size': self.user_config.get('size', DEFAULTS.DEFAULT_SIZE),
            'resolution': self.user_config.get('resolution'),
            'zoom': self.user_config.get('zoom', DEFAULTS.DEFAULT_ZOOM),
            'biome': biomes.resolve_biome_type(self.user_config.get('biome', biomes.BiomeType.FOREST)),
            'height_multiplier': self.user_config.get('height_multiplier', DEFAULTS.HEIGHT_MULTIPLIER),
            'shaping_exponent': self.user_config.get('shaping_exponent', DEFAULTS.SHAPING_EXPONENT),
        }

        # --- Validate up front; no partial output is ever produced ---
        seed = self.settings['seed']
        heightfield.require_finite("seed", seed)
        # Numpy scalars are stored as plain floats so the manifest stays JSON-ready.
        seed = self.settings['seed'] = float(seed)
        for key in ("size", "height_multiplier", "shaping_exponent"):
            heightfield.require_positive(key, self.settings[key])

        resolution = self.settings['resolution']
        if resolution is None:
            # The plane gets two segments per world unit, like the front end's default mesh.
            resolution = max(1, math.floor(self.settings['size']))
        elif isinstance(resolution, float) and resolution.is_integer():
            resolution = int(resolution)
        self.settings['resolution'] = resolution
        heightfield.validate_grid_parameters(self.settings['size'], resolution, self.settings['zoom'])

        self.profile = biomes.validate_profile(biomes.get_biome_profile(self.settings['biome']))

        # --- Initialize Noise ---
        self._p = noise.create_permutation_table(seed)
        self.permutation_table = self._p

        segments = resolution * DEFAULTS.SEGMENTS_PER_RESOLUTION
        self.logger.info(
            f"TerrainGenerator initialized with seed: {seed}, biome: {self.profile.name}"
        )
        self.logger.info(
            f"Grid: {segments + 1}x{segments + 1} vertices over "
            f"{self.settings['size']}x{self.settings['size']} units, zoom {self.settings['zoom']}"
        )

    @property
    def water_level_elevation(self) -> float:
        """Elevation of the water plane, lowered to avoid overlapping the shore."""
        return self.profile.water_level * self.settings['height_multiplier'] - DEFAULTS.WATER_PLANE_OFFSET

    def get_height_field(self) -> heightfield.HeightField:
        return heightfield.build_height_field(
            self._p,
            self.settings['size'],
            self.settings['resolution'],
            self.settings['zoom'],
            height_multiplier=self.settings['height_multiplier'],
            shaping_exponent=self.settings['shaping_exponent'],
        )

    def get_colors(self, heights: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Returns (band_map, colors) for an array of shaped heights."""
        band_map = color_maps.calculate_band_map(heights, self.profile)
        band_lut = color_maps.create_band_color_lut(self.profile)
        return band_map, color_maps.get_vertex_color_array(band_map, band_lut)

    def generate(self) -> TerrainData:
        """Runs one full, independent generation pass."""
        start_time = time.perf_counter()

        field = self.get_height_field()
        band_map, colors = self.get_colors(field.heights)
        self.logger.debug(
            f"Height range: [{field.heights.min():.4f}, {field.heights.max():.4f}]"
        )

        placements = features.place_features(
            field.x, field.y, field.heights, field.elevations,
            band_map, self.profile, rng=self.rng,
        )

        terrain = TerrainData(
            settings=dict(self.settings),
            profile=self.profile,
            x=field.x,
            y=field.y,
            heights=field.heights,
            elevations=field.elevations,
            band_map=band_map,
            colors=colors,
            features=placements,
            water_level_elevation=self.water_level_elevation,
        )

        elapsed = time.perf_counter() - start_time
        self.logger.info(
            f"Generated {terrain.vertex_count} vertices and {len(placements)} features "
            f"in {elapsed:.3f} seconds."
        )
        self.logger.debug(f"Band counts: {terrain.band_counts()}")
        return terrain
