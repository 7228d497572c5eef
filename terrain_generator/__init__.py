# terrain_generator/__init__.py

# This file makes the 'terrain_generator' directory a Python package.
# We also use it to define the public API of the package.

from .biomes import BiomeType, BiomeProfile, get_biome_profile
from .features import FeaturePlacement
from .generator import TerrainGenerator, TerrainData, random_seed

__all__ = [
    "BiomeType",
    "BiomeProfile",
    "get_biome_profile",
    "FeaturePlacement",
    "TerrainGenerator",
    "TerrainData",
    "random_seed",
]
