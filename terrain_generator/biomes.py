# terrain_generator/biomes.py

"""
================================================================================
BIOME PROFILE REGISTRY
================================================================================
Static, named configuration data for each supported biome: the surface color
bands, the feature (vegetation) colors, the height thresholds that drive
classification, and the feature density.

Data Contract:
---------------
- Inputs: A biome identifier (BiomeType member or its name).
- Outputs: An immutable BiomeProfile.
- Side Effects: None.
- Invariants: water_level < rock_level, every level and the tree density lie
  in [0, 1]. The registry is a closed set; unknown ids raise ValueError.
================================================================================
"""
from dataclasses import dataclass
from enum import Enum


class BiomeType(str, Enum):
    FOREST = "FOREST"
    DESERT = "DESERT"
    ICE = "ICE"
    VOLCANO = "VOLCANO"


@dataclass(frozen=True)
class BiomeColors:
    """Hex color for each surface band, plus the water plane and base skirt."""
    water: str
    sand: str
    grass: str
    rock: str
    snow: str
    base: str


@dataclass(frozen=True)
class BiomeProfile:
    name: str
    colors: BiomeColors
    tree_color: str
    wood_color: str
    water_level: float
    rock_level: float
    snow_level: float
    tree_density: float

    @property
    def is_desert(self) -> bool:
        return "Desert" in self.name

    @property
    def feature_style(self) -> str:
        """The model the front end should use for features in this biome."""
        return "palm" if self.is_desert else "pine"


BIOME_PROFILES = {
    BiomeType.FOREST: BiomeProfile(
        name="Temperate Forest",
        colors=BiomeColors(
            water="#4fa4b8",
            sand="#e8dcb5",
            grass="#58a964",
            rock="#8b8b8b",
            snow="#ffffff",
            base="#594433",
        ),
        tree_color="#2d6e32",
        wood_color="#7a5334",
        water_level=0.2,
        rock_level=0.7,
        snow_level=0.85,
        tree_density=0.15,
    ),
    BiomeType.DESERT: BiomeProfile(
        name="Arid Desert",
        colors=BiomeColors(
            water="#3d8eb5",  # Oasis
            sand="#f2d272",
            grass="#e0c05e",
            rock="#bf6e45",
            snow="#f5e6d3",  # Light peaks
            base="#b58a5e",
        ),
        tree_color="#8f9c38",  # Cactus/palm green
        wood_color="#8c6b4a",
        water_level=0.1,
        rock_level=0.6,
        snow_level=0.9,
        tree_density=0.05,
    ),
    BiomeType.ICE: BiomeProfile(
        name="Polar Ice Cap",
        colors=BiomeColors(
            water="#6fcfe0",  # Icy water
            sand="#a9d6e0",  # Slush
            grass="#ffffff",  # Snow cover
            rock="#8caebf",  # Icy rock
            snow="#eeffff",
            base="#6a8c9e",
        ),
        tree_color="#a1c2c4",  # Frozen trees
        wood_color="#4a5e66",
        water_level=0.3,
        rock_level=0.6,
        # Below rock_level on purpose: everything above the grass band is snow.
        snow_level=0.4,
        tree_density=0.08,
    ),
    BiomeType.VOLCANO: BiomeProfile(
        name="Volcanic Lands",
        colors=BiomeColors(
            water="#cf2525",  # Lava
            sand="#421C02",  # Scorched earth
            grass="#2A2A2A",  # Ash
            rock="#1a1a1a",  # Obsidian
            snow="#555555",  # Grey ash peaks
            base="#111111",
        ),
        tree_color="#632a0d",  # Dead trees
        wood_color="#2b1d16",
        water_level=0.15,
        rock_level=0.4,
        snow_level=0.95,
        tree_density=0.02,
    ),
}


def resolve_biome_type(biome_id) -> BiomeType:
    """Accepts a BiomeType member or its (case-insensitive) name."""
    if isinstance(biome_id, BiomeType):
        return biome_id
    if isinstance(biome_id, str):
        try:
            return BiomeType(biome_id.strip().upper())
        except ValueError:
            pass
    valid = ", ".join(member.value for member in BiomeType)
    raise ValueError(f"Unknown biome '{biome_id}'. Expected one of: {valid}")


def get_biome_profile(biome_id) -> BiomeProfile:
    return BIOME_PROFILES[resolve_biome_type(biome_id)]


def validate_profile(profile: BiomeProfile) -> BiomeProfile:
    """
    Checks the threshold and density invariants of a profile and returns it.

    snow_level is only required to lie in [0, 1]: a snow level below the rock
    level is allowed and simply means the rock band is never reached.
    """
    levels = {
        "water_level": profile.water_level,
        "rock_level": profile.rock_level,
        "snow_level": profile.snow_level,
        "tree_density": profile.tree_density,
    }
    for field_name, value in levels.items():
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{profile.name}: {field_name} must lie in [0, 1], got {value}")
    if profile.water_level >= profile.rock_level:
        raise ValueError(
            f"{profile.name}: water_level ({profile.water_level}) must be below "
            f"rock_level ({profile.rock_level})"
        )
    return profile


def hex_to_rgb(hex_color: str) -> tuple[float, float, float]:
    """Converts '#rrggbb' into an (r, g, b) tuple of floats in [0, 1]."""
    value = hex_color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a '#rrggbb' color, got '{hex_color}'")
    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
