import numpy as np
import pytest

from terrain_generator import biomes, color_maps, features, heightfield, noise
from terrain_generator.biomes import BiomeType

FOREST = biomes.get_biome_profile(BiomeType.FOREST)


class ScriptedRandom:
    """Stands in for np.random.Generator, replaying fixed draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.values.pop(0)


def _scatter(profile, feature_seed, seed=0.5, size=40.0, resolution=40, zoom=0.1):
    field = heightfield.build_height_field(noise.create_permutation_table(seed), size, resolution, zoom)
    band_map = color_maps.calculate_band_map(field.heights, profile)
    placements = features.place_features(
        field.x, field.y, field.heights, field.elevations, band_map, profile,
        rng=np.random.default_rng(feature_seed),
    )
    return field, placements


def test_feature_accepted_when_roll_passes():
    rng = ScriptedRandom([0.1, 0.5])
    placement = features.place_feature((1.0, 2.0, -3.0), 0.5, FOREST, rng)
    assert placement is not None
    assert placement.scale == pytest.approx(0.8 + 0.5 * 0.5)
    assert placement.position == (1.0, 2.0, -3.0)
    assert placement.profile is FOREST
    assert rng.calls == 2


def test_feature_rejected_when_roll_fails():
    rng = ScriptedRandom([0.15])
    assert features.place_feature((0.0, 0.0, 0.0), 0.5, FOREST, rng) is None
    # The scale is never drawn for a rejected vertex.
    assert rng.calls == 1


def test_feature_kept_off_the_shoreline():
    # 0.28 is grass (>= 0.25) but not above water_level + 0.1.
    rng = ScriptedRandom([0.0])
    assert features.place_feature((0.0, 0.0, 0.0), 0.28, FOREST, rng) is None
    assert rng.calls == 1


@pytest.mark.parametrize("height", [0.1, 0.24, 0.7, 0.9])
def test_no_roll_outside_grass_band(height):
    rng = ScriptedRandom([])
    assert features.place_feature((0.0, 0.0, 0.0), height, FOREST, rng) is None
    assert rng.calls == 0


@pytest.mark.parametrize("biome", list(BiomeType))
def test_placements_stay_inside_their_band(biome):
    profile = biomes.get_biome_profile(biome)
    _, placements = _scatter(profile, feature_seed=99)
    for placement in placements:
        assert profile.water_level + 0.1 < placement.height < profile.rock_level
        assert 0.8 <= placement.scale < 1.3


def test_positions_are_world_space():
    field, placements = _scatter(FOREST, feature_seed=5)
    assert placements
    lookup = {
        (float(field.x[i, j]), -float(field.y[i, j])): float(field.elevations[i, j])
        for i in range(field.shape[0]) for j in range(field.shape[1])
    }
    for placement in placements:
        x, elevation, z = placement.position
        assert lookup[(x, z)] == elevation
        assert elevation == pytest.approx(placement.height * 6.0)


def test_seeded_scatter_is_reproducible():
    _, first = _scatter(FOREST, feature_seed=2024)
    _, second = _scatter(FOREST, feature_seed=2024)
    assert [(p.position, p.scale) for p in first] == [(p.position, p.scale) for p in second]


def test_scatter_is_independent_of_terrain_seed_stream():
    _, first = _scatter(FOREST, feature_seed=1)
    _, second = _scatter(FOREST, feature_seed=2)
    assert [(p.position, p.scale) for p in first] != [(p.position, p.scale) for p in second]


def test_default_stream_is_unseeded():
    field = heightfield.build_height_field(noise.create_permutation_table(0.5), 40.0, 40, 0.1)
    band_map = color_maps.calculate_band_map(field.heights, FOREST)
    runs = [
        features.place_features(field.x, field.y, field.heights, field.elevations, band_map, FOREST)
        for _ in range(3)
    ]
    signatures = {tuple((p.position, p.scale) for p in run) for run in runs}
    assert len(signatures) > 1


def test_placement_serialization():
    placement = features.FeaturePlacement(
        position=(1.0, 2.0, 3.0), scale=1.0, profile=biomes.get_biome_profile(BiomeType.DESERT), height=0.4,
    )
    data = placement.to_dict()
    assert data["style"] == "palm"
    assert data["foliage_color"] == "#8f9c38"
    assert placement.render_scale == pytest.approx(0.3)
    assert data["render_scale"] == pytest.approx(0.3)
