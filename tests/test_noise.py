import numpy as np
import pytest

from terrain_generator import noise


def test_permutation_table_matches_reference_prefix():
    """Seed 0.5 must always shuffle to the same table."""
    p = noise.create_permutation_table(0.5)
    assert p[:16].tolist() == [176, 203, 212, 87, 198, 114, 33, 94, 123, 183, 90, 89, 156, 54, 72, 249]


@pytest.mark.parametrize("seed", [0.0, 0.5, 0.123, 0.999999, 1.0, 7.25, 12345.678, -0.3])
def test_permutation_table_is_a_permutation(seed):
    p = noise.create_permutation_table(seed)
    assert p.shape == (512,)
    assert sorted(p[:256].tolist()) == list(range(256))


def test_permutation_table_is_duplicated():
    p = noise.create_permutation_table(0.77)
    np.testing.assert_array_equal(p[:256], p[256:])


def test_permutation_table_is_deterministic():
    np.testing.assert_array_equal(
        noise.create_permutation_table(0.314),
        noise.create_permutation_table(0.314),
    )


def test_different_seeds_give_different_tables():
    assert not np.array_equal(
        noise.create_permutation_table(0.1),
        noise.create_permutation_table(0.2),
    )


@pytest.mark.parametrize("seed", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_seed_is_rejected(seed):
    with pytest.raises(ValueError):
        noise.create_permutation_table(seed)


def test_noise_matches_reference_values():
    p = noise.create_permutation_table(0.5)
    assert noise.perlin_noise_2d(p, 0.3, 0.7) == pytest.approx(-0.18780161231999998, abs=1e-12)
    assert noise.perlin_noise_2d(p, -1.25, 3.5) == pytest.approx(0.211181640625, abs=1e-12)


def test_noise_is_zero_on_lattice_points():
    p = noise.create_permutation_table(0.42)
    for x, y in [(0.0, 0.0), (3.0, -2.0), (255.0, 17.0)]:
        assert noise.perlin_noise_2d(p, x, y) == 0.0


def test_noise_stays_near_unit_range():
    p = noise.create_permutation_table(0.9)
    x, y = np.meshgrid(np.linspace(-20, 20, 81), np.linspace(-20, 20, 81))
    values = noise.perlin_noise_grid(p, x, y)
    assert np.all(np.abs(values) <= 1.5)
    assert values.std() > 0


def test_noise_grid_matches_pointwise_samples():
    p = noise.create_permutation_table(0.5)
    x, y = np.meshgrid(np.linspace(-3.3, 2.7, 7), np.linspace(1.1, -4.9, 5))
    grid = noise.perlin_noise_grid(p, x, y)
    assert grid.shape == x.shape
    for i in range(x.shape[0]):
        for j in range(x.shape[1]):
            assert grid[i, j] == noise.perlin_noise_2d(p, x[i, j], y[i, j])


def test_noise_wraps_every_256_units():
    p = noise.create_permutation_table(0.6)
    assert noise.perlin_noise_2d(p, 1.37, 2.21) == pytest.approx(noise.perlin_noise_2d(p, 257.37, 2.21), abs=1e-9)


@pytest.mark.parametrize("hash_value, expected", [
    (0, 1.0 + 2.0),      # x + y
    (3, -1.0 - 2.0),     # -x - y
    (5, -1.0 + 0.0),     # -x + z
    (8, 2.0 + 0.0),      # y + z
    (12, 2.0 + 1.0),     # y + x
    (14, 2.0 - 1.0),     # y - x
    (13, -2.0 + 0.0),    # -y + z
    (31, -2.0 - 0.0),    # only the low 4 bits count
])
def test_gradient_selection(hash_value, expected):
    assert noise._gradient(hash_value, 1.0, 2.0, 0.0) == expected
