import logging

import numpy as np
import pytest

from terrain_generator.generator import TerrainGenerator


@pytest.fixture
def logger():
    return logging.getLogger("test_terrain")


@pytest.fixture
def make_generator(logger):
    """Factory for generators with a seeded feature stream."""
    def _make(feature_seed=1234, **config):
        return TerrainGenerator(config=config, logger=logger, rng=np.random.default_rng(feature_seed))
    return _make
