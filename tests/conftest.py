import numpy as np
import pytest

from evolution_engine import config as cfg
from evolution_engine.agents import create_agent
from evolution_engine.engine import Snapshot
from evolution_engine.genome import Genome
from evolution_engine.terrain import TerrainKind, TerrainMap


def neutral_genome(**overrides):
    """Every canonical trait at 0.5, which leaves scaled attributes at their base values."""
    traits = {name: 0.5 for name in cfg.GENOME_KEYS}
    traits.update(overrides)
    return Genome(traits)


def tile_centre(tile_x, tile_y):
    return tile_x * cfg.TILE_SIZE + cfg.TILE_SIZE / 2.0, tile_y * cfg.TILE_SIZE + cfg.TILE_SIZE / 2.0


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def grass():
    return TerrainMap.filled(20, 20, TerrainKind.GRASS)


@pytest.fixture
def empty_snapshot():
    return Snapshot([])


@pytest.fixture
def make_agent(rng):
    counter = iter(range(10_000))

    def _make(variant, x=320.0, y=320.0, genome=None, **state):
        agent = create_agent(variant, x, y, rng, next(counter), genome=genome or neutral_genome())
        for key, value in state.items():
            setattr(agent, key, value)
        return agent

    return _make
