# evolution_engine/population.py

import math

import numpy as np

from . import config as cfg
from .agents import Variant, can_reproduce, create_agent, reproduce
from .terrain import TerrainKind

# variant -> (floor, how many to spawn when below it)
POPULATION_FLOORS = {
    Variant.GRAZER: (cfg.GRAZER_FLOOR, cfg.GRAZER_TOP_UP),
    Variant.HUNTER: (cfg.HUNTER_FLOOR, cfg.HUNTER_TOP_UP),
    Variant.CANNIBAL: (cfg.CANNIBAL_FLOOR, cfg.CANNIBAL_TOP_UP),
}


def count_variants(agents):
    counts = {variant: 0 for variant in Variant}
    for agent in agents:
        if agent.alive:
            counts[agent.variant] += 1
    return counts


def cull(agents):
    return [agent for agent in agents if agent.alive]


# ==============================================================================
# PART 1: SPAWNING
# ==============================================================================
def spawn_position(terrain, rng: np.random.Generator):
    """Centre of a random non-water tile, by rejection sampling."""
    if not np.any(terrain.grid != int(TerrainKind.WATER)):
        raise ValueError("terrain has no land tile to spawn on")
    while True:
        tile_x = int(rng.integers(0, terrain.width))
        tile_y = int(rng.integers(0, terrain.height))
        if terrain.classify(tile_x, tile_y) != TerrainKind.WATER:
            half = cfg.TILE_SIZE / 2.0
            return tile_x * cfg.TILE_SIZE + half, tile_y * cfg.TILE_SIZE + half


def spawn_random(variant, terrain, rng: np.random.Generator, uids):
    x, y = spawn_position(terrain, rng)
    return create_agent(variant, x, y, rng, next(uids))


def populate(terrain, rng: np.random.Generator, uids, grazers=cfg.INITIAL_GRAZERS,
             hunters=cfg.INITIAL_HUNTERS, cannibals=cfg.INITIAL_CANNIBALS):
    agents = []
    for variant, count in ((Variant.GRAZER, grazers), (Variant.HUNTER, hunters), (Variant.CANNIBAL, cannibals)):
        for _ in range(count):
            agents.append(spawn_random(variant, terrain, rng, uids))
    return agents


def enforce_floors(agents, terrain, rng: np.random.Generator, uids, floors=POPULATION_FLOORS):
    """
    Tops up every variant whose live count fell below its floor, by the top-up
    amount or by whatever more it takes to reach the floor. Returns the newcomers.
    """
    counts = count_variants(agents)
    spawned = []
    for variant, (floor, top_up) in floors.items():
        if counts[variant] < floor:
            for _ in range(max(top_up, floor - counts[variant])):
                spawned.append(spawn_random(variant, terrain, rng, uids))
    agents.extend(spawned)
    return spawned


# ==============================================================================
# PART 2: MATING
# ==============================================================================
def find_partner(index, agents):
    """
    Index of the first agent in list order that is a different, live, eligible
    agent of the same variant within the pairing radius, or None.
    """
    agent = agents[index]
    for other_index, other in enumerate(agents):
        if other_index == index or not other.alive or other.variant != agent.variant:
            continue
        if not can_reproduce(other):
            continue
        if math.hypot(other.x - agent.x, other.y - agent.y) < cfg.PAIRING_RADIUS:
            return other_index
    return None


def reproduction_pass(agents, rng: np.random.Generator, uids, terrain=None):
    """
    Culls the dead, then gives every eligible survivor (in list order) a small
    chance to mate. Parents are written back in place; children are appended
    only after the scan. Returns (survivors + children, children).
    """
    survivors = cull(agents)
    staged = []
    for index in range(len(survivors)):
        agent = survivors[index]
        if not can_reproduce(agent) or rng.random() >= cfg.REPRODUCTION_CHANCE:
            continue
        partner_index = find_partner(index, survivors)
        partner = survivors[partner_index] if partner_index is not None else None

        child, parent, partner = reproduce(agent, partner, rng, next(uids), terrain)
        if child is None:
            continue
        survivors[index] = parent
        if partner_index is not None:
            survivors[partner_index] = partner
        staged.append(child)

    survivors.extend(staged)
    return survivors, staged
