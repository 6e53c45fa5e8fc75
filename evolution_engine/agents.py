# evolution_engine/agents.py

import math
from dataclasses import dataclass, field, replace
from enum import IntEnum

import numpy as np

from . import config as cfg
from .genome import Genome
from .terrain import FOOD_TERRAIN, TERRAIN_ENERGY_DRAIN, TERRAIN_SPEED_FACTORS


class Variant(IntEnum):
    GRAZER = 0
    HUNTER = 1
    CANNIBAL = 2


BASE_STATS = {
    Variant.GRAZER: cfg.GRAZER_STATS,
    Variant.HUNTER: cfg.HUNTER_STATS,
    Variant.CANNIBAL: cfg.CANNIBAL_STATS,
}

# What each hunting variant pursues
HUNT_TARGETS = {
    Variant.HUNTER: (Variant.GRAZER,),
    Variant.CANNIBAL: (Variant.HUNTER,),
}
THREATS = (Variant.HUNTER, Variant.CANNIBAL)


@dataclass
class GrazerTraits:
    plant_detection: float
    predator_detection: float
    reproduction_cooldown: float
    reproduction_timer: float = 0.0


@dataclass
class HunterTraits:
    prey_detection: float
    attack_range: float
    attack_strength: float
    reproduction_cooldown: float
    hunting_cooldown: float
    reproduction_timer: float = 0.0
    hunting_timer: float = 0.0


@dataclass
class CannibalTraits(HunterTraits):
    # Preference weight for same-kind targets over ordinary prey
    cannibal_factor: float = cfg.CANNIBAL_FACTOR_BASE


@dataclass
class Agent:
    uid: int
    variant: Variant
    genome: Genome
    x: float
    y: float
    size: float
    max_speed: float
    energy: float
    max_energy: float
    max_age: float
    payload: object = field(repr=False)
    vx: float = 0.0
    vy: float = 0.0
    rotation: float = 0.0
    age: float = 0.0
    alive: bool = True


# ==============================================================================
# CONSTRUCTION
# ==============================================================================
def scale_attribute(base, genome, attribute):
    """base * (1 + trait*k - k/2): the trait sweeps a symmetric band around base."""
    trait, default, k = cfg.TRAIT_SCALING[attribute]
    return base * (1.0 + genome.get(trait, default) * k - k / 2.0)


def _build_payload(variant, stats, genome):
    if variant == Variant.GRAZER:
        return GrazerTraits(
            plant_detection=scale_attribute(stats['plant_detection'], genome, 'plant_detection'),
            predator_detection=scale_attribute(stats['predator_detection'], genome, 'predator_detection'),
            reproduction_cooldown=stats['reproduction_cooldown'],
        )
    hunter_fields = dict(
        prey_detection=scale_attribute(stats['prey_detection'], genome, 'prey_detection'),
        attack_range=stats['attack_range'],
        attack_strength=scale_attribute(stats['attack_strength'], genome, 'attack_strength'),
        reproduction_cooldown=stats['reproduction_cooldown'],
        hunting_cooldown=stats['hunting_cooldown'],
    )
    if variant == Variant.HUNTER:
        return HunterTraits(**hunter_fields)
    trait, default, k = cfg.CANNIBALISM_SCALING
    factor = cfg.CANNIBAL_FACTOR_BASE * (1.0 + genome.get(trait, default) * k - k / 2.0)
    return CannibalTraits(cannibal_factor=factor, **hunter_fields)


def create_agent(variant, x, y, rng: np.random.Generator, uid, genome=None):
    """Builds an agent whose physical attributes are scaled from its genome."""
    variant = Variant(variant)
    if genome is None:
        genome = Genome.random(rng)
    stats = BASE_STATS[variant]
    max_energy = scale_attribute(stats['max_energy'], genome, 'max_energy')
    return Agent(
        uid=uid,
        variant=variant,
        genome=genome,
        x=float(x),
        y=float(y),
        size=scale_attribute(stats['size'], genome, 'size'),
        max_speed=scale_attribute(stats['max_speed'], genome, 'max_speed'),
        energy=min(stats['energy'], max_energy),
        max_energy=max_energy,
        max_age=stats['max_age'],
        payload=_build_payload(variant, stats, genome),
        rotation=float(rng.uniform(0.0, 360.0)),
    )


# ==============================================================================
# ENERGY & LIFECYCLE
# ==============================================================================
def add_energy(agent, amount):
    agent.energy = max(0.0, min(agent.energy + amount, agent.max_energy))


def drain_energy(agent, amount):
    add_energy(agent, -amount)


def die(agent):
    agent.alive = False


def basic_consumption(agent):
    # Larger agents burn more
    return cfg.BASE_CONSUMPTION + agent.size * cfg.SIZE_CONSUMPTION


def can_reproduce(agent):
    return agent.alive and agent.energy > agent.max_energy * cfg.REPRODUCTION_ENERGY_BAR


def update(agent, dt, terrain, snapshot, rng: np.random.Generator):
    """
    Advances one agent by dt. Returns the chronicle action code of the agent's
    death if it died of age or starvation this call, otherwise None.
    """
    if not agent.alive:
        return None

    agent.age += dt
    if agent.age >= agent.max_age:
        die(agent)
        return cfg.ACTION_DEATH_AGE

    remaining = agent.energy - dt * basic_consumption(agent)
    if remaining <= 0:
        agent.energy = 0.0
        die(agent)
        return cfg.ACTION_DEATH_STARVATION
    agent.energy = min(remaining, agent.max_energy)

    behave(agent, dt, terrain, snapshot, rng)

    agent.x += agent.vx * dt
    agent.y += agent.vy * dt

    check_world_bounds(agent, terrain)
    apply_terrain_effect(agent, terrain)
    return None


def check_world_bounds(agent, terrain):
    map_width = terrain.width * cfg.TILE_SIZE
    map_height = terrain.height * cfg.TILE_SIZE

    if agent.x < agent.size:
        agent.x = agent.size
        agent.vx *= cfg.BOUNCE_DAMPING
        agent.rotation = 180.0 - agent.rotation
    elif agent.x > map_width - agent.size:
        agent.x = map_width - agent.size
        agent.vx *= cfg.BOUNCE_DAMPING
        agent.rotation = 180.0 - agent.rotation

    if agent.y < agent.size:
        agent.y = agent.size
        agent.vy *= cfg.BOUNCE_DAMPING
        agent.rotation = 360.0 - agent.rotation
    elif agent.y > map_height - agent.size:
        agent.y = map_height - agent.size
        agent.vy *= cfg.BOUNCE_DAMPING
        agent.rotation = 360.0 - agent.rotation


def clamp_to_world(agent, terrain=None):
    """Places an agent inside [size, extent - size] on both axes, leaving its motion alone."""
    width = terrain.width if terrain is not None else cfg.WORLD_WIDTH
    height = terrain.height if terrain is not None else cfg.WORLD_HEIGHT
    agent.x = min(max(agent.x, agent.size), width * cfg.TILE_SIZE - agent.size)
    agent.y = min(max(agent.y, agent.size), height * cfg.TILE_SIZE - agent.size)


def apply_terrain_effect(agent, terrain):
    kind = terrain.classify_position(agent.x, agent.y)
    drain = TERRAIN_ENERGY_DRAIN.get(kind)
    if drain:
        drain_energy(agent, drain)
    factor = TERRAIN_SPEED_FACTORS.get(kind)
    if factor is not None:
        agent.vx *= factor
        agent.vy *= factor


# ==============================================================================
# MOVEMENT PRIMITIVES
# ==============================================================================
def lerp_angle(current, target, progress):
    """Turns from current toward target along the shortest arc, in degrees."""
    delta = ((target - current) % 360.0 + 540.0) % 360.0 - 180.0
    return (current + delta * progress) % 360.0


def _set_heading_velocity(agent, speed):
    radians = math.radians(agent.rotation)
    agent.vx = math.cos(radians) * speed
    agent.vy = math.sin(radians) * speed


def move_toward(agent, target_x, target_y, dt, turn_rate=cfg.TURN_RATE, speed_factor=1.0):
    dx, dy = target_x - agent.x, target_y - agent.y
    if dx or dy:
        bearing = math.degrees(math.atan2(dy, dx)) % 360.0
        agent.rotation = lerp_angle(agent.rotation, bearing, min(1.0, dt * turn_rate))
    _set_heading_velocity(agent, agent.max_speed * speed_factor)


def move_randomly(agent, dt, rng: np.random.Generator):
    if rng.random() < dt * cfg.WANDER_CHANCE:
        agent.rotation += rng.uniform(-cfg.WANDER_ANGLE, cfg.WANDER_ANGLE)
    _set_heading_velocity(agent, agent.max_speed * cfg.WANDER_SPEED_FACTOR)


# ==============================================================================
# BEHAVIOURS
# ==============================================================================
def behave(agent, dt, terrain, snapshot, rng: np.random.Generator):
    """Sets velocity and facing for this tick according to the agent's variant."""
    if agent.variant == Variant.GRAZER:
        _grazer_behavior(agent, dt, terrain, snapshot, rng)
    elif agent.variant in (Variant.HUNTER, Variant.CANNIBAL):
        _hunter_behavior(agent, dt, snapshot, rng)


def _grazer_behavior(agent, dt, terrain, snapshot, rng):
    traits = agent.payload
    traits.reproduction_timer -= dt

    threat = snapshot.nearest(agent.x, agent.y, THREATS, traits.predator_detection, agent.uid)
    if threat is not None:
        flee_from(agent, threat, dt)
    elif agent.energy < agent.max_energy * cfg.FEED_THRESHOLD:
        seek_food(agent, dt, terrain, rng)
    else:
        move_randomly(agent, dt, rng)


def flee_from(agent, threat, dt):
    # Head for the point mirrored through the agent, away from the threat
    away_x = 2.0 * agent.x - threat[0]
    away_y = 2.0 * agent.y - threat[1]
    move_toward(agent, away_x, away_y, dt, cfg.FLEE_TURN_RATE, cfg.FLEE_SPEED_FACTOR)
    drain_energy(agent, dt * cfg.FLEE_ENERGY_DRAIN)


def seek_food(agent, dt, terrain, rng):
    if terrain.classify_position(agent.x, agent.y) in FOOD_TERRAIN:
        add_energy(agent, dt * cfg.FEED_RATE)
        agent.vx *= cfg.FEED_DAMPING
        agent.vy *= cfg.FEED_DAMPING
        return
    food = find_nearest_food(agent, terrain)
    if food is not None:
        move_toward(agent, food[0], food[1], dt)
    else:
        move_randomly(agent, dt, rng)


def find_nearest_food(agent, terrain):
    """Centre of the nearest grass or forest tile within plant detection range."""
    tile = cfg.TILE_SIZE
    reach = agent.payload.plant_detection
    tile_x, tile_y = int(agent.x // tile), int(agent.y // tile)
    radius = int(reach // tile)

    best, best_distance = None, math.inf
    for x in range(tile_x - radius, tile_x + radius + 1):
        for y in range(tile_y - radius, tile_y + radius + 1):
            if terrain.classify(x, y) not in FOOD_TERRAIN:
                continue
            cx, cy = x * tile + tile / 2.0, y * tile + tile / 2.0
            distance = math.hypot(cx - agent.x, cy - agent.y)
            if distance < best_distance and distance <= reach:
                best, best_distance = (cx, cy), distance
    return best


def _hunter_behavior(agent, dt, snapshot, rng):
    traits = agent.payload
    traits.reproduction_timer -= dt
    traits.hunting_timer -= dt

    if agent.energy < agent.max_energy * cfg.HUNGRY_THRESHOLD:
        hunt(agent, dt, snapshot, rng)
    elif agent.energy > agent.max_energy * cfg.SATED_THRESHOLD and traits.reproduction_timer <= 0:
        # Looking for a mate; pairing itself happens in the population pass
        move_randomly(agent, dt, rng)
    elif rng.random() < cfg.HUNT_CHANCE:
        hunt(agent, dt, snapshot, rng)
    else:
        move_randomly(agent, dt, rng)


def hunt(agent, dt, snapshot, rng):
    traits = agent.payload
    target = snapshot.nearest(agent.x, agent.y, HUNT_TARGETS[agent.variant], traits.prey_detection, agent.uid)
    if target is None:
        move_randomly(agent, dt, rng)
        return

    move_toward(agent, target[0], target[1], dt)
    distance = math.hypot(target[0] - agent.x, target[1] - agent.y)
    if distance <= traits.attack_range and traits.hunting_timer <= 0:
        add_energy(agent, cfg.ATTACK_REWARD)
        traits.hunting_timer = traits.hunting_cooldown


# ==============================================================================
# REPRODUCTION
# ==============================================================================
def reproduce(parent, partner, rng: np.random.Generator, uid, terrain=None):
    """
    One transactional mating attempt. Returns (child, parent, partner) where the
    parents are updated copies; on failure child is None and both parents are
    returned untouched. An unsuitable partner degrades to asexual reproduction.
    The child lands near the parent, kept inside the map (terrain, or the
    configured world size when no terrain is given).
    """
    if not can_reproduce(parent) or parent.payload.reproduction_timer > 0:
        return None, parent, partner

    retention = BASE_STATS[parent.variant]['retention']
    parent = replace(
        parent,
        energy=parent.energy * retention,
        payload=replace(parent.payload, reproduction_timer=parent.payload.reproduction_cooldown),
    )

    if partner is not None and partner.variant == parent.variant and can_reproduce(partner):
        partner = replace(partner, energy=partner.energy * retention, payload=replace(partner.payload))
        child_genome = Genome.combine(parent.genome, partner.genome, rng)
    else:
        child_genome = parent.genome.clone()
        child_genome.mutate(rng)

    offset_x, offset_y = rng.uniform(-cfg.OFFSPRING_OFFSET, cfg.OFFSPRING_OFFSET, size=2)
    child = create_agent(parent.variant, parent.x + offset_x, parent.y + offset_y, rng, uid, genome=child_genome)
    clamp_to_world(child, terrain)
    return child, parent, partner
