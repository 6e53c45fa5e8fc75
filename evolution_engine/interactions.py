# evolution_engine/interactions.py

import numpy as np
import numba

from . import config as cfg
from .agents import Variant, add_energy, die

# (attacker variant, victim variant) pairs that resolve as predation.
# Every other collision is left alone.
PREDATION_RULES = {
    (Variant.HUNTER, Variant.GRAZER),
    (Variant.CANNIBAL, Variant.HUNTER),
}


# ==============================================================================
# PART 1: SPATIAL KERNELS
# ==============================================================================
@numba.njit
def find_colliding_pairs(xs, ys, radii, alive):
    """
    All (i, j) with i < j, both alive, whose circles overlap, in (i, j)
    lexicographic order. Exhaustive; two passes so the result is a plain array.
    """
    n = len(xs)
    count = 0
    for i in range(n):
        if not alive[i]:
            continue
        for j in range(i + 1, n):
            if not alive[j]:
                continue
            dx = xs[i] - xs[j]
            dy = ys[i] - ys[j]
            reach = radii[i] + radii[j]
            if dx * dx + dy * dy < reach * reach:
                count += 1

    pairs = np.empty((count, 2), dtype=np.int64)
    k = 0
    for i in range(n):
        if not alive[i]:
            continue
        for j in range(i + 1, n):
            if not alive[j]:
                continue
            dx = xs[i] - xs[j]
            dy = ys[i] - ys[j]
            reach = radii[i] + radii[j]
            if dx * dx + dy * dy < reach * reach:
                pairs[k, 0] = i
                pairs[k, 1] = j
                k += 1
    return pairs


@numba.njit
def nearest_index(xs, ys, mask, x, y, max_range):
    """Index of the closest masked point within max_range of (x, y), or -1."""
    best = -1
    best_d2 = max_range * max_range
    for i in range(len(xs)):
        if not mask[i]:
            continue
        dx = xs[i] - x
        dy = ys[i] - y
        d2 = dx * dx + dy * dy
        if d2 <= best_d2:
            if best == -1 or d2 < best_d2:
                best = i
                best_d2 = d2
    return best


# ==============================================================================
# PART 2: PREDATION
# ==============================================================================
def match_predation(first, second):
    """Returns (attacker, victim) if the collision is a predation, else None."""
    if (first.variant, second.variant) in PREDATION_RULES:
        return first, second
    if (second.variant, first.variant) in PREDATION_RULES:
        return second, first
    return None


def predation_chance(attacker, victim):
    """
    Raw success chance: 0.6 + strength*0.4 - speed*0.3. The speed term only
    counts against grazers. Not clamped; see resolve_predation.
    """
    strength = attacker.genome.get('strength', cfg.RESOLVER_STRENGTH_DEFAULT)
    chance = cfg.PREDATION_BASE + strength * cfg.PREDATION_STRENGTH_WEIGHT
    if victim.variant == Variant.GRAZER:
        speed = victim.genome.get('speed', cfg.RESOLVER_SPEED_DEFAULT)
        chance -= speed * cfg.PREDATION_SPEED_WEIGHT
    return chance


def resolve_predation(attacker, victim, rng: np.random.Generator):
    chance = min(1.0, max(0.0, predation_chance(attacker, victim)))
    if rng.random() < chance:
        add_energy(attacker, victim.size * cfg.PREDATION_ENERGY_PER_SIZE)
        die(victim)
        return True
    return False


def resolve_interactions(agents, rng: np.random.Generator):
    """
    Tests every live pair for overlap and resolves predations in pair order.
    An agent killed earlier in the pass takes no part in later pairs.
    Returns the list of successful (attacker, victim) predations.
    """
    if len(agents) < 2:
        return []
    xs = np.array([a.x for a in agents], dtype=np.float64)
    ys = np.array([a.y for a in agents], dtype=np.float64)
    radii = np.array([a.size for a in agents], dtype=np.float64)
    alive = np.array([a.alive for a in agents], dtype=np.bool_)

    kills = []
    for i, j in find_colliding_pairs(xs, ys, radii, alive):
        first, second = agents[i], agents[j]
        if not (first.alive and second.alive):
            continue
        matched = match_predation(first, second)
        if matched is None:
            continue
        attacker, victim = matched
        if resolve_predation(attacker, victim, rng):
            kills.append((attacker, victim))
    return kills
