# evolution_engine/engine.py

from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple, Tuple

import numpy as np

from . import config as cfg
from .agents import Variant, update
from .interactions import nearest_index, resolve_interactions
from .population import count_variants, enforce_floors, reproduction_pass


class AgentView(NamedTuple):
    uid: int
    x: float
    y: float
    size: float
    variant: Variant
    energy: float
    alive: bool


@dataclass(frozen=True)
class PopulationSnapshot:
    """Read-only picture of the live set after a tick, for stats and rendering."""
    tick: int
    counts: MappingProxyType
    agents: Tuple[AgentView, ...]

    @classmethod
    def capture(cls, tick, agents):
        views = tuple(
            AgentView(a.uid, a.x, a.y, a.size, a.variant, a.energy, a.alive) for a in agents
        )
        return cls(tick, MappingProxyType(count_variants(agents)), views)

    @property
    def total(self):
        return sum(self.counts.values())


class Snapshot:
    """
    Positions, variants and liveness of every agent, frozen at the start of a
    tick. Behaviours perceive each other through this, never through agents
    that may already have moved this tick.
    """

    def __init__(self, agents):
        self.uids = np.array([a.uid for a in agents], dtype=np.int64)
        self.xs = np.array([a.x for a in agents], dtype=np.float64)
        self.ys = np.array([a.y for a in agents], dtype=np.float64)
        self.variants = np.array([int(a.variant) for a in agents], dtype=np.int64)
        self.alive = np.array([a.alive for a in agents], dtype=np.bool_)

    def nearest(self, x, y, variants, max_range, exclude_uid=None):
        """Position of the closest live agent of the given variants within max_range, or None."""
        mask = self.alive & np.isin(self.variants, [int(v) for v in variants])
        if exclude_uid is not None:
            mask &= self.uids != exclude_uid
        index = nearest_index(self.xs, self.ys, mask, float(x), float(y), float(max_range))
        if index < 0:
            return None
        return float(self.xs[index]), float(self.ys[index])


@dataclass
class TickResult:
    agents: list
    population: PopulationSnapshot
    events: list


def tick(agents, terrain, dt, rng: np.random.Generator, uids, tick_number=0):
    """
    One atomic simulation step:
    update -> interactions -> cull & reproduction -> population floors -> statistics.

    Chronicle events are (tick, uid, action, x, y, extra) rows.
    """
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")

    events = []
    snapshot = Snapshot(agents)

    for index, agent in enumerate(agents):
        if not agent.alive:
            continue
        death = update(agent, dt, terrain, snapshot, rng)
        if death is not None:
            # positions stay frozen, but the dead drop out of perception at once
            snapshot.alive[index] = False
            events.append((tick_number, agent.uid, death, agent.x, agent.y, 0))

    for attacker, victim in resolve_interactions(agents, rng):
        events.append((tick_number, attacker.uid, cfg.ACTION_PREDATE, victim.x, victim.y, victim.uid))

    agents, births = reproduction_pass(agents, rng, uids, terrain)
    for child in births:
        events.append((tick_number, child.uid, cfg.ACTION_BIRTH, child.x, child.y, int(child.variant)))

    for newcomer in enforce_floors(agents, terrain, rng, uids):
        events.append((tick_number, newcomer.uid, cfg.ACTION_FLOOR_SPAWN, newcomer.x, newcomer.y, int(newcomer.variant)))

    return TickResult(agents, PopulationSnapshot.capture(tick_number, agents), events)
