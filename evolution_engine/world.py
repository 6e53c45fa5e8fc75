# evolution_engine/world.py

import itertools

import numpy as np

from . import config as cfg
from . import engine
from .agents import Variant
from .population import populate
from .terrain import TerrainMap

CHRONICLE_HEADER = ['tick', 'uid', 'action', 'x', 'y', 'extra']


class World:
    """Prepares initial conditions and drives the tick engine."""

    def __init__(self, seed=None, terrain=None, grazers=cfg.INITIAL_GRAZERS, hunters=cfg.INITIAL_HUNTERS,
                 cannibals=cfg.INITIAL_CANNIBALS, dt=cfg.DT, verbose=True):
        self.rng = np.random.default_rng(seed)
        self.terrain = terrain if terrain is not None else TerrainMap.generate(
            cfg.WORLD_WIDTH, cfg.WORLD_HEIGHT, seed=0 if seed is None else seed
        )
        self.dt = dt
        self.verbose = verbose
        self.tick_count = 0
        self.uids = itertools.count()
        self.chronicle = []
        self.history = []

        self.agents = populate(self.terrain, self.rng, self.uids, grazers, hunters, cannibals)
        self.population = engine.PopulationSnapshot.capture(0, self.agents)
        for agent in self.agents:
            self.chronicle.append((0, agent.uid, cfg.ACTION_SPAWN, agent.x, agent.y, int(agent.variant)))
        self._record_counts()
        self._report_seeding()

    def _say(self, message):
        if self.verbose:
            print(message)

    def _report_seeding(self):
        counts = self.population.counts
        self._say(f"World seeded: {counts[Variant.GRAZER]} grazers, {counts[Variant.HUNTER]} hunters, "
                  f"{counts[Variant.CANNIBAL]} cannibals on a {self.terrain.width}x{self.terrain.height} map")
        total = self.terrain.width * self.terrain.height
        for kind, count in sorted(self.terrain.composition().items()):
            self._say(f"  {kind.name.title()}: {count} tiles ({count / total * 100:.1f}%)")

    def _record_counts(self):
        counts = self.population.counts
        self.history.append((self.tick_count, counts[Variant.GRAZER], counts[Variant.HUNTER], counts[Variant.CANNIBAL]))

    def step(self):
        """Advances the world by one tick and returns its PopulationSnapshot."""
        self.tick_count += 1
        result = engine.tick(self.agents, self.terrain, self.dt, self.rng, self.uids, self.tick_count)
        self.agents = result.agents
        self.population = result.population
        self.chronicle.extend(result.events)
        self._record_counts()
        return self.population

    def run(self, max_ticks=cfg.MAX_TICKS_PER_RUN, ticker_interval=cfg.TICKER_INTERVAL) -> np.ndarray:
        """Runs max_ticks ticks and returns the chronicle as an (events x 6) array."""
        self._say(f"--- Running {max_ticks} ticks (dt={self.dt:.4f}s) ---")
        for _ in range(max_ticks):
            counts = self.step().counts
            if ticker_interval and self.tick_count % ticker_interval == 0:
                self._say(f"> Tick: {self.tick_count} / {max_ticks} | Grazers: {counts[Variant.GRAZER]} "
                          f"| Hunters: {counts[Variant.HUNTER]} | Cannibals: {counts[Variant.CANNIBAL]}")
        self._say(f"--- Simulation Complete: {len(self.chronicle)} events logged. ---")
        return self.chronicle_array()

    def chronicle_array(self):
        if not self.chronicle:
            return np.zeros((0, len(CHRONICLE_HEADER)), dtype=np.float64)
        return np.array(self.chronicle, dtype=np.float64)

    def history_array(self):
        """Per-tick (tick, grazers, hunters, cannibals) counts."""
        return np.array(self.history, dtype=np.int64)
