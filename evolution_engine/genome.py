# evolution_engine/genome.py

from types import MappingProxyType

import numpy as np

from . import config as cfg


def _clamp01(value):
    return max(0.0, min(1.0, float(value)))


class Genome:
    """
    A mapping of trait name -> normalized value in [0, 1].

    The canonical traits are listed in cfg.GENOME_KEYS, but a genome may carry
    fewer or more; lookups always go through get() with a default.
    """

    def __init__(self, traits=None):
        self._traits = {}
        if traits:
            for name, value in traits.items():
                self.set(name, value)

    @classmethod
    def random(cls, rng: np.random.Generator):
        genome = cls()
        genome.randomize(rng)
        return genome

    def randomize(self, rng: np.random.Generator):
        """Assigns every canonical trait a uniform value in [0, 1]."""
        for name in cfg.GENOME_KEYS:
            self._traits[name] = float(rng.uniform(0.0, 1.0))

    def get(self, trait, default):
        return self._traits.get(trait, default)

    def set(self, trait, value):
        self._traits[trait] = _clamp01(value)

    @property
    def traits(self):
        return MappingProxyType(self._traits)

    def mutate(self, rng: np.random.Generator):
        # Each trait rolls independently.
        for name in list(self._traits):
            if rng.random() < cfg.MUTATION_CHANCE:
                delta = rng.uniform(-cfg.MUTATION_AMOUNT, cfg.MUTATION_AMOUNT)
                self.set(name, self._traits[name] + delta)

    def clone(self):
        return Genome(self._traits)

    @staticmethod
    def combine(parent1, parent2, rng: np.random.Generator):
        """
        Sexual crossover. Shared traits are either averaged or taken from one
        parent at random; traits unique to one parent pass through. With a
        missing parent a freshly randomized genome is returned instead.
        """
        if parent1 is None or parent2 is None:
            return Genome.random(rng)

        child_traits = {}
        for name, value1 in parent1._traits.items():
            if name in parent2._traits:
                value2 = parent2._traits[name]
                if rng.random() < cfg.CROSSOVER_MEAN_CHANCE:
                    child_traits[name] = (value1 + value2) / 2.0
                else:
                    child_traits[name] = value1 if rng.random() < 0.5 else value2
            else:
                child_traits[name] = value1
        for name, value2 in parent2._traits.items():
            if name not in parent1._traits:
                child_traits[name] = value2

        child = Genome(child_traits)
        if rng.random() < cfg.MUTATION_CHANCE * 2:
            child.mutate(rng)
        return child

    def compatibility(self, other):
        """1 - mean absolute difference over shared traits; 0 if nothing is shared."""
        if other is None:
            return 0.0
        shared = [name for name in self._traits if name in other._traits]
        if not shared:
            return 0.0
        total = sum(abs(self._traits[name] - other._traits[name]) for name in shared)
        return 1.0 - total / len(shared)

    def __len__(self):
        return len(self._traits)

    def __contains__(self, trait):
        return trait in self._traits

    def __repr__(self):
        body = ", ".join(f"{name}={value:.2f}" for name, value in self._traits.items())
        return f"Genome{{{body}}}"
