# evolution_engine/terrain.py - Terrain kinds, the grid lookup, and procedural generation

from enum import IntEnum

import numpy as np
import numba

from . import config as cfg


class TerrainKind(IntEnum):
    GRASS = 0
    DIRT = 1
    SAND = 2
    STONE = 3
    WATER = 4
    FOREST = 5
    MOUNTAIN = 6
    SNOW = 7


# Velocity multipliers applied once per tick on the agent's current tile
TERRAIN_SPEED_FACTORS = {
    TerrainKind.WATER: cfg.WATER_DRAG,
    TerrainKind.MOUNTAIN: cfg.MOUNTAIN_DRAG,
    TerrainKind.SNOW: cfg.SNOW_DRAG,
}

# Flat energy drained per tick on the agent's current tile
TERRAIN_ENERGY_DRAIN = {
    TerrainKind.SNOW: cfg.SNOW_ENERGY_DRAIN,
}

FOOD_TERRAIN = (TerrainKind.GRASS, TerrainKind.FOREST)


class TerrainMap:
    """Read-only tile grid. Anything outside the grid is water."""

    def __init__(self, grid):
        self.grid = np.asarray(grid, dtype=np.int32)
        self.width, self.height = self.grid.shape

    @classmethod
    def filled(cls, width, height, kind=TerrainKind.GRASS):
        return cls(np.full((width, height), int(kind), dtype=np.int32))

    @classmethod
    def generate(cls, width=cfg.WORLD_WIDTH, height=cfg.WORLD_HEIGHT, seed=42):
        return cls(generate_terrain(width, height, seed))

    def classify(self, tile_x, tile_y):
        if tile_x < 0 or tile_x >= self.width or tile_y < 0 or tile_y >= self.height:
            return TerrainKind.WATER
        return TerrainKind(int(self.grid[tile_x, tile_y]))

    def classify_position(self, x, y):
        return self.classify(int(x // cfg.TILE_SIZE), int(y // cfg.TILE_SIZE))

    def composition(self):
        """Returns {TerrainKind: tile count} for the kinds present on the map."""
        unique, counts = np.unique(self.grid, return_counts=True)
        return {TerrainKind(int(kind)): int(count) for kind, count in zip(unique, counts)}


@numba.njit
def _lattice_value(ix, iy, seed):
    """Pseudo-random value in [0, 1) pinned to an integer lattice point."""
    h = np.sin(ix * 127.1 + iy * 311.7 + seed * 74.7) * 43758.5453
    return h - np.floor(h)


@numba.njit
def generate_noise(width, height, cell_size=16.0, octaves=4, persistence=0.5, seed=0):
    """
    Fractal value noise normalized to [0, 1]. Each octave smoothstep-blends
    lattice values spaced cell_size tiles apart; the next octave halves the
    spacing and scales its weight by persistence.
    """
    noise = np.zeros((width, height), dtype=np.float64)
    amplitude = 1.0
    spacing = cell_size

    for octave in range(octaves):
        for x in range(width):
            fx = x / spacing
            x0 = int(np.floor(fx))
            sx = fx - x0
            sx = sx * sx * (3.0 - 2.0 * sx)
            for y in range(height):
                fy = y / spacing
                y0 = int(np.floor(fy))
                sy = fy - y0
                sy = sy * sy * (3.0 - 2.0 * sy)

                a = _lattice_value(x0, y0, seed + octave)
                b = _lattice_value(x0 + 1, y0, seed + octave)
                c = _lattice_value(x0, y0 + 1, seed + octave)
                d = _lattice_value(x0 + 1, y0 + 1, seed + octave)
                near = a + (b - a) * sx
                far = c + (d - c) * sx
                noise[x, y] += amplitude * (near + (far - near) * sy)

        amplitude *= persistence
        spacing = max(1.0, spacing / 2.0)

    min_val = np.min(noise)
    max_val = np.max(noise)
    if max_val > min_val:
        noise = (noise - min_val) / (max_val - min_val)

    return noise


@numba.njit
def generate_terrain(width, height, seed=42):
    """Procedural terrain over the eight terrain kinds, mostly grass."""
    elevation = generate_noise(width, height, 24.0, 5, 0.5, seed)
    moisture = generate_noise(width, height, 16.0, 4, 0.55, seed + 100)

    terrain = np.zeros((width, height), dtype=np.int32)

    for x in range(width):
        for y in range(height):
            elev = elevation[x, y]
            moist = moisture[x, y]
            # Cooler toward the top and bottom edges
            temp = 1.0 - abs(y - height / 2) / (height / 2)

            if elev < 0.1:
                terrain[x, y] = 4    # WATER
            elif elev < 0.16:
                terrain[x, y] = 2    # SAND
            elif elev > 0.92:
                terrain[x, y] = 7 if temp < 0.5 else 6    # SNOW / MOUNTAIN
            elif elev > 0.85:
                terrain[x, y] = 6    # MOUNTAIN
            elif elev > 0.78:
                terrain[x, y] = 3    # STONE
            elif moist > 0.65:
                terrain[x, y] = 5    # FOREST
            elif moist < 0.15:
                terrain[x, y] = 1    # DIRT
            else:
                terrain[x, y] = 0    # GRASS

    return terrain
