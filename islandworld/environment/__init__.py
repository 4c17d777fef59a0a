"""Terrain layer for Islandworld: noise, generation and the grid."""

from .noise_field import NoiseField
from .tiles import TerrainKind, Tile
from .terrain import (
    BEACH_WIDTH,
    TerrainGenerationError,
    TerrainGenerator,
    TerrainMap,
    apply_beach_margin,
    compute_threshold,
    generate_terrain,
)
from .grid import DEFAULT_GRID_SIZE, Grid, GridBoundsError, Position

__all__ = [
    "NoiseField",
    "TerrainKind",
    "Tile",
    "BEACH_WIDTH",
    "TerrainGenerationError",
    "TerrainGenerator",
    "TerrainMap",
    "apply_beach_margin",
    "compute_threshold",
    "generate_terrain",
    "DEFAULT_GRID_SIZE",
    "Grid",
    "GridBoundsError",
    "Position",
]
