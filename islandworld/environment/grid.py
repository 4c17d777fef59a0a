"""Square terrain grid.

Terrain lives in two row-major numpy arenas (``kinds[y, x]`` holding
:class:`TerrainKind` codes and ``elevations[y, x]``). Tiles are materialised on
read. Bulk edits build new arrays and swap them in with one assignment of
``self._layers`` so a reader holding the old layers never sees a half-edited map.
"""

from __future__ import annotations

import math
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np

from ..errors import IslandworldError
from ..logging_utils import log_generation
from .noise_field import NoiseField
from .terrain import TerrainGenerator
from .tiles import TerrainKind, Tile

DEFAULT_GRID_SIZE = 2048

Position = Tuple[int, int]


class GridBoundsError(IslandworldError, IndexError):
    """Raised when a coordinate falls outside ``[0, size)`` on either axis."""

    def __init__(self, x: int, y: int, size: int):
        self.x = x
        self.y = y
        self.size = size
        super().__init__(f"Position ({x}, {y}) is outside the {size}x{size} grid")


class TerrainLayers(NamedTuple):
    kinds: np.ndarray
    elevations: np.ndarray


class Grid:
    """Fixed-size square map of terrain tiles.

    Every cell starts as Earth at elevation 0. Strict reads (:meth:`get_tile`)
    raise :class:`GridBoundsError` outside the map; setters silently ignore
    out-of-bounds coordinates.
    """

    def __init__(self, size: int = DEFAULT_GRID_SIZE):
        if size <= 0:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self._layers = TerrainLayers(
            kinds=np.full((size, size), TerrainKind.EARTH, dtype=np.uint8),
            elevations=np.zeros((size, size), dtype=np.int64),
        )

    @classmethod
    def from_arrays(cls, kinds: np.ndarray, elevations: np.ndarray) -> "Grid":
        """Wrap pre-built ``[y, x]`` arrays (copied) in a grid."""
        kinds = np.asarray(kinds, dtype=np.uint8)
        elevations = np.asarray(elevations, dtype=np.int64)
        if kinds.ndim != 2 or kinds.shape[0] != kinds.shape[1]:
            raise ValueError(f"Terrain arrays must be square, got shape {kinds.shape}")
        if elevations.shape != kinds.shape:
            raise ValueError(
                f"Elevation shape {elevations.shape} does not match kinds shape {kinds.shape}"
            )
        grid = cls(kinds.shape[0])
        grid._swap(kinds.copy(), elevations.copy())
        return grid

    # ------------------------------------------------------------------
    # Layer access
    # ------------------------------------------------------------------

    @property
    def kinds(self) -> np.ndarray:
        return self._layers.kinds

    @property
    def elevations(self) -> np.ndarray:
        return self._layers.elevations

    def _swap(self, kinds: np.ndarray, elevations: np.ndarray) -> None:
        # Readers that already grabbed self._layers keep a consistent pair
        self._layers = TerrainLayers(kinds=kinds, elevations=elevations)

    def copy(self) -> "Grid":
        layers = self._layers
        return Grid.from_arrays(layers.kinds, layers.elevations)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise GridBoundsError(x, y, self.size)

    def get_kind(self, x: int, y: int) -> TerrainKind:
        self._check_bounds(x, y)
        return TerrainKind(int(self._layers.kinds[y, x]))

    def get_tile(self, x: int, y: int) -> Tile:
        """Return the tile at ``(x, y)``.

        Raises:
            GridBoundsError: If ``(x, y)`` is outside the grid.
        """
        self._check_bounds(x, y)
        layers = self._layers
        kind = TerrainKind(int(layers.kinds[y, x]))
        elevation = int(layers.elevations[y, x]) if kind.has_elevation else None
        return Tile(kind=kind, elevation=elevation)

    def get_neighbors(self, x: int, y: int) -> List[Position]:
        """In-bounds Chebyshev neighbours (up to 8), dx outer then dy inner."""
        neighbors = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                nx, ny = x + dx, y + dy
                if self.in_bounds(nx, ny):
                    neighbors.append((nx, ny))
        return neighbors

    @staticmethod
    def get_distance(x1: int, y1: int, x2: int, y2: int) -> float:
        return math.hypot(x2 - x1, y2 - y1)

    def _elevation_or_zero(self, x: int, y: int) -> int:
        elevation = self.get_tile(x, y).elevation
        return elevation if elevation is not None else 0

    def get_elevation_difference(self, x1: int, y1: int, x2: int, y2: int) -> float:
        """``|e1 - e2|`` with a missing elevation counted as 0."""
        return float(abs(self._elevation_or_zero(x1, y1) - self._elevation_or_zero(x2, y2)))

    def get_cost(self, x1: int, y1: int, x2: int, y2: int) -> float:
        """Movement cost: Euclidean distance plus absolute elevation difference.

        Raises:
            GridBoundsError: If either endpoint is outside the grid.
        """
        return self.get_distance(x1, y1, x2, y2) + self.get_elevation_difference(x1, y1, x2, y2)

    @staticmethod
    def is_not_water(tile: Tile) -> bool:
        """False for Water, River and Boundary tiles."""
        return tile.is_not_water()

    def is_walkable(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return TerrainKind(int(self._layers.kinds[y, x])).is_walkable

    def walkable_mask(self) -> np.ndarray:
        """Boolean ``[y, x]`` mask of walkable cells."""
        kinds = self._layers.kinds
        return ~np.isin(kinds, [TerrainKind.WATER, TerrainKind.RIVER, TerrainKind.BOUNDARY])

    def count_kinds(self) -> Dict[TerrainKind, int]:
        codes, counts = np.unique(self._layers.kinds, return_counts=True)
        return {TerrainKind(int(code)): int(count) for code, count in zip(codes, counts)}

    def find_highest_point(self) -> Position:
        """Highest Earth cell, scanning x then y; ``(0, 0)`` when no Earth is higher than 0."""
        layers = self._layers
        earth_elevation = np.where(layers.kinds == TerrainKind.EARTH, layers.elevations, 0)
        # Transpose so argmax scans x-major and keeps the first maximum
        flat = earth_elevation.T.ravel()
        index = int(np.argmax(flat))
        if flat[index] <= 0:
            return (0, 0)
        x, y = divmod(index, self.size)
        return (x, y)

    def find_boundary_water_tile(self) -> Position:
        """First Water cell on the outer edge, scanning x then y; ``(0, 0)`` if none."""
        kinds = self._layers.kinds
        last = self.size - 1
        for x in range(self.size):
            for y in range(self.size):
                if x not in (0, last) and y not in (0, last):
                    continue
                if kinds[y, x] == TerrainKind.WATER:
                    return (x, y)
        return (0, 0)

    # ------------------------------------------------------------------
    # Single-cell edits (no-op out of bounds)
    # ------------------------------------------------------------------

    def set_tile_type(self, x: int, y: int, kind: TerrainKind) -> None:
        """Replace the tile at ``(x, y)`` with a default tile of ``kind``."""
        if not self.in_bounds(x, y):
            return
        kind = TerrainKind(kind)
        layers = self._layers
        layers.kinds[y, x] = kind
        layers.elevations[y, x] = 0

    def set_tile_elevation(self, x: int, y: int, elevation: int) -> None:
        """Set the elevation of an Earth/Mountain tile; other kinds keep ``None``."""
        if elevation < 0:
            raise ValueError(f"elevation must not be negative, got {elevation}")
        if not self.in_bounds(x, y):
            return
        layers = self._layers
        if TerrainKind(int(layers.kinds[y, x])).has_elevation:
            layers.elevations[y, x] = elevation

    # ------------------------------------------------------------------
    # Bulk edits (swap whole layers)
    # ------------------------------------------------------------------

    def set_boundary_margin(self, margin: int) -> None:
        """Turn every cell within ``margin`` of an edge into Boundary."""
        if margin < 0:
            raise ValueError(f"margin must not be negative, got {margin}")
        if margin == 0:
            return
        layers = self._layers
        band = np.zeros((self.size, self.size), dtype=bool)
        band[:margin, :] = True
        band[-margin:, :] = True
        band[:, :margin] = True
        band[:, -margin:] = True

        kinds = layers.kinds.copy()
        elevations = layers.elevations.copy()
        kinds[band] = TerrainKind.BOUNDARY
        elevations[band] = 0
        self._swap(kinds, elevations)

    def raise_earth_elevation(self, amount: int = 1) -> None:
        """Add ``amount`` to the elevation of every Earth tile."""
        layers = self._layers
        elevations = layers.elevations.copy()
        earth = layers.kinds == TerrainKind.EARTH
        elevations[earth] = np.maximum(elevations[earth] + amount, 0)
        self._swap(layers.kinds, elevations)

    def stamp(self, positions: List[Position], kind: TerrainKind) -> None:
        """Set every in-bounds position in ``positions`` to ``kind`` in one swap."""
        kind = TerrainKind(kind)
        layers = self._layers
        kinds = layers.kinds.copy()
        elevations = layers.elevations.copy()
        for x, y in positions:
            if self.in_bounds(x, y):
                kinds[y, x] = kind
                elevations[y, x] = 0
        self._swap(kinds, elevations)

    def generate_island(self, seed: int, workers: Optional[int] = None) -> None:
        """Replace the whole terrain with a generated island for ``seed``.

        Raises:
            TerrainGenerationError: If generation fails; the grid is left unchanged.
        """
        generator = TerrainGenerator(NoiseField(seed), workers=workers)
        terrain = generator.generate(self.size, self.size)
        self._swap(terrain.kinds, terrain.elevations)
        counts = self.count_kinds()
        summary = ", ".join(f"{kind.label}={count}" for kind, count in sorted(counts.items()))
        log_generation(f"[Grid] Island generated (seed={seed}): {summary}")

    def __repr__(self) -> str:
        return f"Grid(size={self.size})"
