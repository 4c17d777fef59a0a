"""World assembly: terrain, rivers, boundary and item placement.

``build_world`` returns an owned :class:`Grid`; nothing here keeps global
state, so several worlds can coexist in one process.
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple, Type

from .config import Config
from .environment.grid import Grid, Position
from .environment.terrain import TerrainGenerationError
from .environment.tiles import TerrainKind
from .errors import IslandworldError
from .items import ItemCatalog, ItemIndex, load_item_catalog
from .logging_utils import log_generation, log_success

RIVER_MAX_LENGTH = 200
RIVER_MIN_LENGTH = 10

_RIVER_STOP_KINDS = (TerrainKind.WATER, TerrainKind.RIVER, TerrainKind.BOUNDARY)


class WorldBuildError(IslandworldError):
    """Raised when a world cannot be built from the given parameters.

    The underlying cause (bad dimensions, degenerate noise) is chained as
    ``__cause__``. Check WORLD_SIZE / BOUNDARY_MARGIN or try another seed.
    """


def build_world(
    seed: int,
    size: int,
    boundary_margin: int,
    *,
    workers: Optional[int] = None,
    rivers: int = 0,
) -> Grid:
    """Generate an island grid of ``size x size`` for ``seed``.

    Steps: create the grid, generate the island, carve ``rivers`` rivers, then
    stamp ``boundary_margin`` cells of Boundary around the edge.

    Raises:
        WorldBuildError: If any parameter is invalid or terrain generation fails.
    """
    log_generation(f"[World] Building {size}x{size} world (seed={seed}, margin={boundary_margin})")
    try:
        if boundary_margin < 0:
            raise ValueError(f"boundary_margin must not be negative, got {boundary_margin}")
        if rivers < 0:
            raise ValueError(f"rivers must not be negative, got {rivers}")
        grid = Grid(size)
        grid.generate_island(seed, workers=workers)
    except (TerrainGenerationError, ValueError) as exc:
        raise WorldBuildError(f"Failed to build world (seed={seed}, size={size}): {exc}") from exc

    for _ in range(rivers):
        carve_river(grid)
    grid.set_boundary_margin(boundary_margin)

    log_success(f"[World] World ready (seed={seed}, size={size})")
    return grid


def carve_river(
    grid: Grid,
    *,
    max_length: int = RIVER_MAX_LENGTH,
    min_length: int = RIVER_MIN_LENGTH,
    start: Optional[Position] = None,
) -> List[Position]:
    """Trace a steepest-descent river from ``start`` (default: the highest Earth cell).

    The walk stops on Water, River or Boundary, at a pit (no strictly lower
    neighbour), or after ``max_length`` cells. Paths shorter than
    ``min_length`` are discarded.

    Returns:
        The cells turned into River (empty when nothing was carved).
    """
    x, y = start if start is not None else grid.find_highest_point()
    if not grid.in_bounds(x, y):
        return []

    kinds, elevations = grid.kinds, grid.elevations

    path: List[Position] = []
    for _ in range(max_length):
        if kinds[y, x] in _RIVER_STOP_KINDS:
            break
        path.append((x, y))

        neighbors = grid.get_neighbors(x, y)
        if not neighbors:
            break
        next_x, next_y = min(neighbors, key=lambda p: elevations[p[1], p[0]])
        # Pit: nowhere lower to flow
        if elevations[next_y, next_x] >= elevations[y, x]:
            break
        x, y = next_x, next_y

    if not path or len(path) < min_length:
        log_generation(f"[World] River too short ({len(path)} cells), skipped")
        return []

    grid.stamp(path, TerrainKind.RIVER)
    log_generation(f"[World] Carved river of {len(path)} cells from {path[0]}")
    return path


def populate_items(
    grid: Grid,
    *,
    food_count: int,
    useful_count: int,
    catalog: Optional[ItemCatalog] = None,
    rng: Optional[random.Random] = None,
) -> ItemIndex:
    """Scatter food then useful items over the walkable cells of ``grid``."""
    catalog = catalog or ItemCatalog.default()
    rng = rng or random.Random()
    index = ItemIndex(grid.size)

    food_placed = index.populate_random(food_count, catalog.food_items(), grid, rng)
    useful_placed = index.populate_random(useful_count, catalog.useful_items(), grid, rng)
    log_generation(
        f"[Items] Placed {food_placed}/{food_count} food and "
        f"{useful_placed}/{useful_count} useful items ({len(index)} occupied cells)"
    )
    return index


def build_default_world(config: Type[Config] = Config) -> Tuple[Grid, ItemIndex]:
    """Build the grid and item index described by ``config``.

    Raises:
        ValueError: If the configuration is invalid.
        WorldBuildError: If terrain generation fails.
    """
    config.validate()
    grid = build_world(
        config.WORLD_SEED,
        config.WORLD_SIZE,
        config.BOUNDARY_MARGIN,
        workers=config.GENERATION_WORKERS,
    )
    catalog = load_item_catalog(config.ITEM_CATALOG_PATH)
    index = populate_items(
        grid,
        food_count=config.FOOD_ITEM_COUNT,
        useful_count=config.USEFUL_ITEM_COUNT,
        catalog=catalog,
        rng=random.Random(config.WORLD_SEED),
    )
    return grid, index
