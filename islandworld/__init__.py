"""
Islandworld - procedural island worlds with foraging agents.

Generates a noise-driven island, scatters food and tools over it and runs
characters that forage under an energy budget.

No global world state. Every grid, item index and roster is owned by the
caller.
"""

__version__ = "0.1.0"

from .errors import IslandworldError
from .config import Config
from .directions import Direction
from .environment import (
    DEFAULT_GRID_SIZE,
    Grid,
    GridBoundsError,
    NoiseField,
    TerrainGenerationError,
    TerrainGenerator,
    TerrainKind,
    TerrainMap,
    Tile,
    apply_beach_margin,
    generate_terrain,
)
from .items import (
    FoodItem,
    UsefulItem,
    Item,
    ItemDefinition,
    ItemCatalog,
    ItemIndex,
    PlacedItem,
    load_item_catalog,
    parse_item,
)
from .agents import Bag, Character, MoveOutcome, Roster
from .foraging import ForagingAgent, ForagingPhase, TickReport
from .world import (
    WorldBuildError,
    build_default_world,
    build_world,
    carve_river,
    populate_items,
)
from .simulation import (
    CharacterState,
    Command,
    EatCommand,
    MoveCommand,
    PickUpCommand,
    Simulation,
    SnapshotProducer,
    TurnCommand,
    WorldSnapshot,
)

__all__ = [
    # Errors
    "IslandworldError",
    "GridBoundsError",
    "TerrainGenerationError",
    "WorldBuildError",
    # Configuration
    "Config",
    # Terrain
    "DEFAULT_GRID_SIZE",
    "Grid",
    "NoiseField",
    "TerrainGenerator",
    "TerrainKind",
    "TerrainMap",
    "Tile",
    "apply_beach_margin",
    "generate_terrain",
    # Items
    "FoodItem",
    "UsefulItem",
    "Item",
    "ItemDefinition",
    "ItemCatalog",
    "ItemIndex",
    "PlacedItem",
    "load_item_catalog",
    "parse_item",
    # Characters
    "Bag",
    "Character",
    "Direction",
    "MoveOutcome",
    "Roster",
    "ForagingAgent",
    "ForagingPhase",
    "TickReport",
    # World build
    "build_default_world",
    "build_world",
    "carve_river",
    "populate_items",
    # Simulation
    "CharacterState",
    "Command",
    "EatCommand",
    "MoveCommand",
    "PickUpCommand",
    "Simulation",
    "SnapshotProducer",
    "TurnCommand",
    "WorldSnapshot",
]
