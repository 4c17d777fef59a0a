"""Items, item catalogs and the per-cell item index.

Items are a closed two-variant union discriminated on ``kind``: food carries a
nutritional value, useful items carry a use value. The :class:`ItemIndex` keeps
at most one placed item per grid cell in a flat row-major arena.
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .directions import Direction
from .environment.grid import Grid, GridBoundsError, Position
from .logging_utils import log_generation


# ============================================================================
# Item variants
# ============================================================================


class FoodItem(BaseModel):
    """Edible item; eating it adds ``nutritional_value`` to a character's energy."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["food"] = "food"
    name: str = Field(..., min_length=1)
    nutritional_value: int = Field(..., ge=0)


class UsefulItem(BaseModel):
    """Tool or equipment; ``use_value`` is carried but not consumed by any rule yet."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["useful"] = "useful"
    name: str = Field(..., min_length=1)
    use_value: int = Field(..., ge=0)


Item = Annotated[Union[FoodItem, UsefulItem], Field(discriminator="kind")]

_ITEM_ADAPTER: TypeAdapter = TypeAdapter(Item)


def parse_item(data: dict) -> Union[FoodItem, UsefulItem]:
    """Validate a ``{"kind": "food" | "useful", ...}`` mapping into an item."""
    return _ITEM_ADAPTER.validate_python(data)


# ============================================================================
# Catalog
# ============================================================================


class ItemDefinition(BaseModel):
    """One row of an item table: a name and its value."""

    name: str = Field(..., min_length=1)
    value: int = Field(..., ge=0)


class ItemCatalog(BaseModel):
    """Food and useful item tables that random placement draws from."""

    food: List[ItemDefinition] = Field(default_factory=list)
    useful: List[ItemDefinition] = Field(default_factory=list)

    def food_items(self) -> List[FoodItem]:
        return [FoodItem(name=entry.name, nutritional_value=entry.value) for entry in self.food]

    def useful_items(self) -> List[UsefulItem]:
        return [UsefulItem(name=entry.name, use_value=entry.value) for entry in self.useful]

    @classmethod
    def from_json(cls, text: str) -> "ItemCatalog":
        return cls.model_validate_json(text)

    @classmethod
    def default(cls) -> "ItemCatalog":
        return cls(
            food=[ItemDefinition(name=name, value=value) for name, value in DEFAULT_FOOD_TABLE],
            useful=[ItemDefinition(name=name, value=value) for name, value in DEFAULT_USEFUL_TABLE],
        )


def load_item_catalog(path: Optional[Path | str] = None) -> ItemCatalog:
    """Load a catalog from a JSON file, or return the built-in tables when ``path`` is None.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        pydantic.ValidationError: If the file does not match the catalog shape.
    """
    if path is None:
        return ItemCatalog.default()
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    catalog = ItemCatalog.model_validate(data)
    log_generation(
        f"[Items] Loaded catalog from {path} ({len(catalog.food)} food, {len(catalog.useful)} useful)"
    )
    return catalog


# Some names repeat with a higher value
DEFAULT_FOOD_TABLE = [
    ("Apple", 10),
    ("Banana", 15),
    ("Orange", 20),
    ("Grapes", 25),
    ("Strawberry", 30),
    ("Blueberry", 35),
    ("Raspberry", 40),
    ("Blackberry", 45),
    ("Pineapple", 50),
    ("Watermelon", 55),
    ("Kiwi", 60),
    ("Mango", 65),
    ("Peach", 70),
    ("Plum", 75),
    ("Cherry", 80),
    ("Pear", 85),
    ("Pomegranate", 90),
    ("Apricot", 95),
    ("Cantaloupe", 100),
    ("Honeydew", 105),
    ("Lemon", 110),
    ("Lime", 115),
    ("Coconut", 120),
    ("Grapefruit", 125),
    ("Tangerine", 130),
    ("Nectarine", 135),
    ("Persimmon", 140),
    ("Starfruit", 145),
    ("Passionfruit", 150),
    ("Dragonfruit", 155),
    ("Guava", 160),
    ("Papaya", 165),
    ("Lychee", 170),
    ("Jackfruit", 175),
    ("Durian", 180),
    ("Mangosteen", 185),
    ("Kiwi", 190),
    ("Pineapple", 195),
    ("Watermelon", 200),
    ("EnergyDrink", 200),
]

DEFAULT_USEFUL_TABLE = [
    ("Medkit", 50),
    ("Axe", 45),
    ("Shovel", 50),
    ("Pickaxe", 55),
    ("Knife", 60),
    ("Sword", 65),
    ("Shield", 70),
    ("Bow", 75),
    ("Crossbow", 80),
    ("Arrows", 85),
    ("Bolts", 90),
    ("Quiver", 95),
]


# ============================================================================
# Spatial index
# ============================================================================


@dataclass(frozen=True)
class PlacedItem:
    """An item pinned to a grid cell."""

    item: Union[FoodItem, UsefulItem]
    x: int
    y: int

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def is_food(self) -> bool:
        return isinstance(self.item, FoodItem)


class ItemIndex:
    """At most one :class:`PlacedItem` per cell of a ``size x size`` map.

    Slots are stored row-major (``y * size + x``). Placement overwrites whatever
    the cell held before.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"Item index size must be positive, got {size}")
        self.size = size
        self._slots: List[Optional[PlacedItem]] = [None] * (size * size)
        self._count = 0

    def _slot(self, x: int, y: int) -> int:
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise GridBoundsError(x, y, self.size)
        return y * self.size + x

    def place(self, item: Union[FoodItem, UsefulItem], x: int, y: int) -> PlacedItem:
        """Put ``item`` at ``(x, y)``, replacing any previous item.

        Raises:
            GridBoundsError: If ``(x, y)`` is outside the index.
        """
        slot = self._slot(x, y)
        placed = PlacedItem(item=item, x=x, y=y)
        if self._slots[slot] is None:
            self._count += 1
        self._slots[slot] = placed
        return placed

    def get(self, x: int, y: int) -> Optional[PlacedItem]:
        return self._slots[self._slot(x, y)]

    def take(self, x: int, y: int) -> Optional[PlacedItem]:
        """Remove and return the item at ``(x, y)``; None if the cell was empty."""
        slot = self._slot(x, y)
        placed = self._slots[slot]
        if placed is not None:
            self._slots[slot] = None
            self._count -= 1
        return placed

    def has_food_at(self, x: int, y: int) -> bool:
        placed = self.get(x, y)
        return placed is not None and placed.is_food

    def remove_named(self, x: int, y: int, name: str) -> Optional[PlacedItem]:
        """Take the item at ``(x, y)`` only if its name matches (case-insensitive)."""
        placed = self.get(x, y)
        if placed is None or placed.name.lower() != name.strip().lower():
            return None
        return self.take(x, y)

    def look_around(self, x: int, y: int) -> Dict[str, PlacedItem]:
        """Items in the 3x3 window around ``(x, y)`` keyed by direction label or ``"here"``.

        Off-map cells and empty cells are left out.
        """
        window: Dict[str, PlacedItem] = {}
        offsets = [("here", 0, 0)] + [(d.label, d.dx, d.dy) for d in Direction]
        for label, dx, dy in offsets:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.size and 0 <= ny < self.size:
                placed = self._slots[ny * self.size + nx]
                if placed is not None:
                    window[label] = placed
        return window

    def food_positions(self) -> List[Position]:
        return [(p.x, p.y) for p in self if p.is_food]

    def __iter__(self) -> Iterator[PlacedItem]:
        return (slot for slot in self._slots if slot is not None)

    def __len__(self) -> int:
        return self._count

    def populate_random(
        self,
        count: int,
        table: Sequence[Union[FoodItem, UsefulItem]],
        grid: Grid,
        rng: Optional[random.Random] = None,
    ) -> int:
        """Draw ``count`` uniform cells and drop a random ``table`` entry on each walkable one.

        Unwalkable draws are skipped, not retried, so fewer than ``count`` items
        may be placed. A cell drawn twice keeps the later item.

        Returns:
            Number of placements made.
        """
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        if count and not table:
            raise ValueError("Cannot populate items from an empty table")
        if grid.size != self.size:
            raise ValueError(f"Grid size {grid.size} does not match item index size {self.size}")

        rng = rng or random.Random()
        walkable = grid.walkable_mask()
        placed = 0
        for _ in range(count):
            x = rng.randrange(self.size)
            y = rng.randrange(self.size)
            if walkable[y, x]:
                self.place(rng.choice(table), x, y)
                placed += 1
        return placed

    def __repr__(self) -> str:
        return f"ItemIndex(size={self.size}, items={self._count})"
