"""Characters, their bags and the roster that owns them."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Union

from .directions import Direction
from .environment.grid import Grid, Position
from .environment.tiles import TerrainKind
from .items import FoodItem, ItemIndex, PlacedItem, UsefulItem

if TYPE_CHECKING:
    from .foraging import ForagingAgent, TickReport

STARTING_ENERGY = 1000
REST_ENERGY = 20
BAG_CAPACITY = 15


def proper_name(name: str) -> str:
    """Capitalise the first letter and lower-case the rest ("bOB" -> "Bob")."""
    name = name.strip()
    return name[:1].upper() + name[1:].lower()


class MoveOutcome(Enum):
    """What a single movement attempt did."""

    MOVED = "moved"
    ATE_AND_MOVED = "ate_and_moved"
    RESTED = "rested"
    BLOCKED = "blocked"


@dataclass
class Bag:
    """Bounded inventory. ``add_item`` refuses items once ``capacity`` is reached."""

    capacity: int = BAG_CAPACITY
    items: List[Union[FoodItem, UsefulItem]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Union[FoodItem, UsefulItem]]:
        return iter(self.items)

    def is_full(self) -> bool:
        return len(self.items) >= self.capacity

    def add_item(self, item: Union[FoodItem, UsefulItem]) -> bool:
        if self.is_full():
            return False
        self.items.append(item)
        return True

    def has_food(self) -> bool:
        return any(isinstance(item, FoodItem) for item in self.items)

    def has_useful(self) -> bool:
        return any(isinstance(item, UsefulItem) for item in self.items)

    def total_nutritional_value(self) -> int:
        return sum(item.nutritional_value for item in self.items if isinstance(item, FoodItem))

    def total_use_value(self) -> int:
        return sum(item.use_value for item in self.items if isinstance(item, UsefulItem))

    def remove_first_food(self) -> Optional[FoodItem]:
        for i, item in enumerate(self.items):
            if isinstance(item, FoodItem):
                return self.items.pop(i)
        return None

    def remove_least_nutritious_food(self) -> Optional[FoodItem]:
        """Drop the lowest-value food (earliest on ties) and return it."""
        foods = [(item.nutritional_value, i) for i, item in enumerate(self.items) if isinstance(item, FoodItem)]
        if not foods:
            return None
        _, index = min(foods)
        return self.items.pop(index)

    def remove_named(self, name: str) -> Optional[Union[FoodItem, UsefulItem]]:
        """Remove the first item whose name matches case-insensitively."""
        wanted = name.strip().lower()
        for i, item in enumerate(self.items):
            if item.name.lower() == wanted:
                return self.items.pop(i)
        return None


@dataclass
class Character:
    """A person on the island.

    Energy never goes below zero. Player-controlled characters are driven by
    commands only; everyone else is ticked by a :class:`ForagingAgent`.
    """

    name: str
    x: int = 0
    y: int = 0
    facing: Direction = Direction.NORTH
    energy: int = STARTING_ENERGY
    bag: Bag = field(default_factory=Bag)
    is_player: bool = False

    def __post_init__(self) -> None:
        self.name = proper_name(self.name)
        if not self.name:
            raise ValueError("Character name must not be empty")
        if self.energy < 0:
            raise ValueError(f"energy must not be negative, got {self.energy}")

    @property
    def position(self) -> Position:
        return (self.x, self.y)

    # Facing -------------------------------------------------------------

    def face(self, direction: Direction) -> None:
        self.facing = direction

    def turn_left(self) -> None:
        self.facing = self.facing.turn_left()

    def turn_right(self) -> None:
        self.facing = self.facing.turn_right()

    def turn_randomly(self, rng: Optional[random.Random] = None) -> None:
        if (rng or random).random() < 0.5:
            self.turn_left()
        else:
            self.turn_right()

    # Movement -----------------------------------------------------------

    def teleport(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def move(
        self,
        direction: Direction,
        grid: Grid,
        rng: Optional[random.Random] = None,
    ) -> MoveOutcome:
        """Try one step in ``direction``, paying the movement cost in energy.

        A step off the map or onto Boundary turns the character around (then a
        random quarter turn) without moving. When energy is below the integer
        cost the first food in the bag is eaten; with no food the character
        rests for ``REST_ENERGY`` and stays put. Water is not refused here.
        """
        nx, ny = self.x + direction.dx, self.y + direction.dy
        if not grid.in_bounds(nx, ny) or grid.get_kind(nx, ny) is TerrainKind.BOUNDARY:
            self.facing = direction.opposite()
            self.turn_randomly(rng)
            return MoveOutcome.BLOCKED

        cost = int(grid.get_cost(self.x, self.y, nx, ny))
        outcome = MoveOutcome.MOVED
        if self.energy < cost:
            food = self.bag.remove_first_food()
            if food is None:
                self.energy += REST_ENERGY
                return MoveOutcome.RESTED
            self.energy += food.nutritional_value
            outcome = MoveOutcome.ATE_AND_MOVED

        self.energy = max(0, self.energy - cost)
        self.x, self.y = nx, ny
        return outcome

    def move_forward(self, grid: Grid, rng: Optional[random.Random] = None) -> MoveOutcome:
        return self.move(self.facing, grid, rng)

    def move_backward(self, grid: Grid, rng: Optional[random.Random] = None) -> MoveOutcome:
        return self.move(self.facing.opposite(), grid, rng)

    # Items --------------------------------------------------------------

    def eat(self, name: str) -> Optional[FoodItem]:
        """Eat the named food from the bag. Non-food and missing names do nothing."""
        wanted = name.strip().lower()
        for i, item in enumerate(self.bag.items):
            if isinstance(item, FoodItem) and item.name.lower() == wanted:
                self.bag.items.pop(i)
                self.energy += item.nutritional_value
                return item
        return None

    def pick_up(self, index: ItemIndex, name: Optional[str] = None) -> Optional[PlacedItem]:
        """Move the item on this cell into the bag.

        With ``name`` only a matching item is taken. Nothing is taken when the
        bag is full.
        """
        placed = index.get(self.x, self.y)
        if placed is None or self.bag.is_full():
            return None
        if name is not None and placed.name.lower() != name.strip().lower():
            return None
        index.take(self.x, self.y)
        self.bag.add_item(placed.item)
        return placed


class Roster:
    """Owns the characters in a world, keyed by proper name."""

    def __init__(self, characters: Optional[List[Character]] = None):
        self._characters: Dict[str, Character] = {}
        for character in characters or []:
            self.add(character)

    def add(self, character: Character) -> None:
        if character.name in self._characters:
            raise ValueError(f"A character named {character.name!r} already exists")
        self._characters[character.name] = character

    def remove(self, name: str) -> Optional[Character]:
        return self._characters.pop(proper_name(name), None)

    def get(self, name: str) -> Optional[Character]:
        return self._characters.get(proper_name(name))

    def at_position(self, x: int, y: int) -> List[Character]:
        return [c for c in self._characters.values() if c.x == x and c.y == y]

    def is_occupied(self, x: int, y: int) -> bool:
        return any(c.x == x and c.y == y for c in self._characters.values())

    def players(self) -> List[Character]:
        return [c for c in self._characters.values() if c.is_player]

    def __iter__(self) -> Iterator[Character]:
        return iter(list(self._characters.values()))

    def __len__(self) -> int:
        return len(self._characters)

    def __contains__(self, name: str) -> bool:
        return proper_name(name) in self._characters

    def tick_all(self, agent: "ForagingAgent", grid: Grid, index: ItemIndex) -> List["TickReport"]:
        """Run one foraging tick for every character, in insertion order."""
        return [agent.tick(grid, index, character) for character in self]


__all__ = [
    "Bag",
    "Character",
    "Direction",
    "MoveOutcome",
    "Roster",
    "proper_name",
    "BAG_CAPACITY",
    "REST_ENERGY",
    "STARTING_ENERGY",
]
