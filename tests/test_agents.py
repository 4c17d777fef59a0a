"""Tests for directions, bags, characters and the roster."""

import random

import pytest

from islandworld.agents import Bag, Character, MoveOutcome, Roster, proper_name
from islandworld.directions import Direction
from islandworld.environment import Grid, TerrainKind
from islandworld.items import FoodItem, ItemIndex, UsefulItem


APPLE = FoodItem(name="Apple", nutritional_value=10)
MANGO = FoodItem(name="Mango", nutritional_value=65)
AXE = UsefulItem(name="Axe", use_value=45)


# ---------------------------------------------------------------------------
# Directions
# ---------------------------------------------------------------------------


def test_direction_offsets():
    assert Direction.NORTH.offset == (0, -1)
    assert Direction.SOUTHWEST.offset == (-1, 1)
    assert Direction.from_offset(1, -1) is Direction.NORTHEAST
    assert Direction.from_offset(0, 0) is None
    assert Direction.from_offset(2, 0) is None


def test_direction_algebra():
    for direction in Direction:
        assert direction.opposite().opposite() is direction
        assert direction.turn_right().turn_left() is direction
        d = direction
        for _ in range(4):
            d = d.turn_right()
        assert d is direction

    assert Direction.NORTH.turn_right() is Direction.EAST
    assert Direction.NORTHWEST.turn_left() is Direction.SOUTHWEST
    assert Direction.SOUTHEAST.opposite() is Direction.NORTHWEST


def test_direction_parse():
    assert Direction.parse("North") is Direction.NORTH
    assert Direction.parse("southwest") is Direction.SOUTHWEST
    assert Direction.parse("North-East") is Direction.NORTHEAST
    with pytest.raises(ValueError):
        Direction.parse("up")


def test_direction_random_uses_rng():
    picks = {Direction.random(random.Random(seed)) for seed in range(40)}
    assert picks <= set(Direction)
    assert len(picks) > 1


# ---------------------------------------------------------------------------
# Bag
# ---------------------------------------------------------------------------


def test_bag_capacity_and_helpers():
    bag = Bag(capacity=3)

    assert bag.add_item(MANGO)
    assert bag.add_item(AXE)
    assert bag.add_item(APPLE)
    assert bag.is_full()
    assert not bag.add_item(APPLE)
    assert len(bag) == 3

    assert bag.has_food() and bag.has_useful()
    assert bag.total_nutritional_value() == 75
    assert bag.total_use_value() == 45


def test_bag_removals():
    bag = Bag(items=[AXE, MANGO, APPLE, FoodItem(name="Lime", nutritional_value=10)])

    assert bag.remove_least_nutritious_food() == APPLE
    assert bag.remove_first_food() == MANGO
    assert bag.remove_named("axe") == AXE
    assert bag.remove_named("axe") is None
    assert [item.name for item in bag] == ["Lime"]

    empty = Bag()
    assert empty.remove_first_food() is None
    assert empty.remove_least_nutritious_food() is None


# ---------------------------------------------------------------------------
# Character
# ---------------------------------------------------------------------------


def test_character_defaults_and_name():
    character = Character(name="bOB")

    assert character.name == "Bob"
    assert proper_name("  alice ") == "Alice"
    assert character.energy == 1000
    assert character.facing is Direction.NORTH
    assert character.bag.capacity == 15
    assert not character.is_player

    with pytest.raises(ValueError):
        Character(name="Eve", energy=-1)


def test_move_pays_cost():
    grid = Grid(10)
    character = Character(name="walker", x=5, y=5, energy=5)

    outcome = character.move_forward(grid)

    assert outcome is MoveOutcome.MOVED
    assert character.position == (5, 4)
    assert character.energy == 4


def test_move_rests_without_energy_or_food():
    grid = Grid(10)
    grid.set_tile_elevation(5, 4, 2)  # cost 1 + 2 = 3
    character = Character(name="tired", x=5, y=5, energy=0)

    outcome = character.move_forward(grid)

    assert outcome is MoveOutcome.RESTED
    assert character.position == (5, 5)
    assert character.energy == 20


def test_move_eats_first_food_when_low():
    grid = Grid(10)
    character = Character(name="hungry", x=5, y=5, energy=0)
    character.bag.add_item(AXE)
    character.bag.add_item(APPLE)
    character.bag.add_item(MANGO)

    outcome = character.move(Direction.EAST, grid)

    assert outcome is MoveOutcome.ATE_AND_MOVED
    assert character.position == (6, 5)
    assert character.energy == 9
    assert [item.name for item in character.bag] == ["Axe", "Mango"]


def test_move_uses_integer_cost():
    grid = Grid(10)
    character = Character(name="diag", x=5, y=5, energy=1)

    # sqrt(2) truncates to 1
    outcome = character.move(Direction.NORTHEAST, grid)

    assert outcome is MoveOutcome.MOVED
    assert character.position == (6, 4)
    assert character.energy == 0


def test_boundary_turns_character_around():
    grid = Grid(10)
    grid.set_tile_type(5, 4, TerrainKind.BOUNDARY)
    character = Character(name="stuck", x=5, y=5, energy=50)

    outcome = character.move_forward(grid, random.Random(0))

    assert outcome is MoveOutcome.BLOCKED
    assert character.position == (5, 5)
    assert character.energy == 50
    assert character.facing in (Direction.EAST, Direction.WEST)


def test_map_edge_blocks_like_boundary():
    grid = Grid(4)
    character = Character(name="edge", x=0, y=0)

    assert character.move_forward(grid, random.Random(1)) is MoveOutcome.BLOCKED
    assert character.position == (0, 0)


def test_move_backward_and_turns():
    grid = Grid(10)
    character = Character(name="dancer", x=5, y=5)

    character.move_backward(grid)
    assert character.position == (5, 6)
    assert character.facing is Direction.NORTH

    character.turn_left()
    assert character.facing is Direction.WEST
    character.turn_right()
    character.turn_right()
    assert character.facing is Direction.EAST

    character.face(Direction.SOUTHWEST)
    character.teleport(1, 1)
    assert character.position == (1, 1)
    assert character.facing is Direction.SOUTHWEST


def test_eat_by_name():
    character = Character(name="gourmet", energy=100)
    character.bag.add_item(AXE)
    character.bag.add_item(MANGO)

    assert character.eat("axe") is None
    assert character.eat("MANGO") == MANGO
    assert character.energy == 165
    assert character.eat("mango") is None
    assert len(character.bag) == 1


def test_pick_up_from_current_cell():
    index = ItemIndex(10)
    index.place(AXE, 2, 2)
    character = Character(name="collector", x=2, y=2)

    assert character.pick_up(index, "shovel") is None
    assert index.get(2, 2) is not None

    picked = character.pick_up(index, "Axe")

    assert picked.item == AXE
    assert index.get(2, 2) is None
    assert character.bag.has_useful()


def test_pick_up_refuses_when_bag_full():
    index = ItemIndex(10)
    index.place(APPLE, 0, 0)
    character = Character(name="packed", bag=Bag(capacity=1, items=[AXE]))

    assert character.pick_up(index) is None
    assert index.get(0, 0) is not None


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------


def test_roster_lookup_and_positions():
    roster = Roster([Character(name="alice", x=1, y=1), Character(name="bob", x=1, y=1)])
    roster.add(Character(name="carol", x=4, y=2, is_player=True))

    assert len(roster) == 3
    assert roster.get("ALICE").name == "Alice"
    assert "bob" in roster
    assert [c.name for c in roster.at_position(1, 1)] == ["Alice", "Bob"]
    assert roster.is_occupied(4, 2)
    assert not roster.is_occupied(0, 0)
    assert [c.name for c in roster.players()] == ["Carol"]

    with pytest.raises(ValueError):
        roster.add(Character(name="Alice"))

    assert roster.remove("bob").name == "Bob"
    assert roster.get("bob") is None
    assert roster.remove("bob") is None
