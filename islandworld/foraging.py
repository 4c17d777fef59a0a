"""Autonomous foraging behaviour.

Each tick walks a small state machine::

    SCANNING -> PURSUING -> PICKING -> STEPPING

Scanning looks for food on a walkable neighbour and skips straight to stepping
when there is none. Pursuing faces the goal and closes in. Picking moves the
item into the bag. Stepping always runs last and advances one cell in the
facing direction.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .agents import Character, MoveOutcome
from .directions import Direction
from .environment.grid import Grid, Position
from .environment.tiles import TerrainKind
from .items import ItemIndex
from .logging_utils import log_agent_debug

PURSUIT_RANGE = 2.0


class ForagingPhase(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    PURSUING = "pursuing"
    PICKING = "picking"
    STEPPING = "stepping"


@dataclass
class TickReport:
    """What one character did during one tick."""

    character: str
    phases: List[ForagingPhase] = field(default_factory=list)
    events: List[str] = field(default_factory=list)
    goal: Optional[Position] = None
    position: Position = (0, 0)
    energy: int = 0

    @property
    def picked_up(self) -> bool:
        return any(event.startswith("picked up ") for event in self.events)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class ForagingAgent:
    """Drives non-player characters toward nearby food.

    The agent is stateless between ticks apart from its random source, so one
    instance can tick every character in a roster.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def tick(self, grid: Grid, index: ItemIndex, character: Character) -> TickReport:
        report = TickReport(character=character.name)

        if character.is_player:
            report.phases.append(ForagingPhase.IDLE)
            return self._finish(report, character)

        phase: Optional[ForagingPhase] = ForagingPhase.SCANNING
        while phase is not None:
            report.phases.append(phase)
            if phase is ForagingPhase.SCANNING:
                report.goal = self._scan(grid, index, character)
                phase = ForagingPhase.PURSUING if report.goal else ForagingPhase.STEPPING
            elif phase is ForagingPhase.PURSUING:
                phase = self._pursue(character, report.goal)
            elif phase is ForagingPhase.PICKING:
                self._pick(index, character, report)
                phase = ForagingPhase.STEPPING
            else:
                self._step(grid, character, report)
                phase = None

        return self._finish(report, character)

    @staticmethod
    def _finish(report: TickReport, character: Character) -> TickReport:
        report.position = character.position
        report.energy = character.energy
        return report

    @staticmethod
    def _scan(grid: Grid, index: ItemIndex, character: Character) -> Optional[Position]:
        """First walkable neighbour holding food, in neighbour order."""
        for x, y in grid.get_neighbors(character.x, character.y):
            if grid.is_walkable(x, y) and index.has_food_at(x, y):
                return (x, y)
        return None

    @staticmethod
    def _pursue(character: Character, goal: Position) -> ForagingPhase:
        dx = goal[0] - character.x
        dy = goal[1] - character.y
        facing = Direction.from_offset(_sign(dx), _sign(dy))
        if facing is not None:
            character.face(facing)

        if math.hypot(dx, dy) < PURSUIT_RANGE:
            character.teleport(*goal)
            return ForagingPhase.PICKING
        if dx == 0 and dy == 0:
            return ForagingPhase.PICKING
        return ForagingPhase.STEPPING

    def _pick(self, index: ItemIndex, character: Character, report: TickReport) -> None:
        placed = index.get(character.x, character.y)
        if placed is None:
            return
        if character.bag.is_full():
            # Nothing to evict; the item stays on the map
            report.events.append(f"bag full, left {placed.name}")
            log_agent_debug(f"{character.name} left {placed.name} at {character.position}: bag full")
            return

        index.take(character.x, character.y)
        character.bag.add_item(placed.item)
        report.events.append(f"picked up {placed.name}")
        if character.bag.is_full():
            evicted = character.bag.remove_least_nutritious_food()
            if evicted is not None:
                report.events.append(f"discarded {evicted.name}")
        character.turn_randomly(self.rng)
        log_agent_debug(f"{character.name} picked up {placed.name} at {character.position}")

    def _step(self, grid: Grid, character: Character, report: TickReport) -> None:
        self._record_move(report, character, character.move_forward(grid, self.rng))

        if grid.get_kind(character.x, character.y) in (TerrainKind.BOUNDARY, TerrainKind.WATER):
            character.face(character.facing.opposite())
            self._record_move(report, character, character.move_forward(grid, self.rng))

    @staticmethod
    def _record_move(report: TickReport, character: Character, outcome: MoveOutcome) -> None:
        report.events.append(outcome.value)
        log_agent_debug(
            f"{character.name} {outcome.value} -> {character.position} "
            f"facing {character.facing.label}, energy {character.energy}"
        )
