"""
Tick loop for an island world.

Each tick:
1. Wait (bounded by ``input_timeout``) for external commands and apply them
2. Run one foraging tick for every non-player character
3. Hand a copied snapshot to the snapshot producer on a worker thread
4. Invoke tick listeners

The grid and item index are owned by the simulation for the duration of
``run``; commands and foraging edit them from the event loop only.
"""

from __future__ import annotations

import asyncio
from typing import Annotated, Callable, Dict, List, Literal, Optional, Protocol, Set, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .agents import Character, MoveOutcome, Roster
from .config import Config
from .directions import Direction
from .environment.grid import Grid
from .foraging import ForagingAgent, TickReport
from .items import ItemIndex
from .logging_utils import log_error, log_info, log_success


# =============================
# Commands
# =============================


class _CharacterCommand(BaseModel):
    character: str = Field(..., min_length=1, description="Name of the character to act on")


class MoveCommand(_CharacterCommand):
    """Step one cell; ``direction`` defaults to the way the character faces."""

    action: Literal["move"] = "move"
    direction: Optional[str] = None

    @field_validator("direction")
    @classmethod
    def _known_direction(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return Direction.parse(value).label


class TurnCommand(_CharacterCommand):
    action: Literal["turn"] = "turn"
    side: Literal["left", "right"]


class EatCommand(_CharacterCommand):
    action: Literal["eat"] = "eat"
    item: str = Field(..., min_length=1)


class PickUpCommand(_CharacterCommand):
    """Pick up the item on the character's cell, optionally only if it has this name."""

    action: Literal["pick_up"] = "pick_up"
    item: Optional[str] = None


Command = Annotated[
    Union[MoveCommand, TurnCommand, EatCommand, PickUpCommand],
    Field(discriminator="action"),
]


# =============================
# Snapshots
# =============================


class CharacterState(BaseModel):
    name: str
    x: int
    y: int
    facing: str
    energy: int
    bag_size: int
    is_player: bool

    @classmethod
    def from_character(cls, character: Character) -> "CharacterState":
        return cls(
            name=character.name,
            x=character.x,
            y=character.y,
            facing=character.facing.label,
            energy=character.energy,
            bag_size=len(character.bag),
            is_player=character.is_player,
        )


class WorldSnapshot(BaseModel):
    """Copied world state handed to snapshot producers.

    ``terrain`` is a private copy of the kind codes (``[y, x]``) and is only
    filled in when a producer is attached.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tick: int
    size: int
    characters: List[CharacterState] = Field(default_factory=list)
    item_count: int = 0
    terrain: Optional[np.ndarray] = None


class SnapshotProducer(Protocol):
    """Consumes snapshots off the event loop (e.g. renders an image)."""

    def produce(self, snapshot: WorldSnapshot) -> None:
        ...


TickListener = Callable[[int, List[TickReport], WorldSnapshot], None]


# =============================
# Simulation
# =============================


class Simulation:
    """Owns a world and advances it tick by tick."""

    def __init__(
        self,
        grid: Grid,
        index: ItemIndex,
        roster: Roster,
        *,
        agent: Optional[ForagingAgent] = None,
        input_timeout: float = Config.INPUT_TIMEOUT_SECONDS,
        snapshot_producer: Optional[SnapshotProducer] = None,
        tick_listeners: Optional[List[TickListener]] = None,
    ):
        """
        Args:
            grid: Terrain the characters live on.
            index: Items placed on ``grid``; must have the same size.
            roster: Characters to tick.
            agent: Foraging behaviour for non-player characters.
            input_timeout: Seconds to wait for the first command of a tick.
            snapshot_producer: Optional consumer of per-tick snapshots, run via
                ``asyncio.to_thread`` so it never blocks the loop.
            tick_listeners: Callables invoked after each tick with
                (tick, reports, snapshot).
        """
        if index.size != grid.size:
            raise ValueError(f"Item index size {index.size} does not match grid size {grid.size}")
        if input_timeout <= 0:
            raise ValueError(f"input_timeout must be positive, got {input_timeout}")

        self.grid = grid
        self.index = index
        self.roster = roster
        self.agent = agent or ForagingAgent()
        self.input_timeout = input_timeout
        self.snapshot_producer = snapshot_producer
        self.tick_listeners = tick_listeners or []
        self.commands: asyncio.Queue = asyncio.Queue()
        self.tick = 0
        self._snapshot_tasks: Set[asyncio.Task] = set()

    async def submit(self, command: Command) -> None:
        await self.commands.put(command)

    async def run(self, num_ticks: int = Config.DEFAULT_TICK_COUNT) -> Dict:
        """Run ``num_ticks`` ticks.

        Returns:
            Dict with ticks_completed and final_snapshot
        """
        if num_ticks < 0:
            raise ValueError(f"num_ticks must not be negative, got {num_ticks}")

        log_info(f"Starting simulation: {len(self.roster)} characters, {num_ticks} ticks")
        try:
            for _ in range(num_ticks):
                await self._run_tick()
        finally:
            # Let in-flight snapshots finish before handing the world back
            if self._snapshot_tasks:
                await asyncio.gather(*self._snapshot_tasks)

        log_success(f"Simulation complete after {self.tick} ticks")
        return {"ticks_completed": self.tick, "final_snapshot": self.snapshot()}

    async def _run_tick(self) -> None:
        self.tick += 1

        for command in await self._collect_commands():
            self.apply_command(command)

        reports = self.roster.tick_all(self.agent, self.grid, self.index)
        snapshot = self.snapshot(include_terrain=self.snapshot_producer is not None)

        if self.snapshot_producer is not None:
            task = asyncio.create_task(self._produce(snapshot))
            self._snapshot_tasks.add(task)
            task.add_done_callback(self._snapshot_tasks.discard)

        for listener in self.tick_listeners:
            try:
                listener(self.tick, reports, snapshot)
            except Exception as exc:  # pragma: no cover - diagnostic hook
                log_error(f"Tick listener failed: {exc}")

    async def _collect_commands(self) -> List[Command]:
        """Wait up to ``input_timeout`` for a command, then drain whatever else is queued."""
        try:
            first = await asyncio.wait_for(self.commands.get(), timeout=self.input_timeout)
        except asyncio.TimeoutError:
            return []

        commands = [first]
        while not self.commands.empty():
            commands.append(self.commands.get_nowait())
        return commands

    async def _produce(self, snapshot: WorldSnapshot) -> None:
        try:
            await asyncio.to_thread(self.snapshot_producer.produce, snapshot)
        except Exception as exc:
            log_error(f"Snapshot producer failed at tick {snapshot.tick}: {exc}")

    def apply_command(self, command: Command) -> bool:
        """Apply one command. Returns False when the command had no effect."""
        character = self.roster.get(command.character)
        if character is None:
            log_error(f"Unknown character: {command.character}")
            return False

        if isinstance(command, MoveCommand):
            direction = Direction.parse(command.direction) if command.direction else character.facing
            outcome = character.move(direction, self.grid, self.agent.rng)
            applied = outcome not in (MoveOutcome.BLOCKED, MoveOutcome.RESTED)
        elif isinstance(command, TurnCommand):
            if command.side == "left":
                character.turn_left()
            else:
                character.turn_right()
            applied = True
        elif isinstance(command, EatCommand):
            applied = character.eat(command.item) is not None
        else:
            applied = character.pick_up(self.index, command.item) is not None

        log_info(
            f"{character.name}: {command.action} -> {'ok' if applied else 'no effect'} "
            f"at {character.position}, energy {character.energy}"
        )
        return applied

    def snapshot(self, include_terrain: bool = False) -> WorldSnapshot:
        return WorldSnapshot(
            tick=self.tick,
            size=self.grid.size,
            characters=[CharacterState.from_character(c) for c in self.roster],
            item_count=len(self.index),
            terrain=self.grid.kinds.copy() if include_terrain else None,
        )
