"""
Island Foraging Demo
====================

WHAT THIS SHOWS:
- Building a seeded island from environment configuration
- Scattering food and tools over walkable cells
- Autonomous foragers plus one command-driven player
- A snapshot producer that runs off the event loop

RUN:
    WORLD_SIZE=256 FOOD_ITEM_COUNT=2000 INPUT_TIMEOUT_SECONDS=0.05 \
        python -m examples.island.run
"""

import asyncio
import random

from islandworld import (
    Character,
    Config,
    ForagingAgent,
    MoveCommand,
    Roster,
    Simulation,
    TerrainKind,
    WorldSnapshot,
    build_default_world,
)
from islandworld.logging_utils import log_info


class TerrainSummary:
    """Logs land coverage and character energy for each snapshot."""

    def produce(self, snapshot: WorldSnapshot) -> None:
        land = int((snapshot.terrain != TerrainKind.WATER).sum())
        energies = ", ".join(f"{c.name}={c.energy}" for c in snapshot.characters)
        log_info(f"[Snapshot] tick {snapshot.tick}: {land} land cells, {snapshot.item_count} items; {energies}")


def spawn_points(grid, count, rng):
    """Pick ``count`` random walkable cells."""
    points = []
    while len(points) < count:
        x, y = rng.randrange(grid.size), rng.randrange(grid.size)
        if grid.is_walkable(x, y):
            points.append((x, y))
    return points


async def main():
    print(Config.display())
    grid, index = build_default_world()

    rng = random.Random(Config.WORLD_SEED)
    names = ["ada", "bo", "cy", "dee"]
    roster = Roster()
    for name, (x, y) in zip(names, spawn_points(grid, len(names), rng)):
        roster.add(Character(name=name, x=x, y=y))
    px, py = spawn_points(grid, 1, rng)[0]
    roster.add(Character(name="player", x=px, y=py, is_player=True))

    simulation = Simulation(
        grid,
        index,
        roster,
        agent=ForagingAgent(rng=rng),
        snapshot_producer=TerrainSummary(),
    )

    # Queue a few player moves; the rest of the run is autonomous
    for direction in ["north", "north", "east"]:
        await simulation.submit(MoveCommand(character="player", direction=direction))

    result = await simulation.run(Config.DEFAULT_TICK_COUNT)
    for state in result["final_snapshot"].characters:
        print(f"{state.name}: ({state.x}, {state.y}) energy={state.energy} bag={state.bag_size}")


if __name__ == "__main__":
    asyncio.run(main())
