"""
Islandworld Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


class Config:
    """Application configuration loaded from environment variables."""

    # World build
    WORLD_SEED: int = int(os.getenv("WORLD_SEED", "17"))
    WORLD_SIZE: int = int(os.getenv("WORLD_SIZE", "2048"))
    BOUNDARY_MARGIN: int = int(os.getenv("BOUNDARY_MARGIN", "5"))

    # Thread pool size for terrain generation. None lets concurrent.futures pick.
    GENERATION_WORKERS: int | None = _optional_int("GENERATION_WORKERS")

    # Item placement (rejection-sampled attempts, not guaranteed placements)
    FOOD_ITEM_COUNT: int = int(os.getenv("FOOD_ITEM_COUNT", "28000"))
    USEFUL_ITEM_COUNT: int = int(os.getenv("USEFUL_ITEM_COUNT", "1000"))
    # Optional JSON file with {"food": [...], "useful": [...]} tables
    ITEM_CATALOG_PATH: Path | None = (
        Path(os.environ["ITEM_CATALOG_PATH"]) if os.getenv("ITEM_CATALOG_PATH") else None
    )

    # Simulation loop
    DEFAULT_TICK_COUNT: int = int(os.getenv("DEFAULT_TICK_COUNT", "50"))
    # Bounded wait on the command queue so autonomous agents keep acting without input
    INPUT_TIMEOUT_SECONDS: float = float(os.getenv("INPUT_TIMEOUT_SECONDS", "10"))

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are out of range."""
        if cls.WORLD_SIZE <= 0:
            raise ValueError(f"WORLD_SIZE must be positive, got {cls.WORLD_SIZE}")

        if cls.BOUNDARY_MARGIN < 0:
            raise ValueError(f"BOUNDARY_MARGIN must not be negative, got {cls.BOUNDARY_MARGIN}")

        if cls.BOUNDARY_MARGIN * 2 >= cls.WORLD_SIZE:
            raise ValueError(
                f"BOUNDARY_MARGIN={cls.BOUNDARY_MARGIN} leaves no interior on a "
                f"{cls.WORLD_SIZE}x{cls.WORLD_SIZE} world"
            )

        if cls.FOOD_ITEM_COUNT < 0 or cls.USEFUL_ITEM_COUNT < 0:
            raise ValueError("FOOD_ITEM_COUNT and USEFUL_ITEM_COUNT must not be negative")

        if cls.GENERATION_WORKERS is not None and cls.GENERATION_WORKERS <= 0:
            raise ValueError(
                f"GENERATION_WORKERS must be positive when set, got {cls.GENERATION_WORKERS}"
            )

        if cls.INPUT_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"INPUT_TIMEOUT_SECONDS must be positive, got {cls.INPUT_TIMEOUT_SECONDS}"
            )

        if cls.ITEM_CATALOG_PATH is not None and not cls.ITEM_CATALOG_PATH.exists():
            raise ValueError(f"ITEM_CATALOG_PATH does not exist: {cls.ITEM_CATALOG_PATH}")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        workers = cls.GENERATION_WORKERS if cls.GENERATION_WORKERS is not None else "auto"
        lines = [
            "Islandworld Configuration:",
            f"  Seed: {cls.WORLD_SEED}",
            f"  World Size: {cls.WORLD_SIZE}x{cls.WORLD_SIZE}",
            f"  Boundary Margin: {cls.BOUNDARY_MARGIN}",
            f"  Generation Workers: {workers}",
            f"  Food / Useful Items: {cls.FOOD_ITEM_COUNT} / {cls.USEFUL_ITEM_COUNT}",
            f"  Default Ticks: {cls.DEFAULT_TICK_COUNT}",
            f"  Input Timeout: {cls.INPUT_TIMEOUT_SECONDS}s",
        ]
        return "\n".join(lines)
