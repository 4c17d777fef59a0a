"""Console output for island builds and simulation runs.

World building (noise sampling, terrain classification, item scattering) prints
in blue under ``[•]``. Per-tick character activity prints in yellow under
``[AG]``; the step-by-step narration from ``log_agent_debug`` only appears
when ``ISLANDWORLD_VERBOSE`` is truthy, since a large roster emits several lines
per character per tick. Set ``ISLANDWORLD_NO_COLOR`` to strip ANSI codes, e.g.
when piping a run into a file.
"""

import os
from enum import Enum


class Color(Enum):
    BLUE = "\033[94m"      # terrain and item generation
    YELLOW = "\033[93m"    # foraging and movement
    RED = "\033[91m"       # build failures, rejected commands
    GREEN = "\033[92m"     # run finished
    CYAN = "\033[96m"      # config and snapshot summaries
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap ``text`` in ``color`` unless ``ISLANDWORLD_NO_COLOR`` is set."""
    if os.getenv("ISLANDWORLD_NO_COLOR"):
        return text
    prefix = (Color.BOLD.value if bold else "") + color.value
    return f"{prefix}{text}{Color.RESET.value}"


def verbose_enabled() -> bool:
    """Return True when ISLANDWORLD_VERBOSE asks for per-agent narration."""
    return os.getenv("ISLANDWORLD_VERBOSE", "").lower() in ("1", "true", "yes")


def log_generation(message: str) -> None:
    """Log a world-building step (blue)."""
    print(colored(f"{LOG_TAG_GENERATION} {message}", Color.BLUE))


def log_agent(message: str) -> None:
    """Log an agent decision (yellow)."""
    print(colored(f"{LOG_TAG_AGENT} {message}", Color.YELLOW))


def log_agent_debug(message: str) -> None:
    """Log agent internals, only when ISLANDWORLD_VERBOSE is set."""
    if verbose_enabled():
        log_agent(message)


def log_error(message: str) -> None:
    """Log an error or rejected action (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


# Markers for operation types (color-blind accessible)
LOG_TAG_GENERATION = "[•]"   # Deterministic world building
LOG_TAG_AGENT = "[AG]"       # Agent decision
LOG_TAG_ERROR = "[!]"        # Error/rejection
LOG_TAG_SUCCESS = "[✓]"      # Success
LOG_TAG_INFO = "[i]"         # Information
