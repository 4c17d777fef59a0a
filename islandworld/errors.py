"""Base exception shared by every Islandworld error."""


class IslandworldError(Exception):
    """Root of the Islandworld exception hierarchy.

    Module-level errors (terrain generation, world build, grid bounds) subclass
    this so callers can catch everything raised by the library in one place.
    """
