"""Terrain kinds and the immutable tile value."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class TerrainKind(IntEnum):
    """Terrain categories; values are the codes stored in the grid arena."""

    BOUNDARY = 0
    MOUNTAIN = 1
    FOREST = 2
    EARTH = 3
    BEACH = 4
    WATER = 5
    RIVER = 6

    @property
    def has_elevation(self) -> bool:
        return self in (TerrainKind.EARTH, TerrainKind.MOUNTAIN)

    @property
    def is_walkable(self) -> bool:
        return self not in (TerrainKind.WATER, TerrainKind.RIVER, TerrainKind.BOUNDARY)

    @property
    def label(self) -> str:
        return self.name.title()


@dataclass(frozen=True)
class Tile:
    """One grid cell.

    Elevation is present only for Earth and Mountain tiles. The safe-zone and
    spawn-point flags are placeholders that world generation never sets.
    """

    kind: TerrainKind
    elevation: int | None = None
    is_safe_zone: bool = False
    is_spawn_point: bool = False

    def __post_init__(self) -> None:
        if self.kind.has_elevation and self.elevation is None:
            raise ValueError(f"{self.kind.label} tiles require an elevation")
        if not self.kind.has_elevation and self.elevation is not None:
            raise ValueError(f"{self.kind.label} tiles do not carry an elevation")
        if self.elevation is not None and self.elevation < 0:
            raise ValueError(f"elevation must not be negative, got {self.elevation}")

    @classmethod
    def new(cls, kind: TerrainKind) -> "Tile":
        """Default tile for ``kind`` (elevation 0 where the kind has one)."""
        kind = TerrainKind(kind)
        return cls(kind=kind, elevation=0 if kind.has_elevation else None)

    @property
    def label(self) -> str:
        return self.kind.label

    def is_not_water(self) -> bool:
        return self.kind.is_walkable
