"""Island terrain generation.

Turns a seeded noise field into a terrain classification plus elevation for
every cell of a ``width x height`` map:

1. Sample noise at ``(x/width, y/height)``, subtract a linear radial falloff
   (``distance_to_center / width``) and rescale with ``v*0.5 + 0.5``. This is the
   *biased value* used as the land/water discriminator.
2. Split land from water at the midpoint of the observed biased range, so the
   coastline adapts to each seed instead of using a fixed cutoff.
3. Give land an elevation that rises from 2 at the rim to 50 at the centre, plus
   ``biased * 10`` of local perturbation.
4. Promote high, high-noise land to Mountain.
5. Turn Earth within 8 cells of Water (axis checks only) into Beach.

Sampling (1) and classification (3-4) are split into row bands and run on a
thread pool. Each band writes its own slice of the output arrays, so no locking
is needed. The beach pass reads the finished classification and runs after.
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numba
import numpy as np

from ..errors import IslandworldError
from ..logging_utils import log_generation
from .noise_field import NoiseField
from .tiles import TerrainKind

BEACH_WIDTH = 8
EDGE_ELEVATION = 2.0
CENTER_ELEVATION = 50.0
NOISE_ELEVATION_SCALE = 10.0
MOUNTAIN_ELEVATION_THRESHOLD = 47.0
MOUNTAIN_NOISE_THRESHOLD = 0.46
DEFAULT_BAND_ROWS = 64

# Plain ints so the compiled kernel sees them as constants
_WATER_CODE = int(TerrainKind.WATER)
_EARTH_CODE = int(TerrainKind.EARTH)
_MOUNTAIN_CODE = int(TerrainKind.MOUNTAIN)

Band = Tuple[int, int]


class TerrainGenerationError(IslandworldError):
    """Raised when a terrain map cannot be generated.

    Covers invalid dimensions and degenerate noise ranges. Both are fatal to the
    world build and must reach the caller.
    """


@dataclass
class TerrainMap:
    """Generated terrain in row-major layout (``[y, x]``).

    ``elevations`` holds 0 for every kind without an elevation so cost queries
    can treat missing elevation as zero without a lookup.
    """

    width: int
    height: int
    kinds: np.ndarray
    elevations: np.ndarray
    biased: np.ndarray
    threshold: float

    def kind_at(self, x: int, y: int) -> TerrainKind:
        return TerrainKind(int(self.kinds[y, x]))


def compute_threshold(values: np.ndarray) -> float:
    """Midpoint of the min/max of ``values``.

    Raises:
        TerrainGenerationError: If ``values`` is empty, non-finite or flat.
    """
    if values.size == 0:
        raise TerrainGenerationError("Cannot compute a land threshold over an empty noise field")

    low = float(np.min(values))
    high = float(np.max(values))
    if not (math.isfinite(low) and math.isfinite(high)):
        raise TerrainGenerationError(f"Noise field is not finite (min={low}, max={high})")
    if high <= low:
        raise TerrainGenerationError(
            f"Degenerate noise range (min == max == {low}); the map is too small or the noise is flat"
        )
    return (low + high) / 2.0


def apply_beach_margin(
    kinds: np.ndarray,
    elevations: np.ndarray,
    beach_width: int = BEACH_WIDTH,
) -> Tuple[np.ndarray, np.ndarray]:
    """Return copies of ``kinds``/``elevations`` with coastal Earth turned into Beach.

    An Earth cell becomes Beach when any cell ``i`` steps away along one of the
    four axes (``1 <= i <= beach_width``) is Water. Lookups below index 0
    clamp to the first row/column; lookups past the far edge are skipped. Only
    Water counts, so running the pass again on its own output changes nothing.
    Diagonal water is not detected.
    """
    water = kinds == TerrainKind.WATER
    near_water = np.zeros_like(water)
    height, width = kinds.shape
    cols = np.arange(width)
    rows = np.arange(height)

    for i in range(1, beach_width + 1):
        near_water |= water[:, np.maximum(cols - i, 0)]
        near_water |= water[np.maximum(rows - i, 0), :]
        if i < width:
            near_water[:, : width - i] |= water[:, i:]
        if i < height:
            near_water[: height - i, :] |= water[i:, :]

    beach = (kinds == TerrainKind.EARTH) & near_water
    new_kinds = kinds.copy()
    new_elevations = elevations.copy()
    new_kinds[beach] = TerrainKind.BEACH
    new_elevations[beach] = 0
    return new_kinds, new_elevations


class TerrainGenerator:
    """Generate island terrain from a :class:`NoiseField`."""

    def __init__(
        self,
        noise: NoiseField,
        *,
        workers: Optional[int] = None,
        band_rows: int = DEFAULT_BAND_ROWS,
    ):
        if workers is not None and workers <= 0:
            raise ValueError(f"workers must be positive, got {workers}")
        if band_rows <= 0:
            raise ValueError(f"band_rows must be positive, got {band_rows}")
        self.noise = noise
        self.workers = workers
        self.band_rows = band_rows

    def generate(self, width: int, height: int) -> TerrainMap:
        """Classify every cell of a ``width x height`` map.

        Raises:
            TerrainGenerationError: If either dimension is not positive or the
                sampled noise range is degenerate.
        """
        if width <= 0 or height <= 0:
            raise TerrainGenerationError(
                f"Terrain dimensions must be positive, got {width}x{height}"
            )

        bands = self._bands(height)
        log_generation(
            f"[Terrain] Sampling {width}x{height} cells (seed={self.noise.seed}, {len(bands)} bands)"
        )

        biased = np.empty((height, width), dtype=np.float64)
        kinds = np.empty((height, width), dtype=np.uint8)
        elevations = np.zeros((height, width), dtype=np.int64)

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            # list() drains the iterator so worker exceptions surface here
            list(pool.map(lambda band: self._sample_band(biased, band, width, height), bands))
            threshold = compute_threshold(biased)
            list(
                pool.map(
                    lambda band: self._classify_band(
                        biased, kinds, elevations, band, width, height, threshold
                    ),
                    bands,
                )
            )

        kinds, elevations = apply_beach_margin(kinds, elevations)
        log_generation(f"[Terrain] Land threshold {threshold:.4f}; beaches applied")

        return TerrainMap(
            width=width,
            height=height,
            kinds=kinds,
            elevations=elevations,
            biased=biased,
            threshold=threshold,
        )

    def _bands(self, height: int) -> List[Band]:
        return [
            (start, min(start + self.band_rows, height))
            for start in range(0, height, self.band_rows)
        ]

    @staticmethod
    def _center_distance(band: Band, width: int, height: int) -> np.ndarray:
        center_x, center_y = width // 2, height // 2
        xs = np.arange(width, dtype=np.float64)
        ys = np.arange(band[0], band[1], dtype=np.float64)
        return np.hypot(xs[np.newaxis, :] - center_x, ys[:, np.newaxis] - center_y)

    def _sample_band(self, biased: np.ndarray, band: Band, width: int, height: int) -> None:
        start, stop = band
        xs = np.arange(width, dtype=np.float64) / width
        ys = np.arange(start, stop, dtype=np.float64) / height
        raw = self.noise.sample_rows(xs, ys)
        distance = self._center_distance(band, width, height)
        biased[start:stop, :] = (raw - distance / width) * 0.5 + 0.5

    def _classify_band(
        self,
        biased: np.ndarray,
        kinds: np.ndarray,
        elevations: np.ndarray,
        band: Band,
        width: int,
        height: int,
        threshold: float,
    ) -> None:
        start, stop = band
        _classify_cells(
            biased[start:stop, :],
            kinds[start:stop, :],
            elevations[start:stop, :],
            start,
            width // 2,
            height // 2,
            math.sqrt(width**2 + height**2),
            threshold,
        )


@numba.njit(nogil=True)
def _classify_cells(values, kinds, elevations, row_offset, center_x, center_y, max_distance, threshold):
    """Classify one row band in place. Runs without the GIL so bands overlap on threads."""
    rows, cols = values.shape
    for r in range(rows):
        dy = row_offset + r - center_y
        for c in range(cols):
            value = values[r, c]
            if value <= threshold:
                kinds[r, c] = _WATER_CODE
                elevations[r, c] = 0
                continue

            dx = c - center_x
            distance = math.sqrt(dx * dx + dy * dy)
            elevation = (
                EDGE_ELEVATION
                + (CENTER_ELEVATION - EDGE_ELEVATION) * (1.0 - distance / max_distance)
                + value * NOISE_ELEVATION_SCALE
            )
            if elevation > MOUNTAIN_ELEVATION_THRESHOLD and value > MOUNTAIN_NOISE_THRESHOLD:
                kinds[r, c] = _MOUNTAIN_CODE
            else:
                kinds[r, c] = _EARTH_CODE
            # float -> int truncates like an unsigned cast; negatives saturate at 0
            elevations[r, c] = int(elevation) if elevation > 0.0 else 0


def generate_terrain(
    width: int,
    height: int,
    seed: int,
    *,
    workers: Optional[int] = None,
) -> TerrainMap:
    """Convenience wrapper: ``TerrainGenerator(NoiseField(seed)).generate(width, height)``."""
    return TerrainGenerator(NoiseField(seed), workers=workers).generate(width, height)
