"""Seeded coherent-noise field.

Wraps OpenSimplex 2-D gradient noise behind a small, stateless surface. The
generator samples whole row bands at once through ``sample_rows`` while callers
that need a single value use ``sample``.
"""

from __future__ import annotations

import numpy as np
from opensimplex import OpenSimplex


class NoiseField:
    """Deterministic 2-D noise in roughly [-1, 1] for a fixed seed.

    Adjacent coordinates yield similar values. The field holds no state beyond
    the permutation table derived from the seed, so it is safe to share between
    generation threads.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._simplex = OpenSimplex(seed=self.seed)

    def sample(self, x: float, y: float) -> float:
        return float(self._simplex.noise2(x, y))

    def sample_rows(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Return a ``[len(ys), len(xs)]`` block of samples (row-major, y first)."""
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        return self._simplex.noise2array(xs, ys)

    def __repr__(self) -> str:
        return f"NoiseField(seed={self.seed})"
