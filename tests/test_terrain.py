"""Tests for noise sampling and island terrain generation."""

import math
import time

import numpy as np
import pytest

from islandworld.environment import (
    NoiseField,
    TerrainGenerationError,
    TerrainGenerator,
    TerrainKind,
    apply_beach_margin,
    compute_threshold,
    generate_terrain,
)
from islandworld.environment.terrain import (
    CENTER_ELEVATION,
    EDGE_ELEVATION,
    MOUNTAIN_NOISE_THRESHOLD,
    NOISE_ELEVATION_SCALE,
)


GENERATED_KINDS = {TerrainKind.EARTH, TerrainKind.MOUNTAIN, TerrainKind.BEACH, TerrainKind.WATER}


def test_noise_is_deterministic_per_seed():
    a = NoiseField(17)
    b = NoiseField(17)

    assert a.sample(0.25, 0.75) == b.sample(0.25, 0.75)
    assert -1.5 < a.sample(0.1, 0.9) < 1.5


def test_noise_rows_match_single_samples():
    field = NoiseField(5)
    xs = np.array([0.0, 0.3, 0.6])
    ys = np.array([0.1, 0.8])

    block = field.sample_rows(xs, ys)

    assert block.shape == (2, 3)
    assert block[1, 2] == pytest.approx(field.sample(0.6, 0.8))
    assert block[0, 1] == pytest.approx(field.sample(0.3, 0.1))


def test_generated_cells_have_known_kinds_and_elevations():
    terrain = generate_terrain(64, 64, seed=17)

    kinds = {TerrainKind(int(code)) for code in np.unique(terrain.kinds)}
    assert kinds <= GENERATED_KINDS
    assert TerrainKind.WATER in kinds

    no_elevation = ~np.isin(terrain.kinds, [TerrainKind.EARTH, TerrainKind.MOUNTAIN])
    assert (terrain.elevations[no_elevation] == 0).all()
    assert (terrain.elevations >= 0).all()


def test_land_is_exactly_above_threshold():
    terrain = generate_terrain(48, 48, seed=3)

    low, high = terrain.biased.min(), terrain.biased.max()
    assert terrain.threshold == pytest.approx((low + high) / 2)

    land = terrain.kinds != TerrainKind.WATER
    assert (land == (terrain.biased > terrain.threshold)).all()


def test_mountains_need_high_noise():
    terrain = generate_terrain(64, 64, seed=11)

    mountains = terrain.kinds == TerrainKind.MOUNTAIN
    assert (terrain.biased[mountains] > MOUNTAIN_NOISE_THRESHOLD).all()


def test_kind_at_reads_row_major_codes():
    terrain = generate_terrain(32, 24, seed=8)

    for x, y in [(0, 0), (31, 0), (0, 23), (16, 12), (20, 5)]:
        assert terrain.kind_at(x, y) is TerrainKind(int(terrain.kinds[y, x]))

    y, x = np.unravel_index(np.argmin(terrain.biased), terrain.biased.shape)
    assert terrain.kind_at(int(x), int(y)) is TerrainKind.WATER


def test_inland_elevation_follows_radial_formula():
    width = height = 64
    terrain = generate_terrain(width, height, seed=17)
    max_distance = math.sqrt(width**2 + height**2)

    ys, xs = np.nonzero(np.isin(terrain.kinds, [TerrainKind.EARTH, TerrainKind.MOUNTAIN]))
    assert len(xs) > 0
    for x, y in list(zip(xs, ys))[:50]:
        distance = math.sqrt(float((x - width // 2) ** 2 + (y - height // 2) ** 2))
        expected = (
            EDGE_ELEVATION
            + (CENTER_ELEVATION - EDGE_ELEVATION) * (1 - distance / max_distance)
            + terrain.biased[y, x] * NOISE_ELEVATION_SCALE
        )
        assert terrain.elevations[y, x] == max(int(expected), 0)


def test_generation_is_deterministic_across_worker_counts():
    noise = NoiseField(42)
    serial = TerrainGenerator(noise, workers=1, band_rows=64).generate(40, 40)
    banded = TerrainGenerator(noise, workers=4, band_rows=7).generate(40, 40)

    assert np.array_equal(serial.kinds, banded.kinds)
    assert np.array_equal(serial.elevations, banded.elevations)


def test_large_map_generates_in_reasonable_time():
    # Warm up the compiled noise and classification paths first
    generate_terrain(16, 16, seed=1, workers=2)

    started = time.perf_counter()
    terrain = generate_terrain(512, 512, seed=2, workers=4)
    elapsed = time.perf_counter() - started

    assert terrain.kinds.shape == (512, 512)
    assert elapsed < 30.0


def test_invalid_dimensions_rejected():
    with pytest.raises(TerrainGenerationError):
        generate_terrain(0, 10, seed=1)
    with pytest.raises(TerrainGenerationError):
        generate_terrain(10, -3, seed=1)


def test_single_cell_map_has_degenerate_range():
    with pytest.raises(TerrainGenerationError):
        generate_terrain(1, 1, seed=1)


def test_threshold_rejects_flat_and_empty_fields():
    assert compute_threshold(np.array([0.2, 0.6])) == pytest.approx(0.4)
    with pytest.raises(TerrainGenerationError):
        compute_threshold(np.array([]))
    with pytest.raises(TerrainGenerationError):
        compute_threshold(np.full((3, 3), 0.5))
    with pytest.raises(TerrainGenerationError):
        compute_threshold(np.array([0.1, np.nan]))


def test_generator_rejects_bad_worker_count():
    with pytest.raises(ValueError):
        TerrainGenerator(NoiseField(1), workers=0)


def _earth_with_water(size, water_cells):
    kinds = np.full((size, size), TerrainKind.EARTH, dtype=np.uint8)
    elevations = np.full((size, size), 6, dtype=np.int64)
    for x, y in water_cells:
        kinds[y, x] = TerrainKind.WATER
        elevations[y, x] = 0
    return kinds, elevations


def test_beach_checks_axes_up_to_eight_cells():
    kinds, elevations = _earth_with_water(20, [(10, 10)])

    new_kinds, new_elevations = apply_beach_margin(kinds, elevations)

    assert new_kinds[10, 2] == TerrainKind.BEACH   # 8 cells west of the water
    assert new_kinds[10, 1] == TerrainKind.EARTH   # 9 cells away
    assert new_kinds[18, 10] == TerrainKind.BEACH  # 8 cells south
    assert new_kinds[11, 11] == TerrainKind.EARTH  # diagonal is not checked
    assert new_elevations[10, 2] == 0
    # Inputs are not modified
    assert kinds[10, 2] == TerrainKind.EARTH


def test_beach_low_side_lookup_clamps_to_edge():
    kinds, elevations = _earth_with_water(20, [(0, 5)])

    new_kinds, _ = apply_beach_margin(kinds, elevations)

    # (3, 5) reaches the water at x=0; (12, 5) is too far even with clamping
    assert new_kinds[5, 3] == TerrainKind.BEACH
    assert new_kinds[5, 12] == TerrainKind.EARTH


def test_beach_leaves_mountains_alone():
    kinds, elevations = _earth_with_water(12, [(6, 6)])
    kinds[6, 7] = TerrainKind.MOUNTAIN

    new_kinds, _ = apply_beach_margin(kinds, elevations)

    assert new_kinds[6, 7] == TerrainKind.MOUNTAIN
    assert new_kinds[6, 8] == TerrainKind.BEACH


def test_beach_pass_is_idempotent():
    terrain = generate_terrain(64, 64, seed=23)

    again_kinds, again_elevations = apply_beach_margin(terrain.kinds, terrain.elevations)

    assert np.array_equal(again_kinds, terrain.kinds)
    assert np.array_equal(again_elevations, terrain.elevations)
