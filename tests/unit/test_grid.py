# tests/unit/test_grid.py

import numpy as np
import pytest
from dataclasses import FrozenInstanceError
from typing import Tuple

from tile_diorama.components import (
    DEFAULT_GRID_CONFIG,
    CanvasSize,
    GridConfig,
    GridPosition,
)
from tile_diorama.utils.grid import (
    canvas_dimensions,
    is_in_grid,
    round_half_up,
    tile_positions,
)


CONFIG = GridConfig(tile_width=400, grass_height=60, soil_height=160, scale_factor=4)


def test_default_config_matches_production_constants() -> None:
    assert DEFAULT_GRID_CONFIG == CONFIG
    assert CONFIG.horizontal_margin == 400
    assert CONFIG.vertical_margin == 800
    assert CONFIG.top_margin == 600


@pytest.mark.parametrize(
    "grid_size, expected",
    [
        # width 1600 vs height 1840 -> square of the larger
        (3, 1840),
        # width 800 vs height 1440
        (1, 1440),
        # width 1200 vs height 1640
        (2, 1640),
        # width 4400 vs height 3240
        (10, 4400),
    ],
)
def test_canvas_dimensions_square(grid_size: int, expected: int) -> None:
    assert canvas_dimensions(grid_size, CONFIG) == CanvasSize(expected, expected)


def test_single_tile_position() -> None:
    assert tile_positions(1, 1840, CONFIG) == [GridPosition(0, 0, 920, 700)]


def test_two_by_two_positions_row_major() -> None:
    positions = tile_positions(2, 1640, CONFIG)
    assert positions == [
        GridPosition(0, 0, 820, 700),
        GridPosition(1, 0, 1020, 800),
        GridPosition(0, 1, 620, 800),
        GridPosition(1, 1, 820, 900),
    ]


def test_positions_are_deterministic() -> None:
    size = canvas_dimensions(4, CONFIG)
    assert canvas_dimensions(4, CONFIG) == size
    assert tile_positions(4, size.width, CONFIG) == tile_positions(
        4, size.width, CONFIG
    )


@pytest.mark.parametrize("grid_size", [1, 2, 5, 8])
def test_pixel_centres_are_unique_per_address(grid_size: int) -> None:
    size = canvas_dimensions(grid_size, CONFIG)
    positions = tile_positions(grid_size, size.width, CONFIG)
    assert len(positions) == grid_size * grid_size
    addresses = {(p.grid_x, p.grid_y) for p in positions}
    centres = {(p.pixel_x, p.pixel_y) for p in positions}
    assert len(addresses) == grid_size * grid_size
    assert len(centres) == grid_size * grid_size


def test_positions_round_half_up() -> None:
    config = GridConfig(tile_width=2, grass_height=1, soil_height=1, scale_factor=1)
    # start_x = 2.5, pixel_y = 150 + 0 + 0.5
    assert tile_positions(1, 5, config) == [GridPosition(0, 0, 3, 151)]


@pytest.mark.parametrize(
    "value, expected",
    [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (-1.5, -1), (2.49, 2)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


@pytest.mark.parametrize("grid_size", [0, -3, 2.5, True])
def test_invalid_grid_size_rejected(grid_size: int) -> None:
    with pytest.raises(ValueError):
        canvas_dimensions(grid_size, CONFIG)
    with pytest.raises(ValueError):
        tile_positions(grid_size, 1000, CONFIG)


@pytest.mark.parametrize(
    "field, value",
    [
        ("tile_width", 0),
        ("grass_height", -1),
        ("soil_height", 0),
        ("scale_factor", -4),
        ("tile_width", float("nan")),
        ("grass_height", float("inf")),
        ("soil_height", float("-inf")),
    ],
)
def test_non_positive_config_rejected(field: str, value: float) -> None:
    with pytest.raises(ValueError, match=field):
        GridConfig(**{field: value})


def test_config_is_frozen() -> None:
    with pytest.raises(FrozenInstanceError):
        CONFIG.tile_width = 10  # type: ignore[misc]


@pytest.mark.parametrize(
    "address, inside",
    [((0, 0), True), ((2, 2), True), ((3, 0), False), ((0, -1), False)],
)
def test_is_in_grid(address: Tuple[int, int], inside: bool) -> None:
    assert is_in_grid(3, *address) is inside


def test_numpy_integer_grid_size_accepted() -> None:
    assert canvas_dimensions(np.int64(2), CONFIG) == CanvasSize(1640, 1640)
    assert tile_positions(np.int32(2), 1640, CONFIG) == tile_positions(2, 1640, CONFIG)
