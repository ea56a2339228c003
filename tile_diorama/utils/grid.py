"""Isometric grid math.

Pure functions mapping a square ``grid_size x grid_size`` grid of tiles onto a
diamond lattice. Every function takes the :class:`GridConfig` explicitly;
results are deterministic for a given ``(grid_size, config)`` pair.

Projection (tile top-face centre)::

    iso_x = (x - y) * tile_width / 2
    iso_y = (x + y) * tile_width / 4
"""

import math
import numbers
from typing import Iterable, List

from tile_diorama.components import CanvasSize, GridConfig, GridPosition


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up (canvas semantics)."""
    return int(math.floor(value + 0.5))


def _check_grid_size(grid_size: int) -> None:
    if isinstance(grid_size, bool) or not isinstance(grid_size, numbers.Integral):
        raise ValueError(f"grid_size must be an integer, got {grid_size!r}")
    if grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {grid_size}")


def canvas_dimensions(grid_size: int, config: GridConfig) -> CanvasSize:
    """Smallest square canvas holding the whole diamond plus margins.

    The horizontal extent is ``grid_size`` tile widths, the vertical extent
    is the diamond's height plus two full blocks (grass and soil) of depth.
    Taking the larger of the two keeps the canvas square without clipping.
    """
    _check_grid_size(grid_size)
    half_width = config.tile_width / 2
    width = (grid_size * 2) * half_width + config.horizontal_margin
    height = (
        grid_size * half_width
        + (config.soil_height + config.grass_height) * 2
        + config.vertical_margin
    )
    side = int(math.ceil(max(width, height)))
    return CanvasSize(width=side, height=side)


def tile_positions(
    grid_size: int, canvas_width: float, config: GridConfig
) -> List[GridPosition]:
    """Project every ``(x, y)`` of the grid to its top-face centre.

    Positions are produced in row-major order (``y`` outer, ``x`` inner);
    use :func:`paint_order` before drawing.
    """
    _check_grid_size(grid_size)
    start_x = canvas_width / 2
    start_y = config.top_margin
    positions: List[GridPosition] = []
    for y in range(grid_size):
        for x in range(grid_size):
            iso_x = (x - y) * (config.tile_width / 2)
            iso_y = (x + y) * (config.tile_width / 4)
            positions.append(
                GridPosition(
                    grid_x=x,
                    grid_y=y,
                    pixel_x=round_half_up(start_x + iso_x),
                    pixel_y=round_half_up(start_y + iso_y + config.tile_width / 4),
                )
            )
    return positions


def paint_order(positions: Iterable[GridPosition]) -> List[GridPosition]:
    """Back-to-front order for the painter's algorithm.

    Stable sort on ``grid_x + grid_y``. A tile's footprint only overlaps its
    diagonal neighbours, which always sit on a different anti-diagonal, so a
    single key is enough; tiles sharing a key keep their input order.
    """
    return sorted(positions, key=lambda pos: pos.depth)


def is_in_grid(grid_size: int, grid_x: int, grid_y: int) -> bool:
    """Return True if the logical address lies inside the grid."""
    return 0 <= grid_x < grid_size and 0 <= grid_y < grid_size
