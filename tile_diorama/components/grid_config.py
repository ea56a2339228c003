"""Grid configuration component.

``GridConfig`` is the single source of tile dimensions for every geometry and
render call. It is a frozen value object constructed once and passed through
explicitly; nothing in the package keeps a module-level mutable copy.

All margins are expressed in multiples of ``scale_factor`` so that a sprite
sheet rendered at a different resolution keeps the same proportions.
"""

import math
from dataclasses import dataclass


SCALE = 4


@dataclass(frozen=True)
class GridConfig:
    """Tile dimensions in pixels.

    Attributes:
        tile_width: Width of a tile's top diamond (its height is half of it).
        grass_height: Thickness of the grass band below the top face.
        soil_height: Thickness of the soil block below the grass band.
        scale_factor: Resolution multiplier applied to margins, strokes and
            decorations.
    """

    tile_width: float = 100 * SCALE
    grass_height: float = 15 * SCALE
    soil_height: float = 40 * SCALE
    scale_factor: float = SCALE

    def __post_init__(self) -> None:
        for field in self.__dataclass_fields__:
            value = getattr(self, field)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(
                    f"GridConfig.{field} must be positive and finite, got {value!r}"
                )

    @property
    def horizontal_margin(self) -> float:
        """Extra canvas width beyond the diamond's horizontal extent."""
        return 100 * self.scale_factor

    @property
    def vertical_margin(self) -> float:
        """Extra canvas height reserved for sprites and shadow bleed."""
        return 200 * self.scale_factor

    @property
    def top_margin(self) -> float:
        """Distance from the canvas top to the back corner of the grid."""
        return 150 * self.scale_factor

    @property
    def stroke_width(self) -> float:
        return 1 * self.scale_factor


@dataclass(frozen=True)
class CanvasSize:
    """Pixel dimensions of a rendered canvas."""

    width: int
    height: int


DEFAULT_GRID_CONFIG = GridConfig()
