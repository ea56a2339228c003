"""Per-draw rendering options and sprite draw rectangles."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TileRenderOptions:
    """Options for a single :func:`tile_diorama.renderer.tile.draw_tile` call.

    Attributes:
        has_shadow: Draw a ground shadow (the tile carries a sprite).
        shadow_width: Shadow diameter; a default size is used when ``None``.
        draw_decoration: Allow a grass tuft on unoccupied tiles.
    """

    has_shadow: bool = False
    shadow_width: Optional[float] = None
    draw_decoration: bool = False


@dataclass(frozen=True)
class DrawRect:
    """Destination rectangle for a scaled sprite."""

    draw_x: float
    draw_y: float
    draw_width: float
    draw_height: float
