"""tile_diorama.components
========================

Aggregate import surface for the value objects exchanged between geometry,
anchor detection and rendering::

    from tile_diorama.components import GridConfig, GridPosition

All classes are frozen ``@dataclass`` value objects with no behavior beyond
derived properties.
"""

from .content_anchor import ContentAnchor, EMPTY_ANCHOR
from .grid_config import CanvasSize, DEFAULT_GRID_CONFIG, GridConfig, SCALE
from .grid_position import GridPosition
from .palette import DEFAULT_PALETTE, Palette
from .render_options import DrawRect, TileRenderOptions

__all__ = [
    "CanvasSize",
    "ContentAnchor",
    "DEFAULT_GRID_CONFIG",
    "DEFAULT_PALETTE",
    "DrawRect",
    "EMPTY_ANCHOR",
    "GridConfig",
    "GridPosition",
    "Palette",
    "SCALE",
    "TileRenderOptions",
]
