"""Grid position component.

Pairs a logical tile address with the screen-space centre of that tile's top
face. Instances are produced in batches by
:func:`tile_diorama.utils.grid.tile_positions` and never modified afterwards.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GridPosition:
    """Tile address plus projected pixel centre.

    Attributes:
        grid_x: Column index along the right-descending diamond axis.
        grid_y: Row index along the left-descending diamond axis.
        pixel_x: Horizontal centre of the top face on the canvas.
        pixel_y: Vertical centre of the top face on the canvas.
    """

    grid_x: int
    grid_y: int
    pixel_x: int
    pixel_y: int

    @property
    def depth(self) -> int:
        """Painter's key: tiles with a larger depth sit in front."""
        return self.grid_x + self.grid_y
