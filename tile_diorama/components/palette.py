"""Tile color palette."""

from dataclasses import dataclass

from tile_diorama.types import Color


@dataclass(frozen=True)
class Palette:
    """Fill and stroke colors for the faces of a tile.

    ``*_light`` colors are used for the left (lit) faces and ``*_dark`` for
    the right faces.
    """

    grass_top: Color = "#E8F0F8"
    grass_side_light: Color = "#D4E2ED"
    grass_side_dark: Color = "#C5D6E3"
    grass_tuft: Color = "#B8CCDB"
    grid_stroke: Color = "#CDE0EC"
    soil_side_light: Color = "#8B9298"
    soil_side_dark: Color = "#6E757A"
    shadow: Color = (40, 60, 20, 17)


DEFAULT_PALETTE = Palette()
