"""Full-canvas diorama composition.

:func:`render_diorama` builds a transparent canvas sized for the grid and
walks the tiles in paint order. For each tile it:

1. draws the tile, with a ground shadow when sprites stand on it and a
   grass tuft otherwise,
2. composites the tile's sprites over it, each scaled and shifted so its
   detected anchor lands on the tile centre.

Tiles further forward are painted later and cover whatever overhangs onto
them. The selected color grading preset is applied to the finished canvas.
"""

import logging
import os
import weakref
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from tile_diorama.components import (
    DEFAULT_GRID_CONFIG,
    DEFAULT_PALETTE,
    ContentAnchor,
    DrawRect,
    GridConfig,
    GridPosition,
    Palette,
    TileRenderOptions,
)
from tile_diorama.renderer.filters import apply_filter
from tile_diorama.renderer.surface import DrawingSurface, PillowSurface
from tile_diorama.renderer.tile import draw_tile, sprite_draw_rect
from tile_diorama.types import FilterName
from tile_diorama.utils.anchor import detect_content_anchor
from tile_diorama.utils.grid import (
    canvas_dimensions,
    is_in_grid,
    paint_order,
    round_half_up,
    tile_positions,
)

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 3
DEFAULT_SPRITE_SCALE = 0.8

# Keyed by id(). Images are held weakly; an entry is dropped when its image
# is garbage collected, before the id can be reused.
AnchorCache = Dict[int, Tuple["weakref.ref[Image.Image]", ContentAnchor]]


@dataclass(frozen=True)
class SpritePlacement:
    """A sprite standing on tile ``(grid_x, grid_y)``."""

    image: Image.Image
    grid_x: int = 0
    grid_y: int = 0
    scale: float = DEFAULT_SPRITE_SCALE


def sprite_anchor(image: Image.Image, cache: AnchorCache) -> ContentAnchor:
    """Anchor for ``image``, detected once per image object."""
    key = id(image)
    cached = cache.get(key)
    if cached is not None and cached[0]() is image:
        return cached[1]
    anchor = detect_content_anchor(image)

    def evict(_ref: "weakref.ref[Image.Image]") -> None:
        cache.pop(key, None)

    cache[key] = (weakref.ref(image, evict), anchor)
    return anchor


def composite_sprite(
    surface: DrawingSurface, sprite: Image.Image, rect: DrawRect
) -> None:
    """Alpha-composite ``sprite`` scaled into ``rect`` over the surface.

    The rectangle is snapped to whole pixels and clipped to the surface.
    """
    width = max(1, round_half_up(rect.draw_width))
    height = max(1, round_half_up(rect.draw_height))
    x0 = round_half_up(rect.draw_x)
    y0 = round_half_up(rect.draw_y)

    left, top = max(0, x0), max(0, y0)
    right = min(surface.width, x0 + width)
    bottom = min(surface.height, y0 + height)
    if right <= left or bottom <= top:
        return

    scaled = sprite.convert("RGBA")
    if scaled.size != (width, height):
        scaled = scaled.resize((width, height), Image.Resampling.LANCZOS)
    scaled = scaled.crop((left - x0, top - y0, right - x0, bottom - y0))

    region = Image.fromarray(surface.get_image_data(left, top, right - left, bottom - top))
    region.alpha_composite(scaled)
    surface.put_image_data(np.asarray(region, dtype=np.uint8), left, top)


def _placements_by_tile(
    placements: Sequence[SpritePlacement], grid_size: int
) -> Dict[Tuple[int, int], List[SpritePlacement]]:
    by_tile: Dict[Tuple[int, int], List[SpritePlacement]] = {}
    for placement in placements:
        if not is_in_grid(grid_size, placement.grid_x, placement.grid_y):
            raise ValueError(
                f"Sprite at ({placement.grid_x}, {placement.grid_y}) is outside "
                f"a {grid_size}x{grid_size} grid"
            )
        by_tile.setdefault((placement.grid_x, placement.grid_y), []).append(placement)
    return by_tile


def shadow_width_for(
    placements: Sequence[SpritePlacement], cache: AnchorCache
) -> Optional[float]:
    """Widest scaled base among the sprites on a tile (``None``: default size)."""
    widths = [
        sprite_anchor(p.image, cache).content_width * p.scale for p in placements
    ]
    widest = max(widths, default=0)
    return widest or None


def draw_grid(
    surface: DrawingSurface,
    positions: Sequence[GridPosition],
    placements: Sequence[SpritePlacement],
    grid_size: int,
    config: GridConfig,
    draw_decoration: bool = True,
    palette: Palette = DEFAULT_PALETTE,
    anchor_cache: Optional[AnchorCache] = None,
) -> None:
    """Paint tiles back to front, standing each sprite on its tile.

    A sprite is composited right after its own tile, so tiles further
    forward are painted over it where they overlap.
    """
    cache: AnchorCache = {} if anchor_cache is None else anchor_cache
    by_tile = _placements_by_tile(placements, grid_size)

    for pos in paint_order(positions):
        occupants = by_tile.get((pos.grid_x, pos.grid_y), [])
        options = TileRenderOptions(
            has_shadow=bool(occupants),
            shadow_width=shadow_width_for(occupants, cache) if occupants else None,
            draw_decoration=draw_decoration,
        )
        draw_tile(surface, pos, config, options, palette)

        for placement in occupants:
            anchor = sprite_anchor(placement.image, cache)
            rect = sprite_draw_rect(
                pos,
                placement.image.width,
                placement.image.height,
                anchor,
                placement.scale,
            )
            logger.debug(
                "Sprite on (%d, %d): anchor=%s rect=%s",
                pos.grid_x,
                pos.grid_y,
                anchor,
                rect,
            )
            composite_sprite(surface, placement.image, rect)


def render_diorama(
    placements: Sequence[SpritePlacement] = (),
    grid_size: int = DEFAULT_GRID_SIZE,
    config: GridConfig = DEFAULT_GRID_CONFIG,
    filter_name: Union[FilterName, str, None] = FilterName.NONE,
    draw_decoration: bool = True,
    palette: Palette = DEFAULT_PALETTE,
    anchor_cache: Optional[AnchorCache] = None,
) -> Image.Image:
    """
    Renders a grid of tiles with sprites standing on them as a PIL Image,
    then grades it with the named filter.
    """
    size = canvas_dimensions(grid_size, config)
    surface = PillowSurface.new(size.width, size.height)
    positions = tile_positions(grid_size, size.width, config)
    logger.debug(
        "Rendering %dx%d grid on %dx%d canvas with %d sprite(s)",
        grid_size,
        grid_size,
        size.width,
        size.height,
        len(placements),
    )

    draw_grid(
        surface,
        positions,
        placements,
        grid_size,
        config,
        draw_decoration=draw_decoration,
        palette=palette,
        anchor_cache=anchor_cache,
    )
    apply_filter(surface, filter_name)
    return surface.image


def save_diorama(image: Image.Image, path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    image.save(path, format="PNG")
    logger.info("Saved %s", path)
    return path


class DioramaRenderer:
    grid_size: int
    config: GridConfig
    filter_name: Union[FilterName, str, None]
    draw_decoration: bool
    palette: Palette

    def __init__(
        self,
        grid_size: int = DEFAULT_GRID_SIZE,
        config: GridConfig = DEFAULT_GRID_CONFIG,
        filter_name: Union[FilterName, str, None] = FilterName.NONE,
        draw_decoration: bool = True,
        palette: Palette = DEFAULT_PALETTE,
    ):
        self.grid_size = grid_size
        self.config = config
        self.filter_name = filter_name
        self.draw_decoration = draw_decoration
        self.palette = palette
        self._anchor_cache: AnchorCache = {}

    def render(self, placements: Sequence[SpritePlacement] = ()) -> Image.Image:
        return render_diorama(
            placements,
            grid_size=self.grid_size,
            config=self.config,
            filter_name=self.filter_name,
            draw_decoration=self.draw_decoration,
            palette=self.palette,
            anchor_cache=self._anchor_cache,
        )

    def render_to_file(
        self, placements: Sequence[SpritePlacement], path: str
    ) -> str:
        return save_diorama(self.render(placements), path)
