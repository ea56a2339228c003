"""Single tile rendering.

A tile is a grass-over-soil prism seen from the standard isometric angle.
:func:`draw_tile` paints its pieces back to front onto any
:class:`~tile_diorama.renderer.surface.DrawingSurface`:

1. right soil face, 2. left soil face,
3. right grass face, 4. left grass face,
5. top face, 6. shadow (optional), 7. grass tuft (optional).

The boundary between a grass face and the soil face below it is a sine wave
rather than a straight line. Both faces build that boundary with
:func:`wavy_edge` from the same two corner points, so their outlines agree
point for point and no gap opens between them.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from tile_diorama.components import (
    DEFAULT_PALETTE,
    ContentAnchor,
    DrawRect,
    GridConfig,
    GridPosition,
    Palette,
    TileRenderOptions,
)
from tile_diorama.renderer.surface import DrawingSurface
from tile_diorama.types import Color, Point

WAVE_FREQUENCY = 2  # complete waves along one face edge
WAVE_SEGMENTS = 16

# Sine hash constants for decoration placement.
HASH_X = 12.9898
HASH_Y = 78.233
HASH_SCALE = 43758.5453


@dataclass(frozen=True)
class Quad:
    """Face corners, clockwise from the top left."""

    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point


@dataclass(frozen=True)
class TileFaces:
    right_soil: Quad
    left_soil: Quad
    right_grass: Quad
    left_grass: Quad
    top: Tuple[Point, Point, Point, Point]


def wave_amplitude(config: GridConfig) -> float:
    return 3 * config.scale_factor


def wavy_edge(
    start: Point,
    end: Point,
    amplitude: float,
    frequency: float,
    segments: int = WAVE_SEGMENTS,
) -> List[Point]:
    """Sample ``segments + 1`` points of a sine wave laid along an edge.

    Each point sits on the straight line ``start -> end`` at parameter
    ``t = i / segments`` and is pushed along the edge normal by
    ``amplitude * sin(2 * pi * frequency * t)``. With a whole number of waves
    both endpoints stay exactly on the corners.
    """
    sx, sy = start
    dx = end[0] - sx
    dy = end[1] - sy
    length = math.hypot(dx, dy)
    if length == 0:
        return [(sx, sy)] * (segments + 1)

    # Unit normal, pointing "down" for left-to-right edges.
    perp_x = -dy / length
    perp_y = dx / length

    points: List[Point] = []
    for i in range(segments + 1):
        t = i / segments
        offset = math.sin(t * math.pi * 2 * frequency) * amplitude
        points.append((sx + dx * t + perp_x * offset, sy + dy * t + perp_y * offset))
    return points


def tile_faces(pos: GridPosition, config: GridConfig) -> TileFaces:
    """Corner geometry of the prism centred on ``pos``."""
    px, py = pos.pixel_x, pos.pixel_y
    w = config.tile_width
    h = config.tile_width / 2
    grass = config.grass_height
    soil = config.soil_height

    top_y = py - h / 2
    soil_y = top_y + grass

    return TileFaces(
        right_soil=Quad(
            (px, soil_y + h),
            (px + w / 2, soil_y + h / 2),
            (px + w / 2, soil_y + h / 2 + soil),
            (px, soil_y + h + soil),
        ),
        left_soil=Quad(
            (px - w / 2, soil_y + h / 2),
            (px, soil_y + h),
            (px, soil_y + h + soil),
            (px - w / 2, soil_y + h / 2 + soil),
        ),
        right_grass=Quad(
            (px, top_y + h),
            (px + w / 2, top_y + h / 2),
            (px + w / 2, top_y + h / 2 + grass),
            (px, top_y + h + grass),
        ),
        left_grass=Quad(
            (px - w / 2, top_y + h / 2),
            (px, top_y + h),
            (px, top_y + h + grass),
            (px - w / 2, top_y + h / 2 + grass),
        ),
        top=(
            (px, top_y),
            (px + w / 2, top_y + h / 2),
            (px, top_y + h),
            (px - w / 2, top_y + h / 2),
        ),
    )


def grass_seam(face: Quad, config: GridConfig) -> List[Point]:
    """Wavy bottom edge of a grass face, from bottom-left to bottom-right."""
    return wavy_edge(
        face.bottom_left,
        face.bottom_right,
        wave_amplitude(config),
        WAVE_FREQUENCY,
        WAVE_SEGMENTS,
    )


def soil_seam(face: Quad, config: GridConfig) -> List[Point]:
    """Wavy top edge of a soil face, from top-left to top-right."""
    return wavy_edge(
        face.top_left,
        face.top_right,
        wave_amplitude(config),
        WAVE_FREQUENCY,
        WAVE_SEGMENTS,
    )


def draw_poly(
    surface: DrawingSurface,
    points: Sequence[Point],
    color: Color,
    line_width: float,
    stroke_color: Optional[Color] = None,
) -> None:
    """Fill a closed polygon and outline it (in ``color`` by default)."""
    if not points:
        return
    surface.begin_path()
    surface.move_to(*points[0])
    for x, y in points[1:]:
        surface.line_to(x, y)
    surface.close_path()
    surface.fill(color)
    surface.stroke(stroke_color or color, line_width)


def draw_grass_side(
    surface: DrawingSurface, face: Quad, config: GridConfig, color: Color
) -> None:
    seam = grass_seam(face, config)
    # Top edge, down the right side, then the seam back towards the left.
    outline = [face.top_left, face.top_right] + seam[::-1] + [face.top_left]
    draw_poly(surface, outline, color, config.stroke_width)


def draw_soil_side(
    surface: DrawingSurface, face: Quad, config: GridConfig, color: Color
) -> None:
    seam = soil_seam(face, config)
    outline = seam + [face.bottom_right, face.bottom_left, seam[0]]
    draw_poly(surface, outline, color, config.stroke_width)


def shadow_radii(config: GridConfig, shadow_width: Optional[float]) -> Tuple[float, float]:
    """Ellipse radii for a ground shadow; a flat ellipse of 2.5:1."""
    radius_x = shadow_width / 2 if shadow_width else config.tile_width / 4.5
    return radius_x, radius_x / 2.5


def draw_shadow(
    surface: DrawingSurface,
    center_x: float,
    center_y: float,
    config: GridConfig,
    shadow_width: Optional[float] = None,
    palette: Palette = DEFAULT_PALETTE,
) -> None:
    radius_x, radius_y = shadow_radii(config, shadow_width)
    surface.fill_ellipse(center_x, center_y, radius_x, radius_y, palette.shadow)


def decoration_seed(grid_x: int, grid_y: int) -> float:
    return math.sin(grid_x * HASH_X + grid_y * HASH_Y) * HASH_SCALE


def tuft_offset(grid_x: int, grid_y: int, config: GridConfig) -> Optional[Point]:
    """Deterministic tuft placement for a tile, or ``None`` for no tuft.

    About half of the tiles get a tuft. The offsets use ``math.fmod`` so that
    negative seeds truncate towards zero like the canvas runtime did; the
    resulting patterns match pixel for pixel.
    """
    seed = decoration_seed(grid_x, grid_y)
    if seed - math.floor(seed) <= 0.5:
        return None
    s = config.scale_factor
    rand_x = math.fmod(seed * 10, 20 * s) - 10 * s
    rand_y = math.fmod(seed * 20, 10 * s) - 5 * s
    return rand_x, rand_y


def draw_tuft(
    surface: DrawingSurface,
    center_x: float,
    center_y: float,
    config: GridConfig,
    palette: Palette = DEFAULT_PALETTE,
) -> None:
    size = 6 * config.scale_factor
    surface.begin_path()
    surface.move_to(center_x - size, center_y - size / 2)
    surface.line_to(center_x, center_y + size / 2)
    surface.line_to(center_x + size, center_y - size / 2)
    surface.stroke(palette.grass_tuft, 2 * config.scale_factor)


def draw_tile(
    surface: DrawingSurface,
    pos: GridPosition,
    config: GridConfig,
    options: TileRenderOptions = TileRenderOptions(),
    palette: Palette = DEFAULT_PALETTE,
) -> None:
    """Paint one tile centred on ``pos``.

    Args:
        surface: Target surface.
        pos: Tile address and top-face centre.
        config: Tile dimensions.
        options: Shadow and decoration switches for this tile.
        palette: Face colors.
    """
    faces = tile_faces(pos, config)

    draw_soil_side(surface, faces.right_soil, config, palette.soil_side_dark)
    draw_soil_side(surface, faces.left_soil, config, palette.soil_side_light)
    draw_grass_side(surface, faces.right_grass, config, palette.grass_side_dark)
    draw_grass_side(surface, faces.left_grass, config, palette.grass_side_light)
    draw_poly(
        surface,
        faces.top,
        palette.grass_top,
        config.stroke_width,
        stroke_color=palette.grid_stroke,
    )

    if options.has_shadow:
        draw_shadow(
            surface, pos.pixel_x, pos.pixel_y, config, options.shadow_width, palette
        )

    # Tufts only decorate empty tiles; a shadow means a sprite stands here.
    if options.draw_decoration and not options.has_shadow:
        offset = tuft_offset(pos.grid_x, pos.grid_y, config)
        if offset is not None:
            draw_tuft(
                surface, pos.pixel_x + offset[0], pos.pixel_y + offset[1], config, palette
            )


def sprite_draw_rect(
    pos: GridPosition,
    image_width: float,
    image_height: float,
    anchor: ContentAnchor,
    scale: float,
) -> DrawRect:
    """Where to draw a scaled sprite so its anchor lands on the tile centre.

    The raw bounding box is shifted left by the anchor's horizontal offset
    and down by its transparent bottom padding, both scaled with the sprite.
    """
    draw_width = image_width * scale
    draw_height = image_height * scale
    return DrawRect(
        draw_x=pos.pixel_x - draw_width / 2 - anchor.x_offset * scale,
        draw_y=pos.pixel_y - draw_height + anchor.y_padding * scale,
        draw_width=draw_width,
        draw_height=draw_height,
    )
