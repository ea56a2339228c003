"""Drawing surface abstraction.

Tile rendering is written against :class:`DrawingSurface`, a small
canvas-style interface: build a path with ``move_to`` / ``line_to``, then
``fill`` and/or ``stroke`` it; fill ellipses; read and write raw RGBA pixel
rectangles. :class:`PillowSurface` implements it on top of a Pillow RGBA
image with ``ImageDraw``; translucent fills (shadows) are composited over
what is already drawn, opaque ones replace it.
"""

from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from tile_diorama.types import Color, Point, RGBAArray

RGBA = Tuple[int, int, int, int]


def to_rgba(color: Color) -> RGBA:
    """Normalize a color string or RGB(A) tuple to an RGBA tuple."""
    if isinstance(color, str):
        r, g, b, a = ImageColor.getcolor(color, "RGBA")  # type: ignore[misc]
        return (r, g, b, a)
    if len(color) == 3:
        return (color[0], color[1], color[2], 255)
    return (color[0], color[1], color[2], color[3])  # type: ignore[misc]


@runtime_checkable
class DrawingSurface(Protocol):
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def close_path(self) -> None: ...

    def fill(self, color: Color) -> None: ...

    def stroke(self, color: Color, line_width: float = 1.0) -> None: ...

    def fill_ellipse(
        self, cx: float, cy: float, rx: float, ry: float, color: Color
    ) -> None: ...

    def get_image_data(self, x: int, y: int, width: int, height: int) -> RGBAArray: ...

    def put_image_data(self, data: RGBAArray, x: int, y: int) -> None: ...


class _SubPath:
    __slots__ = ("points", "closed")

    def __init__(self, start: Point) -> None:
        self.points: List[Point] = [start]
        self.closed = False


class PillowSurface:
    """``DrawingSurface`` backed by a ``PIL.Image.Image`` in RGBA mode."""

    image: Image.Image

    def __init__(self, image: Image.Image) -> None:
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        self.image = image
        self._draw = ImageDraw.Draw(self.image, "RGBA")
        self._subpaths: List[_SubPath] = []

    @classmethod
    def new(
        cls, width: int, height: int, background: Color = (0, 0, 0, 0)
    ) -> "PillowSurface":
        return cls(Image.new("RGBA", (width, height), background))

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    # --- Path construction ---

    def begin_path(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append(_SubPath((x, y)))

    def line_to(self, x: float, y: float) -> None:
        current = self._current()
        if current is None:
            # A line without a current point starts a new subpath there.
            self.move_to(x, y)
            return
        current.points.append((x, y))

    def close_path(self) -> None:
        current = self._current()
        if current is not None and not current.closed:
            current.closed = True
            # Drawing continues from the subpath's start point.
            self._subpaths.append(_SubPath(current.points[0]))

    def _current(self) -> Optional[_SubPath]:
        return self._subpaths[-1] if self._subpaths else None

    # --- Painting ---

    def _paint(
        self, color: Color, paint: Callable[[ImageDraw.ImageDraw, RGBA], None]
    ) -> None:
        rgba = to_rgba(color)
        if rgba[3] == 255:
            paint(self._draw, rgba)
            return
        # ImageDraw replaces RGBA pixels instead of blending them, so
        # translucent shapes go through a layer composited "over" the image.
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        paint(ImageDraw.Draw(layer, "RGBA"), rgba)
        bbox = layer.getbbox()
        if bbox is not None:
            self.image.alpha_composite(layer.crop(bbox), dest=bbox[:2])

    def fill(self, color: Color) -> None:
        polygons = [sp.points for sp in self._subpaths if len(sp.points) >= 3]

        def paint(draw: ImageDraw.ImageDraw, rgba: RGBA) -> None:
            for points in polygons:
                draw.polygon(points, fill=rgba)

        if polygons:
            self._paint(color, paint)

    def stroke(self, color: Color, line_width: float = 1.0) -> None:
        width = max(1, int(round(line_width)))
        lines: List[List[Point]] = []
        for subpath in self._subpaths:
            points = list(subpath.points)
            if len(points) < 2:
                continue
            if subpath.closed:
                points.append(points[0])
            lines.append(points)

        def paint(draw: ImageDraw.ImageDraw, rgba: RGBA) -> None:
            for points in lines:
                draw.line(points, fill=rgba, width=width, joint="curve")

        if lines:
            self._paint(color, paint)

    def fill_ellipse(
        self, cx: float, cy: float, rx: float, ry: float, color: Color
    ) -> None:
        if rx <= 0 or ry <= 0:
            return

        def paint(draw: ImageDraw.ImageDraw, rgba: RGBA) -> None:
            draw.ellipse((cx - rx, cy - ry, cx + rx, cy + ry), fill=rgba)

        self._paint(color, paint)

    # --- Pixel access ---

    def get_image_data(self, x: int, y: int, width: int, height: int) -> RGBAArray:
        """Copy of the pixels in the rectangle; outside areas read as transparent."""
        region = self.image.crop((x, y, x + width, y + height))
        return np.array(region, dtype=np.uint8)

    def put_image_data(self, data: RGBAArray, x: int, y: int) -> None:
        """Overwrite pixels (no blending) with ``data`` at ``(x, y)``."""
        patch = Image.fromarray(np.ascontiguousarray(data, dtype=np.uint8))
        if patch.mode != "RGBA":
            raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {data.shape}")
        self.image.paste(patch, (x, y))
