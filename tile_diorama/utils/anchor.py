"""Sprite anchor detection.

Finds the visual base of a sprite so it can be stood on a tile centre even
when the generator left uneven transparent margins around it.

Heuristic: among the lowest rows that contain solid content, the row with the
darkest average color is taken as the base. Trunks and stems are usually the
darkest, most opaque band near the bottom of a plant, while lighter foliage
can hang lower than the trunk. Light-colored or trunk-less sprites may anchor
on the wrong row; callers that know better can build a ``ContentAnchor`` by
hand.
"""

import math
from typing import Union

import numpy as np
from PIL import Image

from tile_diorama.components import ContentAnchor, EMPTY_ANCHOR
from tile_diorama.types import BoolArray, FloatArray, RGBAArray

# Alpha above which a pixel counts as solid; excludes anti-aliased edges.
SOLID_ALPHA_THRESHOLD = 245
# Share of the image height, in content rows, examined from the bottom up.
SCAN_FRACTION = 0.3


def _as_rgba_array(image: Union[Image.Image, RGBAArray]) -> RGBAArray:
    if isinstance(image, Image.Image):
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return np.asarray(image, dtype=np.uint8)
    arr = np.asarray(image, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {arr.shape}")
    return arr


def row_darkness(pixels: RGBAArray) -> FloatArray:
    """Mean opacity-weighted darkness of the solid pixels in each row.

    Darkness of a pixel is ``(765 - (r + g + b)) * alpha / 255``; rows with no
    solid pixel get ``nan``.
    """
    rgb = pixels[..., :3].astype(np.float64)
    alpha = pixels[..., 3].astype(np.float64)
    solid: BoolArray = pixels[..., 3] > SOLID_ALPHA_THRESHOLD

    darkness = (765.0 - rgb.sum(axis=-1)) * (alpha / 255.0)
    totals = np.where(solid, darkness, 0.0).sum(axis=1)
    counts = solid.sum(axis=1)
    with np.errstate(invalid="ignore", divide="ignore"):
        return np.where(counts > 0, totals / np.maximum(counts, 1), np.nan)


def detect_content_anchor(image: Union[Image.Image, RGBAArray]) -> ContentAnchor:
    """Locate the anchor row of a sprite and describe it.

    Args:
        image: Sprite raster; PIL images are converted to RGBA, arrays must
            already be ``(H, W, 4)`` uint8 with straight alpha.

    Returns:
        ContentAnchor: ``y_padding`` rows below the anchor row, the anchor
        row's solid ``content_width`` and its ``x_offset`` from the image
        centre. A sprite with no solid pixel yields the zero anchor.
    """
    pixels = _as_rgba_array(image)
    height, width = pixels.shape[:2]
    if height == 0 or width == 0:
        return EMPTY_ANCHOR

    solid: BoolArray = pixels[..., 3] > SOLID_ALPHA_THRESHOLD
    content_rows = np.flatnonzero(solid.any(axis=1))[::-1]  # bottom-up
    if content_rows.size == 0:
        return EMPTY_ANCHOR

    # Stop once more than SCAN_FRACTION * height content rows were collected.
    limit = math.floor(height * SCAN_FRACTION) + 1
    candidates = content_rows[:limit]

    darkness = row_darkness(pixels[candidates])
    # argmax keeps the first maximum, i.e. the lowest row on ties.
    anchor_row = int(candidates[int(np.argmax(darkness))])

    columns = np.flatnonzero(solid[anchor_row])
    leftmost, rightmost = int(columns[0]), int(columns[-1])

    return ContentAnchor(
        x_offset=(leftmost + rightmost) / 2 - width / 2,
        y_padding=height - anchor_row - 1,
        content_width=rightmost - leftmost + 1,
    )
