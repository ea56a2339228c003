"""Color grading presets.

Every preset exists in two equivalent forms:

* ``adjustments``: parameters for :func:`apply_to_raster`, a per-pixel
  transform over an RGBA buffer (used for still images).
* ``encoder_filter_graph``: an ffmpeg ``filter_complex`` fragment with the
  same look, for video streams encoded elsewhere.

The catalog is an immutable ``pyrsistent`` map. Lookups never fail: unknown
names resolve to the ``none`` preset, whose graph is the empty string ("skip
this stage") and whose raster transform is an exact no-op.

Raster transform order (per visible pixel, not commutative):

1. temperature shift, 2. saturation around Rec.601 luma, 3. additive
brightness, 4. contrast gain about 128, 5. flat color overlay blend,
6. round half up and clamp to ``[0, 255]``.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image
from pyrsistent import pmap
from pyrsistent.typing import PMap

from tile_diorama.renderer.surface import DrawingSurface
from tile_diorama.types import BoolArray, FilterName, FloatArray, RGBAArray


@dataclass(frozen=True)
class ColorOverlay:
    r: int
    g: int
    b: int
    opacity: float  # 0..1


@dataclass(frozen=True)
class RasterAdjustments:
    """Raster grading parameters.

    Attributes:
        brightness: -100..100, mapped to an additive -255..255.
        contrast: -100..100.
        saturation: 0..2, 1 leaves saturation unchanged.
        hue: -180..180 degrees. Descriptive only; raster grading does not
            rotate hue.
        temperature: -100 (cool) .. 100 (warm).
        color_overlay: Flat color blended over every visible pixel.
    """

    brightness: float = 0
    contrast: float = 0
    saturation: float = 1
    hue: float = 0
    temperature: Optional[float] = None
    color_overlay: Optional[ColorOverlay] = None


@dataclass(frozen=True)
class FilterPreset:
    name: FilterName
    description: str
    encoder_filter_graph: str
    adjustments: RasterAdjustments

    @property
    def is_identity(self) -> bool:
        return self.name == FilterName.NONE


FILTERS: PMap[FilterName, FilterPreset] = pmap(
    {
        FilterName.NONE: FilterPreset(
            name=FilterName.NONE,
            description="No filter applied",
            encoder_filter_graph="",
            adjustments=RasterAdjustments(),
        ),
        FilterName.WINTER: FilterPreset(
            name=FilterName.WINTER,
            description="Cool blue tones with slight desaturation",
            encoder_filter_graph=(
                "colorbalance=bs=0.15:bm=0.1:bh=0.05:rs=-0.1:gs=-0.05,"
                "eq=brightness=0.05:saturation=0.85"
            ),
            adjustments=RasterAdjustments(
                brightness=5,
                contrast=5,
                saturation=0.85,
                hue=-10,
                temperature=-30,
                color_overlay=ColorOverlay(200, 220, 255, 0.08),
            ),
        ),
        FilterName.AUTUMN: FilterPreset(
            name=FilterName.AUTUMN,
            description="Warm orange and golden tones",
            encoder_filter_graph=(
                "colorbalance=rs=0.15:rm=0.1:rh=0.05:gs=0.05:bs=-0.1:bm=-0.1,"
                "eq=saturation=1.2:contrast=1.05"
            ),
            adjustments=RasterAdjustments(
                brightness=0,
                contrast=8,
                saturation=1.2,
                hue=15,
                temperature=40,
                color_overlay=ColorOverlay(255, 180, 100, 0.06),
            ),
        ),
        FilterName.SPRING: FilterPreset(
            name=FilterName.SPRING,
            description="Fresh, vibrant greens and soft tones",
            encoder_filter_graph=(
                "colorbalance=gs=0.1:gm=0.08:rs=0.05,"
                "eq=brightness=0.08:saturation=1.15"
            ),
            adjustments=RasterAdjustments(
                brightness=8,
                contrast=3,
                saturation=1.15,
                hue=5,
                temperature=10,
                color_overlay=ColorOverlay(220, 255, 220, 0.05),
            ),
        ),
        FilterName.SUMMER: FilterPreset(
            name=FilterName.SUMMER,
            description="Bright, warm golden hour feel",
            encoder_filter_graph=(
                "colorbalance=rs=0.1:rm=0.08:gs=0.05:bs=-0.05,"
                "eq=brightness=0.1:saturation=1.1:contrast=1.05"
            ),
            adjustments=RasterAdjustments(
                brightness=10,
                contrast=5,
                saturation=1.1,
                hue=10,
                temperature=25,
                color_overlay=ColorOverlay(255, 240, 200, 0.07),
            ),
        ),
        FilterName.NIGHT: FilterPreset(
            name=FilterName.NIGHT,
            description="Dark blue moonlit atmosphere",
            encoder_filter_graph=(
                "colorbalance=bs=0.25:bm=0.2:bh=0.15:rs=-0.15:gs=-0.1,"
                "eq=brightness=-0.15:saturation=0.7:contrast=1.1"
            ),
            adjustments=RasterAdjustments(
                brightness=-15,
                contrast=10,
                saturation=0.7,
                hue=-20,
                temperature=-50,
                color_overlay=ColorOverlay(50, 80, 150, 0.15),
            ),
        ),
        FilterName.SEPIA: FilterPreset(
            name=FilterName.SEPIA,
            description="Classic sepia/vintage brown tones",
            encoder_filter_graph=(
                "colorchannelmixer=.393:.769:.189:0:.349:.686:.168:0:.272:.534:.131"
            ),
            adjustments=RasterAdjustments(
                brightness=0,
                contrast=5,
                saturation=0.3,
                hue=30,
                temperature=30,
                color_overlay=ColorOverlay(210, 180, 140, 0.2),
            ),
        ),
        FilterName.VINTAGE: FilterPreset(
            name=FilterName.VINTAGE,
            description="Faded retro film look",
            encoder_filter_graph="curves=vintage,eq=saturation=0.9:contrast=0.95",
            adjustments=RasterAdjustments(
                brightness=5,
                contrast=-5,
                saturation=0.9,
                hue=5,
                temperature=15,
                color_overlay=ColorOverlay(250, 240, 230, 0.1),
            ),
        ),
    }
)


def available_filters() -> List[FilterName]:
    return list(FilterName)


def get_filter(name: Union[FilterName, str, None]) -> FilterPreset:
    """Look up a preset by name; unknown names give the ``none`` preset."""
    try:
        key = FilterName(name)
    except ValueError:
        return FILTERS[FilterName.NONE]
    return FILTERS[key]


def encoder_filter_string(
    name: Union[FilterName, str, None],
    input_label: str = "[out]",
    output_label: str = "[filtered]",
) -> str:
    """Encoder fragment ``<input><graph><output>``, or ``""`` for no filter."""
    graph = get_filter(name).encoder_filter_graph
    if not graph:
        return ""
    return f"{input_label}{graph}{output_label}"


def encoder_filter_chain(
    filter_complex: str,
    name: Union[FilterName, str, None],
    input_label: str = "[out]",
    output_label: str = "[filtered]",
) -> Tuple[str, str]:
    """Append a preset stage to a ``;``-separated ``filter_complex`` chain.

    Returns:
        Tuple[str, str]: The new chain and the label the next stage (or the
        output mapping) should read. For the ``none`` preset the chain is
        returned unchanged together with ``input_label``.
    """
    stage = encoder_filter_string(name, input_label, output_label)
    if not stage:
        return filter_complex, input_label
    if not filter_complex:
        return stage, output_label
    return f"{filter_complex};{stage}", output_label


def _clip(channel: FloatArray, low: float = 0.0, high: float = 255.0) -> FloatArray:
    return np.minimum(high, np.maximum(low, channel))


def apply_to_raster(pixels: RGBAArray, preset: FilterPreset) -> RGBAArray:
    """Grade an ``(H, W, 4)`` uint8 RGBA buffer in place and return it.

    Fully transparent pixels and the alpha channel are left untouched.
    """
    if preset.is_identity:
        return pixels
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {pixels.shape}")

    adj = preset.adjustments
    visible: BoolArray = pixels[..., 3] != 0
    if not visible.any():
        return pixels

    rgb = pixels[visible, :3].astype(np.float64)
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    if adj.temperature:
        factor = adj.temperature / 100
        if factor > 0:
            # Warm: more red, a little more green, less blue.
            r = np.minimum(255.0, r + factor * 30)
            g = np.minimum(255.0, g + factor * 10)
            b = np.maximum(0.0, b - factor * 20)
        else:
            # Cool: less red, more blue.
            r = np.maximum(0.0, r + factor * 20)
            b = np.minimum(255.0, b - factor * 30)

    if adj.saturation != 1:
        luma = 0.299 * r + 0.587 * g + 0.114 * b
        r = luma + adj.saturation * (r - luma)
        g = luma + adj.saturation * (g - luma)
        b = luma + adj.saturation * (b - luma)

    if adj.brightness != 0:
        shift = adj.brightness * 2.55
        r = r + shift
        g = g + shift
        b = b + shift

    if adj.contrast != 0:
        gain = (259 * (adj.contrast + 255)) / (255 * (259 - adj.contrast))
        r = gain * (r - 128) + 128
        g = gain * (g - 128) + 128
        b = gain * (b - 128) + 128

    overlay = adj.color_overlay
    if overlay is not None and overlay.opacity > 0:
        keep = 1 - overlay.opacity
        r = r * keep + overlay.r * overlay.opacity
        g = g * keep + overlay.g * overlay.opacity
        b = b * keep + overlay.b * overlay.opacity

    graded = np.stack([r, g, b], axis=-1)
    pixels[visible, :3] = _clip(np.floor(graded + 0.5)).astype(np.uint8)
    return pixels


def apply_filter(
    surface: DrawingSurface, name: Union[FilterName, str, None]
) -> None:
    """Grade everything drawn on ``surface`` so far."""
    preset = get_filter(name)
    if preset.is_identity:
        return
    pixels = surface.get_image_data(0, 0, surface.width, surface.height)
    surface.put_image_data(apply_to_raster(pixels, preset), 0, 0)


def apply_filter_to_image(
    image: Image.Image, name: Union[FilterName, str, None]
) -> Image.Image:
    """Return a graded RGBA copy of ``image``."""
    pixels = np.array(image.convert("RGBA"), dtype=np.uint8)
    return Image.fromarray(apply_to_raster(pixels, get_filter(name)))
