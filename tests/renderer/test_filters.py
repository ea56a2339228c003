# tests/renderer/test_filters.py

from typing import Tuple

import numpy as np
import pytest
from PIL import Image

from tile_diorama.renderer.filters import (
    FILTERS,
    ColorOverlay,
    FilterPreset,
    RasterAdjustments,
    apply_filter,
    apply_filter_to_image,
    apply_to_raster,
    available_filters,
    encoder_filter_chain,
    encoder_filter_string,
    get_filter,
)
from tile_diorama.renderer.surface import PillowSurface
from tile_diorama.types import FilterName
from tests.test_utils import pixel


def _preset(**adjustments) -> FilterPreset:
    return FilterPreset(
        name=FilterName.SUMMER,
        description="test",
        encoder_filter_graph="eq",
        adjustments=RasterAdjustments(**adjustments),
    )


def _grade(rgba: Tuple[int, int, int, int], preset: FilterPreset) -> Tuple[int, ...]:
    pixels = np.array([[rgba]], dtype=np.uint8)
    return tuple(int(c) for c in apply_to_raster(pixels, preset)[0, 0])


# --- Catalog ---


def test_catalog_lists_every_preset() -> None:
    names = available_filters()
    assert names == [
        FilterName.NONE,
        FilterName.WINTER,
        FilterName.AUTUMN,
        FilterName.SPRING,
        FilterName.SUMMER,
        FilterName.NIGHT,
        FilterName.SEPIA,
        FilterName.VINTAGE,
    ]
    assert set(FILTERS.keys()) == set(names)
    for name in names:
        assert FILTERS[name].name == name


@pytest.mark.parametrize("name", ["night", FilterName.NIGHT])
def test_get_filter_accepts_strings_and_enum(name) -> None:
    preset = get_filter(name)
    assert preset.name == FilterName.NIGHT
    assert preset.adjustments.temperature == -50
    assert preset.adjustments.color_overlay == ColorOverlay(50, 80, 150, 0.15)


@pytest.mark.parametrize("name", ["bogus", "", None, "Night"])
def test_unknown_name_falls_back_to_none(name) -> None:
    assert get_filter(name) is FILTERS[FilterName.NONE]


def test_encoder_filter_string() -> None:
    assert encoder_filter_string("vintage") == (
        "[out]curves=vintage,eq=saturation=0.9:contrast=0.95[filtered]"
    )
    assert encoder_filter_string("sepia", "[v0]", "[v1]").startswith(
        "[v0]colorchannelmixer=.393"
    )
    assert encoder_filter_string("none") == ""
    assert encoder_filter_string("bogus") == ""


def test_encoder_filter_chain() -> None:
    chain, label = encoder_filter_chain("[0:v]scale=480:480[out]", "winter")
    assert chain == (
        "[0:v]scale=480:480[out];"
        "[out]colorbalance=bs=0.15:bm=0.1:bh=0.05:rs=-0.1:gs=-0.05,"
        "eq=brightness=0.05:saturation=0.85[filtered]"
    )
    assert label == "[filtered]"


def test_encoder_filter_chain_skips_none() -> None:
    assert encoder_filter_chain("[0:v]null[out]", "none") == ("[0:v]null[out]", "[out]")
    assert encoder_filter_chain("", "night")[0].startswith("[out]colorbalance")


# --- Raster grading ---


def test_brightness_rounds_half_up() -> None:
    # 101 + 25.5 = 126.5
    assert _grade((101, 101, 101, 255), _preset(brightness=10)) == (127, 127, 127, 255)


def test_brightness_applies_before_contrast() -> None:
    assert _grade((100, 100, 100, 255), _preset(brightness=10, contrast=50))[:3] == (
        124,
        124,
        124,
    )


@pytest.mark.parametrize(
    "temperature, expected",
    [(50, (115, 105, 90)), (-50, (90, 100, 115))],
)
def test_temperature_shift(temperature: float, expected: Tuple[int, int, int]) -> None:
    assert _grade((100, 100, 100, 255), _preset(temperature=temperature))[:3] == expected


def test_zero_saturation_gives_luma() -> None:
    assert _grade((255, 0, 0, 255), _preset(saturation=0))[:3] == (76, 76, 76)


def test_color_overlay_blend() -> None:
    overlay = ColorOverlay(200, 0, 0, 0.5)
    assert _grade((100, 100, 100, 255), _preset(color_overlay=overlay))[:3] == (
        150,
        50,
        50,
    )


def test_output_is_clamped() -> None:
    assert _grade((255, 255, 255, 255), get_filter("summer")) == (255, 255, 255, 255)
    assert _grade((0, 0, 0, 255), _preset(brightness=-100))[:3] == (0, 0, 0)


def test_night_preset_on_mid_grey() -> None:
    r, g, b, a = _grade((128, 128, 128, 255), get_filter("night"))
    assert abs(r - 74) <= 1
    assert abs(g - 85) <= 1
    assert abs(b - 105) <= 1
    assert a == 255


def test_hue_is_not_applied() -> None:
    assert _grade((10, 120, 240, 255), _preset(hue=90)) == (10, 120, 240, 255)


def test_transparent_pixels_and_alpha_untouched() -> None:
    pixels = np.array(
        [[(10, 20, 30, 0), (100, 100, 100, 128)]], dtype=np.uint8
    )
    apply_to_raster(pixels, get_filter("sepia"))
    assert tuple(pixels[0, 0]) == (10, 20, 30, 0)
    assert pixels[0, 1, 3] == 128
    assert tuple(pixels[0, 1, :3]) != (100, 100, 100)


def test_identity_preset_is_exact_no_op() -> None:
    rng = np.random.default_rng(3)
    pixels = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
    before = pixels.copy()
    apply_to_raster(pixels, get_filter("none"))
    assert np.array_equal(pixels, before)


def test_bad_shape_rejected() -> None:
    with pytest.raises(ValueError):
        apply_to_raster(np.zeros((2, 2, 3), dtype=np.uint8), get_filter("night"))


# --- Surfaces and images ---


def test_apply_filter_grades_surface() -> None:
    surface = PillowSurface.new(2, 2, background=(100, 100, 100, 255))
    apply_filter(surface, "winter")
    assert pixel(surface.image, 0, 0) != (100, 100, 100, 255)
    assert pixel(surface.image, 1, 1)[3] == 255

    untouched = PillowSurface.new(2, 2, background=(100, 100, 100, 255))
    apply_filter(untouched, "nonsense")
    assert pixel(untouched.image, 0, 0) == (100, 100, 100, 255)


def test_apply_filter_to_image_returns_copy() -> None:
    image = Image.new("RGB", (3, 3), (100, 100, 100))
    graded = apply_filter_to_image(image, "autumn")
    assert graded.mode == "RGBA"
    assert image.getpixel((0, 0)) == (100, 100, 100)
    assert graded.getpixel((0, 0)) != (100, 100, 100, 255)
