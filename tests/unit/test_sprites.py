# tests/unit/test_sprites.py

import io
import os

import pytest
from PIL import Image

from tile_diorama.sprites import (
    FallbackSample,
    GeneratorConfig,
    ImageBuffer,
    ImageFile,
    VideoFile,
    load_sample,
    resolve_sprite_image,
    sample_path,
)
from tests.test_utils import make_sprite, pixel


@pytest.fixture
def samples_dir(tmp_path) -> str:
    path = str(tmp_path / "samples")
    os.makedirs(path)
    make_sprite(6, 6, (0, 5, 0, 5), color=(0, 200, 0, 255)).save(
        sample_path(path, "fern")
    )
    return path


def _png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def test_generator_config_defaults() -> None:
    config = GeneratorConfig()
    assert config.photo_only
    assert (config.width, config.height, config.fps) == (480, 480, 25)
    assert config.seed == "6969696969696969"


def test_image_file_result(tmp_path, samples_dir: str) -> None:
    path = str(tmp_path / "oak.png")
    Image.new("RGB", (3, 2), (9, 9, 9)).save(path)
    image = resolve_sprite_image(ImageFile(path), "oak", samples_dir)
    assert image is not None
    assert image.mode == "RGBA"
    assert pixel(image, 0, 0) == (9, 9, 9, 255)


def test_image_buffer_result(samples_dir: str) -> None:
    data = _png_bytes(make_sprite(4, 4, (1, 2, 1, 2)))
    image = resolve_sprite_image(ImageBuffer(data), "oak", samples_dir)
    assert image is not None
    assert image.size == (4, 4)
    assert pixel(image, 1, 1) == (60, 40, 20, 255)
    assert pixel(image, 0, 0)[3] == 0


def test_fallback_sample_result(samples_dir: str) -> None:
    image = resolve_sprite_image(FallbackSample("fern"), "ignored", samples_dir)
    assert image is not None
    assert pixel(image, 3, 3) == (0, 200, 0, 255)


def test_video_result_uses_sample(samples_dir: str) -> None:
    image = resolve_sprite_image(VideoFile("/nowhere/fern.mp4"), "fern", samples_dir)
    assert image is not None
    assert image.size == (6, 6)


def test_missing_sample_resolves_to_none(samples_dir: str) -> None:
    assert load_sample(samples_dir, "cactus") is None
    assert resolve_sprite_image(FallbackSample("cactus"), "cactus", samples_dir) is None


def test_missing_image_file_raises(samples_dir: str) -> None:
    with pytest.raises(FileNotFoundError):
        resolve_sprite_image(ImageFile("/nowhere/oak.png"), "oak", samples_dir)
