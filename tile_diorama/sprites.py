"""Sprite generator boundary.

Sprite generators (one per plant species) live outside this package. They
are consumed through :class:`SpriteGenerator` and report what they produced
as a :data:`SpriteResult`, a tagged union with exactly four cases:

* :class:`VideoFile`: an animated render on disk.
* :class:`ImageFile`: a still PNG on disk.
* :class:`ImageBuffer`: an encoded still image in memory.
* :class:`FallbackSample`: nothing was produced; use the stored sample for
  the named entity.

:func:`resolve_sprite_image` turns any of them into a still RGBA image.
"""

import io
import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol, Union, assert_never

from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings handed to a sprite generator."""

    photo_only: bool = True
    width: int = 480
    height: int = 480
    fps: int = 25
    duration_seconds: int = 30
    seed: str = "6969696969696969"
    padding: int = 80


@dataclass(frozen=True)
class VideoFile:
    path: str


@dataclass(frozen=True)
class ImageFile:
    path: str


@dataclass(frozen=True)
class ImageBuffer:
    data: bytes


@dataclass(frozen=True)
class FallbackSample:
    entity_name: str


SpriteResult = Union[VideoFile, ImageFile, ImageBuffer, FallbackSample]


class SpriteGenerator(Protocol):
    def generate(self, config: GeneratorConfig) -> SpriteResult: ...


def sample_path(samples_dir: str, entity_name: str) -> str:
    return os.path.join(samples_dir, f"{entity_name}.png")


def load_sample(samples_dir: str, entity_name: str) -> Optional[Image.Image]:
    """Stored sample sprite for an entity, or ``None`` if there is none."""
    path = sample_path(samples_dir, entity_name)
    if not os.path.isfile(path):
        return None
    logger.info("Using stored sample %s", path)
    return load_sprite(path)


def load_sprite(path: str) -> Image.Image:
    with Image.open(path) as img:
        return img.convert("RGBA")


def resolve_sprite_image(
    result: SpriteResult, entity_name: str, samples_dir: str
) -> Optional[Image.Image]:
    """Still RGBA image for a generator result.

    Video results carry no still frame, so like :class:`FallbackSample` they
    resolve to the stored sample for ``entity_name`` (``None`` when missing).
    """
    if isinstance(result, ImageFile):
        return load_sprite(result.path)
    if isinstance(result, ImageBuffer):
        with Image.open(io.BytesIO(result.data)) as img:
            return img.convert("RGBA")
    if isinstance(result, VideoFile):
        logger.debug("%s produced a video (%s); using sample", entity_name, result.path)
        return load_sample(samples_dir, entity_name)
    if isinstance(result, FallbackSample):
        return load_sample(samples_dir, result.entity_name)
    assert_never(result)
