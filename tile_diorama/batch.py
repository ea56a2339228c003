"""Per-entity batch rendering.

:class:`GridBatch` asks each registered sprite generator for a sprite, keeps
a copy of it and renders it standing on a single tile. A failing entity is
logged and skipped (falling back to its stored sample when one exists); it
never aborts the rest of the batch.

Output layout under ``output_dir``::

    <entity>.png        the sprite itself
    <entity>_grid.png   the sprite on a one-tile diorama
"""

import logging
import os
from typing import Dict, Mapping, Optional

from PIL import Image
from pyrsistent import pmap
from pyrsistent.typing import PMap

from tile_diorama.components import DEFAULT_GRID_CONFIG, GridConfig
from tile_diorama.renderer.diorama import (
    DEFAULT_SPRITE_SCALE,
    DioramaRenderer,
    SpritePlacement,
)
from tile_diorama.sprites import (
    GeneratorConfig,
    SpriteGenerator,
    load_sample,
    resolve_sprite_image,
)
from tile_diorama.types import FilterName

logger = logging.getLogger(__name__)

DEFAULT_SEED = "6969696969696969"


class GridBatch:
    generators: PMap[str, SpriteGenerator]
    output_dir: str
    samples_dir: str
    generator_config: GeneratorConfig
    sprite_scale: float

    def __init__(
        self,
        generators: Mapping[str, SpriteGenerator],
        output_dir: str,
        samples_dir: str,
        seed: str = DEFAULT_SEED,
        config: GridConfig = DEFAULT_GRID_CONFIG,
        filter_name: FilterName = FilterName.NONE,
        sprite_scale: float = DEFAULT_SPRITE_SCALE,
    ):
        self.generators = pmap(generators)
        self.output_dir = output_dir
        self.samples_dir = samples_dir
        self.generator_config = GeneratorConfig(photo_only=True, seed=seed)
        self.sprite_scale = sprite_scale
        self._renderer = DioramaRenderer(
            grid_size=1, config=config, filter_name=filter_name
        )

    def _sprite_for(self, name: str) -> Optional[Image.Image]:
        generator = self.generators[name]
        try:
            result = generator.generate(self.generator_config)
        except Exception:
            logger.exception("Generator for %s failed; trying stored sample", name)
            return load_sample(self.samples_dir, name)
        return resolve_sprite_image(result, name, self.samples_dir)

    def _render_entity(self, name: str) -> bool:
        sprite = self._sprite_for(name)
        if sprite is None:
            logger.error("No image available for %s", name)
            return False

        os.makedirs(self.output_dir, exist_ok=True)
        sprite.save(os.path.join(self.output_dir, f"{name}.png"), format="PNG")
        self._renderer.render_to_file(
            [SpritePlacement(sprite, 0, 0, self.sprite_scale)],
            os.path.join(self.output_dir, f"{name}_grid.png"),
        )
        return True

    def generate_for_entity(self, name: str) -> bool:
        """Render one entity; unknown names raise ``KeyError``."""
        if name not in self.generators:
            available = ", ".join(sorted(self.generators))
            raise KeyError(f"Entity {name!r} not found. Available entities: {available}")
        logger.info("Processing %s", name)
        try:
            return self._render_entity(name)
        except Exception:
            logger.exception("Error rendering %s", name)
            return False

    def generate_all(self) -> Dict[str, bool]:
        """Render every registered entity; returns success per entity."""
        logger.info(
            "Rendering grids for %d entities into %s (seed %s)",
            len(self.generators),
            self.output_dir,
            self.generator_config.seed,
        )
        results = {name: self.generate_for_entity(name) for name in sorted(self.generators)}
        failed = [name for name, ok in results.items() if not ok]
        if failed:
            logger.warning("Failed entities: %s", ", ".join(failed))
        return results
