"""Rendering subpackage.

Turns grid geometry and sprite images into finished diorama rasters:

* Tile prisms with wavy grass/soil seams drawn through a small canvas-like
  :class:`~tile_diorama.renderer.surface.DrawingSurface` interface.
* Back-to-front compositing of tiles and anchored sprites.
* Color grading presets with an equivalent ffmpeg filter-graph form.

See :mod:`tile_diorama.renderer.diorama` for the full-canvas composition
routine and :mod:`tile_diorama.renderer.tile` for a single tile.
"""
