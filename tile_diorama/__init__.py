"""Procedural isometric tile dioramas.

Typical use::

    from tile_diorama.renderer.diorama import SpritePlacement, render_diorama

    image = render_diorama([SpritePlacement(tree, grid_x=1, grid_y=1)], grid_size=3)
"""

__version__ = "0.1.0"
