"""Command line entry point (``tile-diorama``).

Subcommands:

* ``render``: stand sprite PNGs on a grid and write the diorama PNG.
* ``filters``: list color grading presets.
* ``graph``: print a preset's ffmpeg filter-graph fragment.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from tile_diorama.components import DEFAULT_GRID_CONFIG
from tile_diorama.renderer.diorama import (
    DEFAULT_GRID_SIZE,
    DEFAULT_SPRITE_SCALE,
    DioramaRenderer,
    SpritePlacement,
)
from tile_diorama.renderer.filters import (
    available_filters,
    encoder_filter_string,
    get_filter,
)
from tile_diorama.sprites import load_sprite

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid integer '{value}'") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tile-diorama", description="Compose isometric tile dioramas."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render sprites onto a tile grid")
    render.add_argument("sprites", nargs="*", help="Sprite PNGs, placed row by row")
    render.add_argument("-o", "--output", required=True, help="Output PNG path")
    render.add_argument(
        "--grid-size", type=positive_int, default=DEFAULT_GRID_SIZE, help="Tiles per side"
    )
    render.add_argument(
        "--filter",
        default="none",
        choices=[str(name) for name in available_filters()],
        help="Color grading preset",
    )
    render.add_argument(
        "--scale", type=float, default=DEFAULT_SPRITE_SCALE, help="Sprite scale factor"
    )
    render.add_argument(
        "--no-decoration", action="store_true", help="Skip grass tufts on empty tiles"
    )

    sub.add_parser("filters", help="List color grading presets")

    graph = sub.add_parser("graph", help="Print a preset's ffmpeg filter fragment")
    graph.add_argument("name", help="Preset name (unknown names mean no filter)")
    graph.add_argument("--input", default="[out]", help="Input pad label")
    graph.add_argument("--output", default="[filtered]", help="Output pad label")
    return parser


def place_in_rows(
    paths: Sequence[str], grid_size: int, scale: float
) -> List[SpritePlacement]:
    capacity = grid_size * grid_size
    if len(paths) > capacity:
        raise ValueError(
            f"{len(paths)} sprites do not fit on a {grid_size}x{grid_size} grid"
        )
    return [
        SpritePlacement(load_sprite(path), i % grid_size, i // grid_size, scale)
        for i, path in enumerate(paths)
    ]


def cmd_render(args: argparse.Namespace) -> int:
    placements = place_in_rows(args.sprites, args.grid_size, args.scale)
    renderer = DioramaRenderer(
        grid_size=args.grid_size,
        config=DEFAULT_GRID_CONFIG,
        filter_name=args.filter,
        draw_decoration=not args.no_decoration,
    )
    renderer.render_to_file(placements, args.output)
    print(args.output)
    return 0


def cmd_filters(args: argparse.Namespace) -> int:
    for name in available_filters():
        print(f"{name:<10} {get_filter(name).description}")
    return 0


def cmd_graph(args: argparse.Namespace) -> int:
    print(encoder_filter_string(args.name, args.input, args.output))
    return 0


COMMANDS = {
    "render": cmd_render,
    "filters": cmd_filters,
    "graph": cmd_graph,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return COMMANDS[args.command](args)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
