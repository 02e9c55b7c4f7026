from __future__ import annotations

import argparse
import logging

from tileworld.core.config import GENERATION_TYPES, GenerationConfig, WorldSettings
from tileworld.core.io import save_world
from tileworld.core.world import TileWorld


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a tile world without opening the editor.")
    parser.add_argument("name", nargs="?", default="cli_generated_world")
    parser.add_argument("--width", type=int, default=100)
    parser.add_argument("--height", type=int, default=100)
    parser.add_argument("--seed", type=int, default=12345)
    parser.add_argument("--type", dest="generation_type", choices=GENERATION_TYPES, default="terraria")
    parser.add_argument("--lighting", action="store_true", help="compute the light map before saving")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = WorldSettings(width=args.width, height=args.height, enable_lighting=args.lighting)
    generation = GenerationConfig(seed=args.seed, generation_type=args.generation_type)
    try:
        world = TileWorld(settings, generation)
    except ValueError as e:
        print(f"Cannot generate world: {e}")
        return 1

    path = save_world(args.name, world)
    print(f"World generated as {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
