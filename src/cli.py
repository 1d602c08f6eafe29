"""
Command line entry point.

Loads a tile theme, generates one layout and writes it as JSON.

Exit codes:
    0  layout generated
    1  generation failed (attempt budget exhausted, first placement failed)
    2  configuration error (bad settings, empty catalog)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dungeon_tilesets.conversion.layout_export import export_to_json
from dungeon_tilesets.errors import GenerationError, SettingsError
from dungeon_tilesets.generators.layout.search import SIZE_PRESETS, SelectionPolicy
from dungeon_tilesets.generators.tiles.catalog import load_catalog
from dungeon_tilesets.pipeline.generator import DungeonGenerator, GenerationFailure
from dungeon_tilesets.pipeline.settings import GeneratorSettings, load_settings
from dungeon_tilesets.validation.core import ValidationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_GENERATION_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dungeon-tilesets",
        description="Generate a dungeon layout from a theme of room tiles.",
    )
    parser.add_argument("--theme", help="Theme name (directory under the tiles root)")
    parser.add_argument("--tiles-root", help="Directory holding tile themes")
    parser.add_argument("--size", choices=sorted(SIZE_PRESETS), help="Layout size preset")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible layout")
    parser.add_argument("--max-attempts", type=int, help="Placement attempt budget")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in SelectionPolicy],
        help="How the next cell to fill is chosen",
    )
    parser.add_argument("--settings", help="Settings JSON file to start from")
    parser.add_argument("--output", "-o", help="Write JSON here instead of stdout")
    parser.add_argument("--scene", action="store_true",
                        help="Emit the host scene payload instead of the plain layout")
    parser.add_argument("--no-image-check", action="store_true",
                        help="Keep tiles whose image file is missing")
    parser.add_argument("--strict", action="store_true",
                        help="Fail when the finished layout has validation errors")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def _settings_from_args(args: argparse.Namespace) -> GeneratorSettings:
    settings = load_settings(Path(args.settings)) if args.settings else load_settings()
    if args.theme:
        settings.theme = args.theme
    if args.tiles_root:
        settings.tiles_root = args.tiles_root
    if args.size:
        settings.size_preset = args.size
    if args.seed is not None:
        settings.seed = args.seed
    if args.max_attempts is not None:
        settings.max_attempts = args.max_attempts
    if args.policy:
        settings.selection_policy = args.policy
    if args.no_image_check:
        settings.check_images = False
    if args.strict:
        settings.strict_validation = True
    settings.validate()
    return settings


def _write(text: str, output: Optional[str]) -> None:
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
        logger.info("Layout written: %s", path)
    else:
        sys.stdout.write(text + "\n")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = _settings_from_args(args)
    except SettingsError as e:
        logger.error("%s", e)
        return EXIT_CONFIG_ERROR

    catalog = load_catalog(
        settings.theme,
        tiles_root=settings.tiles_root,
        pixels_per_unit=settings.pixels_per_unit,
        check_images=settings.check_images,
    )
    if not len(catalog):
        logger.error("Theme '%s' has no usable tiles", settings.theme)
        return EXIT_CONFIG_ERROR

    generator = DungeonGenerator(catalog, settings)
    try:
        result = generator.generate()
    except ValidationError as e:
        logger.error("Layout failed validation:\n%s", e.result.report())
        return EXIT_GENERATION_FAILED
    except GenerationError as e:
        logger.error("[%s] %s", e.kind.value, e)
        return EXIT_GENERATION_FAILED

    if isinstance(result, GenerationFailure):
        logger.error("[%s] %s (seed %s)", result.kind.value, result.message, result.seed)
        return EXIT_GENERATION_FAILED

    _write(export_to_json(result, scene=args.scene, grid_size=settings.pixels_per_unit),
           args.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
