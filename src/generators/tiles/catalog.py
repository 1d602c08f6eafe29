"""
Tile catalog: the collection of room tiles available to one theme.

Tiles are registered once at load time and never change afterwards. The
layout search queries the catalog by openness to bias toward well-connected
rooms.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from dungeon_tilesets.errors import MissingAssetError, TileRecordError
from dungeon_tilesets.validation.checks.tile_checks import validate_tile
from dungeon_tilesets.validation.core import ValidationResult

from .tile import DEFAULT_PIXELS_PER_UNIT, TileDefinition
from .tile_storage import (
    get_themes_dir, list_tile_records, read_tile_record, resolve_image,
    tile_from_record,
)

logger = logging.getLogger(__name__)


class TileCatalog:
    """Registry of the tiles of a theme, in registration order.

    Every tile is validated on registration. Tiles with FAIL issues are
    logged and rejected; warnings are logged and the tile is kept.
    """

    def __init__(self, theme: str, tiles: Iterable[TileDefinition] = (),
                 validate_on_register: bool = True):
        """Initialize the catalog.

        Args:
            theme: Theme name
            tiles: Tiles to register, in order
            validate_on_register: If True, validate tiles during registration
        """
        self.theme = theme
        self._tiles: Dict[str, TileDefinition] = {}
        self._validation_enabled = validate_on_register
        self._validation_results: Dict[str, ValidationResult] = {}
        for tile in tiles:
            self._register(tile)

    def _register(self, tile: TileDefinition) -> bool:
        """Register a tile.

        Returns:
            True if the tile was added, False if rejected
        """
        if tile.name in self._tiles:
            logger.warning("Duplicate tile '%s' in theme '%s' ignored", tile.name, self.theme)
            return False

        if self._validation_enabled:
            result = validate_tile(tile)
            self._validation_results[tile.name] = result
            for issue in result.warnings:
                logger.warning(str(issue))
            if result.failed:
                for issue in result.errors:
                    logger.error(str(issue))
                return False

        self._tiles[tile.name] = tile
        return True

    def get_validation_result(self, name: str) -> Optional[ValidationResult]:
        return self._validation_results.get(name)

    def get(self, name: str) -> Optional[TileDefinition]:
        return self._tiles.get(name)

    def names(self) -> List[str]:
        return list(self._tiles)

    def find_tiles(self, min_open: Optional[int] = None,
                   max_open: Optional[int] = None) -> List[TileDefinition]:
        """Tiles whose open unit count lies within the bounds.

        Args:
            min_open: Minimum open boundary units (None = unbounded)
            max_open: Maximum open boundary units (None = unbounded)

        Returns:
            Matching tiles in registration order
        """
        found = []
        for tile in self._tiles.values():
            n_open = tile.open_count
            if min_open is not None and n_open < min_open:
                continue
            if max_open is not None and n_open > max_open:
                continue
            found.append(tile)
        return found

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[TileDefinition]:
        return iter(list(self._tiles.values()))

    def __contains__(self, name: str) -> bool:
        return name in self._tiles

    def __repr__(self) -> str:
        return f"TileCatalog(theme={self.theme!r}, tiles={len(self._tiles)})"


# =============================================================================
# LOADING
# =============================================================================

def _load_tile(path: Path, theme_dir: Path, pixels_per_unit: int,
               check_images: bool) -> Optional[TileDefinition]:
    """Read one record; skipped records are logged and return None."""
    try:
        data = read_tile_record(path)
        name = data.get("name", path.stem) if isinstance(data, dict) else path.stem
        image = resolve_image(data, theme_dir, name)
        tile = tile_from_record(data, image=image, pixels_per_unit=pixels_per_unit,
                                source=str(path))
        if check_images and not Path(tile.image).is_file():
            raise MissingAssetError(tile.name, tile.image)
        return tile
    except MissingAssetError as e:
        logger.warning("Skipping tile: %s", e)
    except TileRecordError as e:
        logger.warning("Skipping malformed tile record: %s", e)
    return None


async def load_catalog_async(
    theme: str,
    tiles_root: Optional[Union[str, Path]] = None,
    pixels_per_unit: int = DEFAULT_PIXELS_PER_UNIT,
    check_images: bool = True,
) -> TileCatalog:
    """
    Load a theme's tile records concurrently and build its catalog.

    Each record is read in a worker thread; the catalog is only constructed
    once every read has finished or been skipped. Registration order follows
    record file names.

    Args:
        theme: Theme name (directory under ``tiles_root``)
        tiles_root: Directory holding themes (defaults to get_themes_dir())
        pixels_per_unit: Pixels per boundary unit for records without extent
        check_images: Skip tiles whose image file does not exist

    Returns:
        TileCatalog for the theme (possibly empty)
    """
    root = Path(tiles_root) if tiles_root is not None else get_themes_dir()
    theme_dir = root / theme
    paths = list_tile_records(theme_dir)

    loaded = await asyncio.gather(*(
        asyncio.to_thread(_load_tile, path, theme_dir, pixels_per_unit, check_images)
        for path in paths
    ))
    tiles = [tile for tile in loaded if tile is not None]

    catalog = TileCatalog(theme, tiles)
    logger.info("Loaded theme '%s': %d of %d tile record(s)", theme, len(catalog), len(paths))
    return catalog


def load_catalog(
    theme: str,
    tiles_root: Optional[Union[str, Path]] = None,
    pixels_per_unit: int = DEFAULT_PIXELS_PER_UNIT,
    check_images: bool = True,
) -> TileCatalog:
    """Blocking wrapper around load_catalog_async()."""
    return asyncio.run(load_catalog_async(theme, tiles_root, pixels_per_unit, check_images))
