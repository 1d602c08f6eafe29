"""
Tile record persistence.

Tile records are plain JSON files, one per tile, stored under
``<tiles_root>/<theme>/tiles/<name>.json`` next to the tile image
``<name>.webp``. Record shape (as written by the scene export tool):

    {
      "name": "crossroads",
      "size": 9,
      "edges": {"n": [...], "e": [...], "s": [...], "w": [...]},
      "walls": [{"c": [x1, y1, x2, y2]}, ...]
    }

Edge units are ``false`` (closed), ``null`` (unknown) or an object such as
``{"type": "hallway"}`` (open). The scene export tool walks the perimeter
clockwise, so its SOUTH edge runs east -> west and its WEST edge runs
south -> north; records written by ``tile_to_record`` carry
``"winding": "axis"`` and use the internal ordering instead.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dungeon_tilesets.errors import TileRecordError

from .boundary import (
    CLOCKWISE, CLOSED, UNKNOWN, BoundaryConstraints, BoundarySegment,
    Direction, Open, Point2D, WallSegment, infer_wall_side,
)
from .tile import DEFAULT_PIXELS_PER_UNIT, TileDefinition, iter_walls

logger = logging.getLogger(__name__)

WINDING_CLOCKWISE = "clockwise"
WINDING_AXIS = "axis"
IMAGE_SUFFIX = ".webp"


def get_themes_dir() -> Path:
    """
    Get the default directory holding tile themes.

    Returns:
        Path to ~/.config/dungeon_tilesets/themes/
    """
    return Path.home() / ".config" / "dungeon_tilesets" / "themes"


def tile_image_path(theme_path: Union[str, Path], name: str) -> str:
    """Image location for a tile of a theme."""
    return str(Path(theme_path) / "tiles" / f"{name}{IMAGE_SUFFIX}")


# =============================================================================
# RECORD -> TILE
# =============================================================================

def _parse_segment(value: Any, source: str) -> BoundarySegment:
    if value is False:
        return CLOSED
    if value is None:
        return UNKNOWN
    if value is True:
        return Open()
    if isinstance(value, dict):
        kind = value.get("type") or value.get("kind") or ""
        return Open(str(kind))
    raise TileRecordError(f"Unsupported edge unit {value!r}", source)


def _parse_edges(edges: Dict[str, Any], winding: str, source: str) -> BoundaryConstraints:
    if not isinstance(edges, dict):
        raise TileRecordError("'edges' must be an object", source)

    parsed: Dict[Direction, List[BoundarySegment]] = {}
    for key, units in edges.items():
        try:
            direction = Direction.from_key(key)
        except ValueError as e:
            raise TileRecordError(str(e), source) from e
        if not isinstance(units, list):
            raise TileRecordError(f"Edge '{key}' must be a list", source)
        parsed[direction] = [_parse_segment(u, source) for u in units]

    missing = [d.value for d in CLOCKWISE if d not in parsed]
    if missing:
        raise TileRecordError(f"Missing edges: {', '.join(missing)}", source)

    if winding == WINDING_CLOCKWISE:
        parsed[Direction.SOUTH].reverse()
        parsed[Direction.WEST].reverse()
    elif winding != WINDING_AXIS:
        raise TileRecordError(f"Unknown winding {winding!r}", source)

    return BoundaryConstraints.from_mapping(parsed)


def _parse_point(value: Any, source: str) -> Point2D:
    try:
        return Point2D(float(value["x"]), float(value["y"]))
    except (KeyError, TypeError, ValueError) as e:
        raise TileRecordError(f"Bad wall point {value!r}", source) from e


def _parse_wall(data: Dict[str, Any], extent: float, source: str) -> WallSegment:
    if "c" in data:
        coords = data["c"]
        if not isinstance(coords, list) or len(coords) != 4:
            raise TileRecordError(f"Wall 'c' must hold 4 numbers, got {coords!r}", source)
        try:
            x1, y1, x2, y2 = (float(c) for c in coords)
        except (TypeError, ValueError) as e:
            raise TileRecordError(f"Bad wall coordinates {coords!r}", source) from e
        start, end = Point2D(x1, y1), Point2D(x2, y2)
    elif "start" in data and "end" in data:
        start = _parse_point(data["start"], source)
        end = _parse_point(data["end"], source)
    else:
        raise TileRecordError(f"Wall needs 'c' or 'start'/'end': {data!r}", source)

    side_key = data.get("side")
    if side_key:
        try:
            side = Direction.from_key(side_key)
        except ValueError as e:
            raise TileRecordError(str(e), source) from e
    else:
        side = infer_wall_side(start, end, extent)
    return WallSegment(start, end, side)


def tile_from_record(
    data: Dict[str, Any],
    image: str = "",
    pixels_per_unit: int = DEFAULT_PIXELS_PER_UNIT,
    source: str = "",
) -> TileDefinition:
    """
    Build a TileDefinition from a decoded tile record.

    Args:
        data: Decoded JSON record
        image: Image reference to attach (overrides the record's ``img``)
        pixels_per_unit: Pixels per boundary unit, used when the record has no extent
        source: Record origin, used in error messages

    Returns:
        The tile definition

    Raises:
        TileRecordError: If the record is malformed
    """
    if not isinstance(data, dict):
        raise TileRecordError("Tile record must be an object", source)
    try:
        name = str(data["name"])
        size = int(data["size"])
    except (KeyError, TypeError, ValueError) as e:
        raise TileRecordError(f"Record needs 'name' and integer 'size' ({e})", source) from e
    if size < 1:
        raise TileRecordError(f"Tile size must be positive, got {size}", source)

    winding = data.get("winding", WINDING_CLOCKWISE)
    boundary = _parse_edges(data.get("edges"), winding, source)

    try:
        extent = float(data.get("extent") or size * pixels_per_unit)
    except (TypeError, ValueError) as e:
        raise TileRecordError(f"Bad extent {data.get('extent')!r}", source) from e

    walls = data.get("walls") or []
    if not isinstance(walls, list):
        raise TileRecordError("'walls' must be a list", source)
    buckets: Dict[Direction, List[WallSegment]] = {d: [] for d in CLOCKWISE}
    for wall_data in walls:
        if not isinstance(wall_data, dict):
            raise TileRecordError(f"Wall entry must be an object, got {wall_data!r}", source)
        wall = _parse_wall(wall_data, extent, source)
        buckets[wall.side].append(wall)

    return TileDefinition(
        name=name,
        size=size,
        boundary=boundary,
        walls={d: tuple(w) for d, w in buckets.items()},
        image=image or str(data.get("img", "")),
        extent=extent,
    )


# =============================================================================
# TILE -> RECORD
# =============================================================================

def _segment_to_record(segment: BoundarySegment) -> Any:
    if segment.is_closed:
        return False
    if segment.is_unknown:
        return None
    return {"type": segment.kind}


def tile_to_record(tile: TileDefinition) -> Dict[str, Any]:
    """Convert a TileDefinition to a JSON-serializable record (axis winding)."""
    return {
        "name": tile.name,
        "size": tile.size,
        "winding": WINDING_AXIS,
        "extent": tile.extent,
        "edges": {
            d.value: [_segment_to_record(s) for s in edge]
            for d, edge in tile.boundary.items()
        },
        "walls": [
            {"c": list(w.coords()), "side": w.side.value if w.side else None}
            for w in iter_walls(tile.walls)
        ],
        "img": tile.image,
    }


# =============================================================================
# FILES
# =============================================================================

def read_tile_record(path: Path) -> Dict[str, Any]:
    """
    Read and decode one tile record file.

    Raises:
        TileRecordError: If the file is unreadable or not valid JSON
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise TileRecordError(f"Cannot read tile record ({e})", str(path)) from e


def save_tile_record(tile: TileDefinition, theme_dir: Path) -> Path:
    """
    Write a tile record into ``<theme_dir>/tiles/``.

    Returns:
        Path to the saved file
    """
    tiles_dir = Path(theme_dir) / "tiles"
    tiles_dir.mkdir(parents=True, exist_ok=True)
    file_path = tiles_dir / f"{tile.name}.json"

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(tile_to_record(tile), f, indent=2)

    return file_path


def list_tile_records(theme_dir: Path) -> List[Path]:
    """Tile record files of a theme, sorted by name."""
    tiles_dir = Path(theme_dir) / "tiles"
    if not tiles_dir.is_dir():
        logger.warning("Theme has no tiles directory: %s", tiles_dir)
        return []
    return sorted(tiles_dir.glob("*.json"))


def resolve_image(data: Dict[str, Any], theme_dir: Path, name: str) -> str:
    """Image reference for a record: its ``img`` (relative to the theme) or the default."""
    img: Optional[str] = data.get("img") if isinstance(data, dict) else None
    if img and isinstance(img, str):
        path = Path(img)
        return str(path if path.is_absolute() else Path(theme_dir) / path)
    return tile_image_path(theme_dir, name)
