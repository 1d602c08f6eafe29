"""
Tile definition validation checks.

Run when a tile is registered in a catalog:
- Boundary length per side equals the tile size (TILE-001)
- At least one open unit (TILE-002)
- Walls inside the tile extent (TILE-003)
- Unknown units on a tile boundary (TILE-004)
"""

from dungeon_tilesets.generators.tiles.boundary import WallSegment
from dungeon_tilesets.generators.tiles.tile import TileDefinition, iter_walls

from ..core import ValidationResult, ValidationStage
from ..rules import TILE_001, TILE_002, TILE_003, TILE_004


def _wall_inside(wall: WallSegment, extent: float) -> bool:
    coords = wall.coords()
    return all(0.0 <= c <= extent for c in coords)


def validate_tile(tile: TileDefinition) -> ValidationResult:
    """Validate a tile definition.

    Args:
        tile: Tile to check

    Returns:
        ValidationResult; failed if any side length is wrong
    """
    result = ValidationResult(stage=ValidationStage.CATALOG)

    for direction, edge in tile.boundary.items():
        if len(edge) != tile.size:
            result.add_issue(TILE_001.to_issue(
                tile=tile.name, side=direction,
                edge=direction.name, length=len(edge), size=tile.size,
            ))
        unknown = sum(1 for seg in edge if seg.is_unknown)
        if unknown:
            result.add_issue(TILE_004.to_issue(
                tile=tile.name, side=direction,
                edge=direction.name, count=unknown,
            ))

    if tile.open_count == 0:
        result.add_issue(TILE_002.to_issue(tile=tile.name))

    for wall in iter_walls(tile.walls):
        if not _wall_inside(wall, tile.extent):
            x1, y1, x2, y2 = wall.coords()
            result.add_issue(TILE_003.to_issue(
                tile=tile.name,
                side=wall.side,
                x1=x1, y1=y1, x2=x2, y2=y2, extent=tile.extent,
            ))

    return result
