"""
Generated layout validation checks.

Run on a finished (or partial) placement grid:
- Adjacent boundaries agree in both directions (LAYOUT-001)
- Perimeter sides are closed (LAYOUT-002)
- History length equals the number of filled cells (LAYOUT-003)
- No opening faces an empty cell (LAYOUT-004)
"""

from typing import Optional

from dungeon_tilesets.generators.layout.constraints import has_open, matches
from dungeon_tilesets.generators.layout.grid import PlacementGrid, PlacementHistory
from dungeon_tilesets.generators.tiles.boundary import Direction

from ..core import ValidationResult, ValidationStage
from ..rules import LAYOUT_001, LAYOUT_002, LAYOUT_003, LAYOUT_004


def validate_layout(grid: PlacementGrid,
                    history: Optional[PlacementHistory] = None) -> ValidationResult:
    """Validate a placement grid.

    Args:
        grid: Grid to check
        history: Placement history; LAYOUT-003 is skipped when omitted

    Returns:
        ValidationResult with stage PLACEMENT
    """
    result = ValidationResult(stage=ValidationStage.PLACEMENT)

    for x, y, variant in grid.cells():
        if variant is None:
            continue
        for direction, coord in grid.neighbors(x, y):
            edge = variant.boundary.side(direction)

            if coord is None:
                if not all(seg.is_closed for seg in edge):
                    result.add_issue(LAYOUT_002.to_issue(
                        tile=variant.name, cell=(x, y), side=direction,
                        edge=direction.name,
                    ))
                continue

            neighbour = grid.get(*coord)
            if neighbour is None:
                if has_open(edge):
                    result.add_issue(LAYOUT_004.to_issue(
                        tile=variant.name, cell=(x, y), side=direction,
                        nx=coord[0], ny=coord[1],
                    ))
                continue

            # Each shared edge is checked once, from its west/north cell
            if direction not in (Direction.EAST, Direction.SOUTH):
                continue
            facing = neighbour.boundary.side(direction.opposite())
            if not (matches(edge, facing) and matches(facing, edge)):
                result.add_issue(LAYOUT_001.to_issue(
                    tile=variant.name, cell=(x, y), side=direction,
                    nx=coord[0], ny=coord[1],
                ))

    if history is not None:
        filled = grid.filled_count()
        if len(history) != filled:
            result.add_issue(LAYOUT_003.to_issue(history=len(history), filled=filled))

    return result
