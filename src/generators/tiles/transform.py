"""
Tile transform engine.

Produces rotated and mirrored variants of a TileDefinition, transforming the
boundary segments and the wall geometry together so both stay consistent.

Transform order:
- Mirrors are applied first (horizontal, then vertical), rotation second
- Rotation is clockwise in canvas space (y grows downward):
  (x, y) -> (extent - y, x) per quarter turn

Boundary sequences are reordered to keep the fixed edge ordering (see
boundary.py). For one clockwise quarter turn:
    new NORTH = reversed(old WEST)
    new EAST  = old NORTH
    new SOUTH = reversed(old EAST)
    new WEST  = old SOUTH
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np

from .boundary import (
    CLOCKWISE, BoundaryConstraints, Direction, Edge, Point2D, WallSegment,
)
from .tile import VALID_ROTATIONS, TileDefinition, TileVariant, WallBuckets

# (mirror_x, mirror_y) combinations offered per rotation. Mirroring on both
# axes equals a 180 degree rotation, so it is left out.
MIRROR_MODES: Tuple[Tuple[bool, bool], ...] = (
    (False, False),
    (True, False),
    (False, True),
)

VARIANTS_PER_TILE = len(VALID_ROTATIONS) * len(MIRROR_MODES)

# Decimal places kept on transformed wall coordinates
_COORD_PRECISION = 6


# =============================================================================
# BOUNDARY TRANSFORMS
# =============================================================================

def _reverse(edge: Edge) -> Edge:
    return tuple(reversed(edge))


def mirror_boundary_x(boundary: BoundaryConstraints) -> BoundaryConstraints:
    """Flip left/right: swap EAST/WEST, reverse NORTH and SOUTH."""
    return BoundaryConstraints(
        north=_reverse(boundary.north),
        east=boundary.west,
        south=_reverse(boundary.south),
        west=boundary.east,
    )


def mirror_boundary_y(boundary: BoundaryConstraints) -> BoundaryConstraints:
    """Flip top/bottom: swap NORTH/SOUTH, reverse EAST and WEST."""
    return BoundaryConstraints(
        north=boundary.south,
        east=_reverse(boundary.east),
        south=boundary.north,
        west=_reverse(boundary.west),
    )


def rotate_boundary(boundary: BoundaryConstraints, quarter_turns: int) -> BoundaryConstraints:
    """Rotate a boundary clockwise by ``quarter_turns`` * 90 degrees."""
    for _ in range(quarter_turns % 4):
        boundary = BoundaryConstraints(
            north=_reverse(boundary.west),
            east=boundary.north,
            south=_reverse(boundary.east),
            west=boundary.south,
        )
    return boundary


# =============================================================================
# WALL TRANSFORMS
# =============================================================================

def _mirrored_side(side: Direction, horizontal: bool) -> Direction:
    if horizontal and not side.is_horizontal_edge:
        return side.opposite()
    if not horizontal and side.is_horizontal_edge:
        return side.opposite()
    return side


def rotate_points(points: np.ndarray, extent: float, quarter_turns: int) -> np.ndarray:
    """Apply the clockwise point transform ``quarter_turns`` times.

    Args:
        points: Array whose last axis holds (x, y)
        extent: Tile pixel extent
        quarter_turns: Number of 90 degree clockwise turns

    Returns:
        New array of the same shape
    """
    result = np.array(points, dtype=float)
    for _ in range(quarter_turns % 4):
        x = result[..., 0].copy()
        y = result[..., 1].copy()
        result[..., 0] = extent - y
        result[..., 1] = x
    return result


def transform_walls(walls: WallBuckets, extent: float, rotation: int,
                    mirror_x: bool = False, mirror_y: bool = False) -> WallBuckets:
    """Transform wall segments and re-bucket them by the side they now face."""
    quarter_turns = rotation // 90
    buckets: Dict[Direction, List[WallSegment]] = {d: [] for d in CLOCKWISE}

    for side in CLOCKWISE:
        bucket = walls.get(side, ())
        if not bucket:
            continue

        # Shape (n, 2, 2): segment, endpoint, (x, y)
        points = np.array(
            [[[w.start.x, w.start.y], [w.end.x, w.end.y]] for w in bucket],
            dtype=float,
        )
        new_side = side
        if mirror_x:
            points[..., 0] = extent - points[..., 0]
            new_side = _mirrored_side(new_side, horizontal=True)
        if mirror_y:
            points[..., 1] = extent - points[..., 1]
            new_side = _mirrored_side(new_side, horizontal=False)

        points = rotate_points(points, extent, quarter_turns)
        # + 0.0 folds negative zeros
        points = np.round(points, _COORD_PRECISION) + 0.0
        new_side = new_side.rotated(quarter_turns)

        for (x1, y1), (x2, y2) in points.tolist():
            buckets[new_side].append(
                WallSegment(Point2D(x1, y1), Point2D(x2, y2), new_side)
            )

    return {d: tuple(segments) for d, segments in buckets.items()}


# =============================================================================
# PUBLIC API
# =============================================================================

def transform(tile: TileDefinition, rotation: int = 0,
              mirror_x: bool = False, mirror_y: bool = False) -> TileVariant:
    """Create a variant of ``tile``.

    Args:
        tile: Source tile in canonical orientation
        rotation: Clockwise rotation in degrees (0, 90, 180, 270)
        mirror_x: Mirror horizontally (applied before rotation)
        mirror_y: Mirror vertically (applied before rotation)

    Returns:
        TileVariant referencing ``tile``; the tile itself is not modified

    Raises:
        ValueError: If rotation is not a multiple of 90 in [0, 270]
    """
    if rotation not in VALID_ROTATIONS:
        raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}, got {rotation}")

    boundary = tile.boundary
    if mirror_x:
        boundary = mirror_boundary_x(boundary)
    if mirror_y:
        boundary = mirror_boundary_y(boundary)
    boundary = rotate_boundary(boundary, rotation // 90)

    walls = transform_walls(tile.walls, tile.extent, rotation, mirror_x, mirror_y)

    return TileVariant(
        source=tile,
        boundary=boundary,
        walls=walls,
        rotation=rotation,
        mirror_x=mirror_x,
        mirror_y=mirror_y,
    )


def enumerate_variants(tile: TileDefinition) -> List[TileVariant]:
    """All 12 placement variants of a tile, rotation-major, mirror-minor."""
    return [
        transform(tile, rotation, mirror_x, mirror_y)
        for rotation in VALID_ROTATIONS
        for mirror_x, mirror_y in MIRROR_MODES
    ]
