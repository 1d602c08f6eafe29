"""
Adjacency constraint evaluation.

Computes what a cell's boundary must look like given its already-placed
neighbours, and tests candidate variants against it.

Matching rule per boundary unit (constraint vs candidate):
- Unknown constraint: matches anything
- Closed constraint: candidate must be Closed
- Open constraint: candidate must be Open (the opening kind is not compared)
"""

from __future__ import annotations

from typing import Dict, Sequence

from dungeon_tilesets.generators.tiles.boundary import (
    CLOSED, UNKNOWN, BoundaryConstraints, BoundarySegment, Direction, Edge,
)
from dungeon_tilesets.generators.tiles.tile import TileVariant

from .grid import PlacementGrid


def derive_constraints(grid: PlacementGrid, x: int, y: int) -> BoundaryConstraints:
    """Boundary a tile at (x, y) must satisfy.

    For each side:
    - neighbour outside the grid: all Closed
    - neighbour empty: all Unknown
    - neighbour placed (or Blank): the neighbour's facing side, verbatim

    Args:
        grid: Current placement grid
        x: Column of the target cell
        y: Row of the target cell

    Returns:
        BoundaryConstraints for the cell
    """
    size = grid.room_size
    edges: Dict[Direction, Edge] = {}
    for direction, coord in grid.neighbors(x, y):
        if coord is None:
            edges[direction] = (CLOSED,) * size
            continue
        neighbour = grid.get(*coord)
        if neighbour is None:
            edges[direction] = (UNKNOWN,) * size
        else:
            edges[direction] = neighbour.boundary.side(direction.opposite())
    return BoundaryConstraints.from_mapping(edges)


def matches(candidate: Sequence[BoundarySegment], constraint: Sequence[BoundarySegment]) -> bool:
    """Check one side of a candidate against one side of a constraint.

    Returns False at the first mismatched position.
    """
    if len(candidate) != len(constraint):
        return False
    for have, need in zip(candidate, constraint):
        if need.is_unknown:
            continue
        if need.is_closed:
            if not have.is_closed:
                return False
        elif need.is_open:
            if not have.is_open:
                return False
    return True


def satisfies_all(variant: TileVariant, constraints: BoundaryConstraints) -> bool:
    """True when every side of ``variant`` matches ``constraints``."""
    for direction, constraint in constraints.items():
        if not matches(variant.boundary.side(direction), constraint):
            return False
    return True


def has_open(edge: Sequence[BoundarySegment]) -> bool:
    return any(seg.is_open for seg in edge)


def required_open_sides(constraints: BoundaryConstraints) -> int:
    """Number of sides whose constraint demands at least one opening.

    A lower bound on the open units of any tile that can fit, used to
    pre-screen the catalog.
    """
    return sum(1 for _, edge in constraints.items() if has_open(edge))


def is_required(grid: PlacementGrid, x: int, y: int) -> bool:
    """True for an empty cell that a placed neighbour opens into."""
    if not grid.is_empty(x, y):
        return False
    for direction, coord in grid.neighbors(x, y):
        if coord is None:
            continue
        neighbour = grid.get(*coord)
        if neighbour is not None and has_open(neighbour.boundary.side(direction.opposite())):
            return True
    return False
