"""
Boundary model for dungeon room tiles.

Defines the edge data shared by tiles, variants and the layout search:
- Direction: Cardinal direction enum (NORTH, EAST, SOUTH, WEST)
- BoundarySegment: One unit of a tile edge (Open, Closed or Unknown)
- BoundaryConstraints: Per-direction ordered segment sequences
- Point2D / WallSegment: Wall geometry in tile-local pixel space

Edge ordering:
- NORTH and SOUTH edges are ordered west -> east (increasing x)
- EAST and WEST edges are ordered north -> south (increasing y)

With this ordering a cell's EAST edge and its eastern neighbour's WEST edge
list the same physical units in the same order, so constraints copied from a
neighbour can be compared position by position.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple


class Direction(Enum):
    """Cardinal direction of a tile edge.

    Grid y grows southward (canvas convention), so NORTH of (x, y) is (x, y-1).
    """
    NORTH = "n"
    EAST = "e"
    SOUTH = "s"
    WEST = "w"

    def opposite(self) -> 'Direction':
        """Return the opposite direction."""
        return self.rotated(2)

    def rotated(self, quarter_turns: int) -> 'Direction':
        """Return the direction after ``quarter_turns`` clockwise 90 degree turns."""
        idx = CLOCKWISE.index(self)
        return CLOCKWISE[(idx + quarter_turns) % 4]

    @property
    def offset(self) -> Tuple[int, int]:
        """Grid (dx, dy) step toward the neighbour in this direction."""
        return _OFFSETS[self]

    @property
    def is_horizontal_edge(self) -> bool:
        """True for NORTH/SOUTH edges, which run along the x axis."""
        return self in (Direction.NORTH, Direction.SOUTH)

    @staticmethod
    def from_key(key: str) -> 'Direction':
        """Parse a record key such as ``"n"`` or ``"north"``."""
        if not isinstance(key, str):
            raise ValueError(f"Direction key must be a string, got {key!r}")
        key = key.strip().lower()
        for direction in Direction:
            if key == direction.value or key == direction.name.lower():
                return direction
        raise ValueError(f"Unknown direction: {key!r}")


CLOCKWISE: Tuple[Direction, ...] = (
    Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST,
)

_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}


# =============================================================================
# BOUNDARY SEGMENTS
# =============================================================================

class SegmentState(Enum):
    """The three possible states of a boundary unit."""
    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BoundarySegment:
    """One unit-length slot along a tile edge.

    Use the module constructors ``Open(kind)``, ``CLOSED`` and ``UNKNOWN``
    rather than building instances directly.
    """
    state: SegmentState
    kind: str = ""

    @property
    def is_open(self) -> bool:
        return self.state is SegmentState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state is SegmentState.CLOSED

    @property
    def is_unknown(self) -> bool:
        return self.state is SegmentState.UNKNOWN

    def __repr__(self) -> str:
        if self.is_open:
            return f"Open({self.kind!r})"
        return self.state.name.capitalize()


def Open(kind: str = "") -> BoundarySegment:
    """Create an open segment with an optional opening kind (e.g. "hallway")."""
    return BoundarySegment(SegmentState.OPEN, kind)


CLOSED = BoundarySegment(SegmentState.CLOSED)
UNKNOWN = BoundarySegment(SegmentState.UNKNOWN)

Edge = Tuple[BoundarySegment, ...]


@dataclass(frozen=True)
class BoundaryConstraints:
    """Ordered boundary segments for each of the four sides of a tile."""
    north: Edge
    east: Edge
    south: Edge
    west: Edge

    @classmethod
    def from_mapping(cls, edges: Dict[Direction, Iterable[BoundarySegment]]) -> 'BoundaryConstraints':
        return cls(
            north=tuple(edges[Direction.NORTH]),
            east=tuple(edges[Direction.EAST]),
            south=tuple(edges[Direction.SOUTH]),
            west=tuple(edges[Direction.WEST]),
        )

    @classmethod
    def uniform(cls, segment: BoundarySegment, size: int) -> 'BoundaryConstraints':
        """All four sides filled with the same segment value."""
        edge = (segment,) * size
        return cls(north=edge, east=edge, south=edge, west=edge)

    def side(self, direction: Direction) -> Edge:
        """Return the segments of one side."""
        return getattr(self, direction.name.lower())

    def as_mapping(self) -> Dict[Direction, Edge]:
        return {d: self.side(d) for d in CLOCKWISE}

    def items(self) -> Iterator[Tuple[Direction, Edge]]:
        for direction in CLOCKWISE:
            yield direction, self.side(direction)

    def open_count(self) -> int:
        """Number of open units across all four sides."""
        return sum(1 for _, edge in self.items() for seg in edge if seg.is_open)

    def lengths(self) -> Dict[Direction, int]:
        return {d: len(edge) for d, edge in self.items()}


# =============================================================================
# WALL GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class Point2D:
    """A point in pixel space."""
    x: float
    y: float

    def translated(self, dx: float, dy: float) -> 'Point2D':
        return Point2D(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class WallSegment:
    """A wall line segment, tagged with the tile side it belongs to."""
    start: Point2D
    end: Point2D
    side: Optional[Direction] = None

    def translated(self, dx: float, dy: float) -> 'WallSegment':
        """Return a copy moved by (dx, dy)."""
        return WallSegment(self.start.translated(dx, dy), self.end.translated(dx, dy), self.side)

    def coords(self) -> Tuple[float, float, float, float]:
        """Flat ``(x1, y1, x2, y2)`` tuple, the host scene wall format."""
        return (self.start.x, self.start.y, self.end.x, self.end.y)


def infer_wall_side(start: Point2D, end: Point2D, extent: float) -> Direction:
    """Pick the tile side closest to the midpoint of a wall.

    Used for wall records that do not carry an explicit side.
    """
    mx = (start.x + end.x) / 2.0
    my = (start.y + end.y) / 2.0
    distances = {
        Direction.NORTH: my,
        Direction.EAST: extent - mx,
        Direction.SOUTH: extent - my,
        Direction.WEST: mx,
    }
    return min(CLOCKWISE, key=lambda d: distances[d])
