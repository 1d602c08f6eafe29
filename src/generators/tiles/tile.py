"""
Tile definitions and placement variants.

- TileDefinition: A catalogued room tile as loaded from a theme
- TileVariant: A rotated/mirrored derivation of a tile, used as a placement
  candidate by the layout search
- blank_variant(): The synthetic all-closed "no room here" placeholder
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterator, Optional, Tuple

from .boundary import (
    CLOCKWISE, CLOSED, BoundaryConstraints, Direction, WallSegment,
)

# Grid pixels per boundary unit used by the host scenes
DEFAULT_PIXELS_PER_UNIT = 200

VALID_ROTATIONS = (0, 90, 180, 270)

# Name reported for the placeholder that fills cells with no room
BLANK_NAME = "blank"

WallBuckets = Dict[Direction, Tuple[WallSegment, ...]]


def empty_wall_buckets() -> WallBuckets:
    return {d: () for d in CLOCKWISE}


def iter_walls(walls: WallBuckets) -> Iterator[WallSegment]:
    """Iterate wall buckets in clockwise side order."""
    for direction in CLOCKWISE:
        yield from walls.get(direction, ())


@dataclass(frozen=True)
class TileDefinition:
    """A room tile in its canonical (unrotated, unmirrored) orientation.

    Attributes:
        name: Identifying name within the theme
        size: Number of boundary units per side
        boundary: Canonical boundary segments
        walls: Wall segments bucketed by tile side, in local pixel space
        image: Image asset reference for the host renderer
        extent: Pixel extent of the tile (bounds for the point transforms)
    """
    name: str
    size: int
    boundary: BoundaryConstraints
    walls: WallBuckets = field(default_factory=empty_wall_buckets)
    image: str = ""
    extent: float = 0.0

    def __post_init__(self):
        if not self.extent:
            object.__setattr__(self, 'extent', float(self.size * DEFAULT_PIXELS_PER_UNIT))

    @property
    def open_count(self) -> int:
        """The number of open boundary units over all four sides."""
        return self.boundary.open_count()


@dataclass(frozen=True)
class TileVariant:
    """A transformed tile ready to be placed on the grid.

    ``source`` is a non-owning reference back to the catalogued tile, or None
    for the Blank placeholder.
    """
    source: Optional[TileDefinition]
    boundary: BoundaryConstraints
    walls: WallBuckets = field(default_factory=empty_wall_buckets)
    rotation: int = 0
    mirror_x: bool = False
    mirror_y: bool = False

    @property
    def is_blank(self) -> bool:
        return self.source is None

    @property
    def name(self) -> str:
        return self.source.name if self.source is not None else BLANK_NAME

    @property
    def image(self) -> str:
        return self.source.image if self.source is not None else ""

    @property
    def size(self) -> int:
        return len(self.boundary.north)

    def describe(self) -> str:
        """Short human-readable label, e.g. ``crossroads@90+mx``."""
        label = f"{self.name}@{self.rotation}"
        if self.mirror_x:
            label += "+mx"
        if self.mirror_y:
            label += "+my"
        return label


@lru_cache(maxsize=None)
def blank_variant(size: int) -> TileVariant:
    """Return the Blank placeholder for tiles of ``size`` units per side."""
    return TileVariant(source=None, boundary=BoundaryConstraints.uniform(CLOSED, size))
