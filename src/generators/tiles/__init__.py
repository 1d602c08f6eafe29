"""
Room tiles: boundary model, definitions and rotation/mirror
variants. The catalog and its loader live in ``tiles.catalog``.
"""

from .boundary import (
    Direction,
    CLOCKWISE,
    SegmentState,
    BoundarySegment,
    BoundaryConstraints,
    Open,
    CLOSED,
    UNKNOWN,
    Point2D,
    WallSegment,
)
from .tile import TileDefinition, TileVariant, blank_variant, DEFAULT_PIXELS_PER_UNIT
from .transform import transform, enumerate_variants, VARIANTS_PER_TILE

__all__ = [
    # Boundary model
    'Direction',
    'CLOCKWISE',
    'SegmentState',
    'BoundarySegment',
    'BoundaryConstraints',
    'Open',
    'CLOSED',
    'UNKNOWN',
    'Point2D',
    'WallSegment',
    # Tiles
    'TileDefinition',
    'TileVariant',
    'blank_variant',
    'DEFAULT_PIXELS_PER_UNIT',
    # Variants
    'transform',
    'enumerate_variants',
    'VARIANTS_PER_TILE',
]
