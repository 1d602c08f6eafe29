"""
Validation check modules.

Each module provides specific validation checks:
- tile_checks: Tile boundary lengths, openness, wall extents
- layout_checks: Neighbour agreement, closed perimeter, history bookkeeping

Import the check functions from their modules; this package does not
re-export them so that the tile catalog can import tile checks without
pulling in the layout generator.
"""
