"""
Layout conversion package.

Flattens generated placement grids into world-space tiles and walls for the
host scene.
"""

from .layout_export import (
    PlacedTile,
    LayoutExport,
    export_layout,
    export_to_json,
)

__all__ = [
    'PlacedTile',
    'LayoutExport',
    'export_layout',
    'export_to_json',
]
