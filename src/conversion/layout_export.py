"""
Layout export utilities.

Flattens a finished PlacementGrid into world-space output for:
- A host scene (tiles with image, pixel position, rotation and mirroring)
- Wall segments in world pixel coordinates
- JSON for external tools
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from dungeon_tilesets.generators.layout.grid import PlacementGrid
from dungeon_tilesets.generators.tiles.boundary import WallSegment
from dungeon_tilesets.generators.tiles.tile import DEFAULT_PIXELS_PER_UNIT, iter_walls

SCENE_BACKGROUND = "#000000"


@dataclass(frozen=True)
class PlacedTile:
    """A room tile positioned in world pixel space."""
    name: str
    image: str
    x: float
    y: float
    width: float
    height: float
    rotation: int = 0
    mirror_x: bool = False
    mirror_y: bool = False
    grid_x: int = 0
    grid_y: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'img': self.image,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'rotation': self.rotation,
            'mirrorX': self.mirror_x,
            'mirrorY': self.mirror_y,
            'cell': [self.grid_x, self.grid_y],
        }


@dataclass
class LayoutExport:
    """World-space result of a layout: canvas size, placed tiles and walls."""
    canvas_width: float
    canvas_height: float
    tiles: List[PlacedTile] = field(default_factory=list)
    walls: List[WallSegment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'canvas': {'width': self.canvas_width, 'height': self.canvas_height},
            'tiles': [t.to_dict() for t in self.tiles],
            'walls': [_wall_to_dict(w) for w in self.walls],
        }

    def to_scene_data(self, grid_size: int = DEFAULT_PIXELS_PER_UNIT) -> Dict[str, Any]:
        """
        Scene update payload for the host renderer.

        Args:
            grid_size: Host grid square size in pixels

        Returns:
            Dict with canvas dimensions, locked tiles and walls
        """
        return {
            'width': self.canvas_width,
            'height': self.canvas_height,
            'size': grid_size,
            'padding': 0,
            'backgroundColor': SCENE_BACKGROUND,
            'tiles': [
                {
                    'x': t.x,
                    'y': t.y,
                    'width': t.width,
                    'height': t.height,
                    'rotation': t.rotation,
                    'mirrorX': t.mirror_x,
                    'mirrorY': t.mirror_y,
                    'img': t.image,
                    'locked': True,
                }
                for t in self.tiles
            ],
            'walls': [{'c': list(w.coords())} for w in self.walls],
        }


def _wall_to_dict(wall: WallSegment) -> Dict[str, Any]:
    return {
        'c': list(wall.coords()),
        'side': wall.side.value if wall.side else None,
    }


def export_layout(grid: PlacementGrid, room_size: int,
                  pixels_per_unit: int = DEFAULT_PIXELS_PER_UNIT) -> LayoutExport:
    """
    Flatten a placement grid into world-space tiles and walls.

    Empty and Blank cells produce no output. Each remaining cell is placed at
    its grid coordinate times the room pixel size, and its walls are
    translated by the same offset.

    Args:
        grid: Placement grid (complete or partial)
        room_size: Boundary units per tile side
        pixels_per_unit: Pixels per boundary unit

    Returns:
        LayoutExport
    """
    room_px = room_size * pixels_per_unit
    canvas = grid.rooms * room_px
    result = LayoutExport(canvas_width=canvas, canvas_height=canvas)

    for x, y, variant in grid.cells():
        if variant is None or variant.is_blank:
            continue
        ox, oy = x * room_px, y * room_px
        result.tiles.append(PlacedTile(
            name=variant.name,
            image=variant.image,
            x=ox,
            y=oy,
            width=room_px,
            height=room_px,
            rotation=variant.rotation,
            mirror_x=variant.mirror_x,
            mirror_y=variant.mirror_y,
            grid_x=x,
            grid_y=y,
        ))
        for wall in iter_walls(variant.walls):
            result.walls.append(wall.translated(ox, oy))

    return result


def export_to_json(layout: LayoutExport, scene: bool = False,
                   grid_size: int = DEFAULT_PIXELS_PER_UNIT) -> str:
    """
    Export a layout as JSON.

    Args:
        layout: Layout to export
        scene: Emit the host scene payload instead of the plain layout dict
        grid_size: Host grid square size, used with ``scene``

    Returns:
        JSON string
    """
    data = layout.to_scene_data(grid_size) if scene else layout.to_dict()
    return json.dumps(data, indent=2)
