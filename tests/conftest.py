import json
from pathlib import Path

import pytest

from dungeon_tilesets.generators.tiles.boundary import (
    CLOSED, BoundaryConstraints, Direction, Open, Point2D, WallSegment,
)
from dungeon_tilesets.generators.tiles.catalog import TileCatalog
from dungeon_tilesets.generators.tiles.tile import TileDefinition

ROOM = 3
EXTENT = ROOM * 200.0


def write_json(path: Path, obj):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj), encoding="utf-8")


def make_open_tile(size: int = ROOM, name: str = "hall") -> TileDefinition:
    return TileDefinition(name, size, BoundaryConstraints.uniform(Open("hallway"), size))


def make_dead_end_tile(size: int = ROOM, name: str = "dead_end") -> TileDefinition:
    """Open along the whole north side, closed elsewhere, one wall per closed side."""
    extent = size * 200.0
    closed = (CLOSED,) * size
    walls = {
        Direction.NORTH: (),
        Direction.EAST: (WallSegment(Point2D(extent, 0.0), Point2D(extent, extent), Direction.EAST),),
        Direction.SOUTH: (WallSegment(Point2D(0.0, extent), Point2D(extent, extent), Direction.SOUTH),),
        Direction.WEST: (WallSegment(Point2D(0.0, 0.0), Point2D(0.0, extent), Direction.WEST),),
    }
    return TileDefinition(
        name, size,
        BoundaryConstraints(north=(Open("door"),) * size, east=closed, south=closed, west=closed),
        walls=walls,
        image=f"tiles/{name}.webp",
    )


@pytest.fixture
def open_tile():
    return make_open_tile()


@pytest.fixture
def dead_end_tile():
    return make_dead_end_tile()


@pytest.fixture
def two_tile_catalog():
    return TileCatalog("dungeon", [make_open_tile(), make_dead_end_tile()])


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    # Keep settings and theme lookups out of the real home directory
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home
