import asyncio
from pathlib import Path

import pytest

from dungeon_tilesets.errors import TileRecordError
from dungeon_tilesets.generators.tiles.boundary import CLOSED, UNKNOWN, BoundaryConstraints, Direction
from dungeon_tilesets.generators.tiles.catalog import TileCatalog, load_catalog, load_catalog_async
from dungeon_tilesets.generators.tiles.tile import TileDefinition
from dungeon_tilesets.generators.tiles.tile_storage import (
    get_themes_dir, save_tile_record, tile_from_record,
)

from conftest import make_dead_end_tile, make_open_tile, write_json


def _record(name, size=3, **extra):
    record = {
        "name": name,
        "size": size,
        "edges": {
            "n": [{"type": "door"}] * size,
            "e": [False] * size,
            "s": [False] * size,
            "w": [False] * size,
        },
        "walls": [],
    }
    record.update(extra)
    return record


def _add_tile(theme_dir: Path, record, with_image=True):
    write_json(theme_dir / "tiles" / f"{record['name']}.json", record)
    if with_image:
        (theme_dir / "tiles" / f"{record['name']}.webp").write_bytes(b"RIFF")


def test_find_tiles_bounds_and_order():
    closed = TileDefinition("closet", 3, BoundaryConstraints.uniform(CLOSED, 3))
    catalog = TileCatalog("dungeon", [make_open_tile(), make_dead_end_tile(), closed])

    assert [t.name for t in catalog.find_tiles()] == ["hall", "dead_end", "closet"]
    assert [t.name for t in catalog.find_tiles(min_open=3)] == ["hall", "dead_end"]
    assert [t.name for t in catalog.find_tiles(min_open=4)] == ["hall"]
    assert [t.name for t in catalog.find_tiles(max_open=3)] == ["dead_end", "closet"]
    assert catalog.find_tiles(min_open=13) == []


def test_duplicate_and_invalid_tiles_are_rejected():
    bad = TileDefinition("short", 3, BoundaryConstraints(
        north=(CLOSED,) * 2, east=(CLOSED,) * 3, south=(CLOSED,) * 3, west=(CLOSED,) * 3,
    ))
    catalog = TileCatalog("dungeon", [make_open_tile(), make_open_tile(), bad])
    assert catalog.names() == ["hall"]
    assert catalog.get_validation_result("short").failed
    assert "TILE-001" in catalog.get_validation_result("short").codes()


def test_unknown_segments_are_reported_but_kept():
    tile = TileDefinition("fog", 3, BoundaryConstraints.uniform(UNKNOWN, 3))
    catalog = TileCatalog("dungeon", [tile])
    assert "fog" in catalog
    assert "TILE-004" in catalog.get_validation_result("fog").codes()


def test_loader_reads_theme_directory(tmp_path):
    theme_dir = tmp_path / "dungeon"
    _add_tile(theme_dir, _record("alpha"))
    _add_tile(theme_dir, _record("beta"))

    catalog = load_catalog("dungeon", tiles_root=tmp_path)
    assert catalog.names() == ["alpha", "beta"]
    alpha = catalog.get("alpha")
    assert alpha.image == str(theme_dir / "tiles" / "alpha.webp")
    assert alpha.extent == 600.0
    assert alpha.open_count == 3


def test_loader_skips_missing_images(tmp_path, caplog):
    theme_dir = tmp_path / "dungeon"
    _add_tile(theme_dir, _record("alpha"))
    _add_tile(theme_dir, _record("ghost"), with_image=False)

    with caplog.at_level("WARNING"):
        catalog = load_catalog("dungeon", tiles_root=tmp_path)
    assert catalog.names() == ["alpha"]
    assert "ghost" in caplog.text

    unchecked = load_catalog("dungeon", tiles_root=tmp_path, check_images=False)
    assert unchecked.names() == ["alpha", "ghost"]


def test_loader_skips_malformed_records(tmp_path):
    theme_dir = tmp_path / "dungeon"
    _add_tile(theme_dir, _record("alpha"))
    broken = _record("broken")
    del broken["size"]
    _add_tile(theme_dir, broken)
    _add_tile(theme_dir, _record("huge", extent="huge"))
    _add_tile(theme_dir, _record("numbered", walls=[{"c": [0, 0, 0, 600], "side": 3}]))
    _add_tile(theme_dir, _record("scattered", walls={"c": [0, 0, 0, 600]}))
    (theme_dir / "tiles" / "garbage.json").write_text("{not json", encoding="utf-8")

    catalog = load_catalog("dungeon", tiles_root=tmp_path)
    assert catalog.names() == ["alpha"]


def test_missing_theme_gives_empty_catalog(tmp_path):
    catalog = load_catalog("nowhere", tiles_root=tmp_path)
    assert len(catalog) == 0


def test_async_loader(tmp_path):
    theme_dir = tmp_path / "dungeon"
    for name in ("a", "b", "c", "d"):
        _add_tile(theme_dir, _record(name))
    catalog = asyncio.run(load_catalog_async("dungeon", tiles_root=tmp_path))
    assert catalog.names() == ["a", "b", "c", "d"]


def test_default_themes_dir_is_under_home(isolated_home):
    assert get_themes_dir() == isolated_home / ".config" / "dungeon_tilesets" / "themes"


def test_clockwise_records_are_reordered():
    record = _record("corner")
    record["edges"]["s"] = [{"type": "door"}, False, False]  # east end first
    record["edges"]["w"] = [None, False, False]  # south end first
    tile = tile_from_record(record)
    assert tile.boundary.south[2].is_open
    assert tile.boundary.south[0].is_closed
    assert tile.boundary.west[2].is_unknown


def test_axis_records_keep_their_order():
    record = _record("corner", winding="axis")
    record["edges"]["s"] = [{"type": "door"}, False, False]
    tile = tile_from_record(record)
    assert tile.boundary.south[0].is_open


def test_wall_side_is_inferred_when_absent():
    record = _record("walls", walls=[{"c": [0, 0, 0, 600]}, {"c": [0, 590, 600, 590]}])
    tile = tile_from_record(record)
    assert len(tile.walls[Direction.WEST]) == 1
    assert len(tile.walls[Direction.SOUTH]) == 1


def test_bad_records_raise():
    with pytest.raises(TileRecordError):
        tile_from_record({"name": "x", "size": 3, "edges": {"n": []}})
    with pytest.raises(TileRecordError):
        tile_from_record(_record("x", walls=[{"c": [0, 0]}]))
    with pytest.raises(TileRecordError):
        tile_from_record(_record("x", winding="zigzag"))
    with pytest.raises(TileRecordError):
        tile_from_record(_record("x", extent=[600]))
    with pytest.raises(TileRecordError):
        tile_from_record(_record("x", walls=[{"c": [0, 0, 0, 600], "side": 3}]))


def test_saved_records_load_back(tmp_path):
    tile = make_dead_end_tile()
    save_tile_record(tile, tmp_path / "dungeon")

    catalog = load_catalog("dungeon", tiles_root=tmp_path, check_images=False)
    loaded = catalog.get("dead_end")
    assert loaded.boundary == tile.boundary
    assert loaded.walls == tile.walls
    assert loaded.extent == tile.extent
