import pytest

from dungeon_tilesets.conversion.layout_export import LayoutExport
from dungeon_tilesets.errors import ErrorKind, GenerationCancelled, SettingsError
from dungeon_tilesets.generators.tiles.catalog import TileCatalog
from dungeon_tilesets.pipeline.generator import (
    DungeonGenerator, GenerationFailure, generate, settings_from_options,
)
from dungeon_tilesets.pipeline.settings import GeneratorSettings

from conftest import ROOM, make_open_tile


def _settings(**kwargs):
    kwargs.setdefault("room_size", ROOM)
    kwargs.setdefault("seed", 5)
    return GeneratorSettings(**kwargs)


def test_generate_returns_export(two_tile_catalog):
    generator = DungeonGenerator(two_tile_catalog, _settings())
    result = generator.generate()
    assert isinstance(result, LayoutExport)
    assert result.canvas_width == 3 * ROOM * 200
    assert 1 <= len(result.tiles) <= 9
    assert generator.stats.seed == 5
    assert generator.stats.filled_cells == 9
    assert generator.stats.validation.passed


def test_same_seed_same_export(two_tile_catalog):
    first = DungeonGenerator(two_tile_catalog, _settings(seed=21)).generate()
    second = DungeonGenerator(two_tile_catalog, _settings(seed=21)).generate()
    assert first == second


def test_budget_exhaustion_is_returned_as_failure():
    catalog = TileCatalog("dungeon", [make_open_tile()])
    result = DungeonGenerator(catalog, _settings(max_attempts=12)).generate()
    assert isinstance(result, GenerationFailure)
    assert not result.success
    assert result.kind is ErrorKind.BUDGET_EXHAUSTED
    assert result.attempts == 12
    assert result.seed == 5
    assert result.partial.canvas_width == 3 * ROOM * 200


def test_size_preset_override(two_tile_catalog):
    generator = DungeonGenerator(two_tile_catalog, _settings())
    generator.generate(size_preset="medium", entrance_count=2)
    assert generator.stats.total_cells == 25
    assert generator.stats.metrics["entrance_count"] == 2
    assert generator.settings.size_preset == "small"


def test_unknown_preset_is_rejected(two_tile_catalog):
    with pytest.raises(SettingsError):
        DungeonGenerator(two_tile_catalog, _settings()).generate(size_preset="vast")


def test_cancel_from_progress_callback(two_tile_catalog):
    generator = DungeonGenerator(two_tile_catalog, _settings(size_preset="medium"))
    generator.set_progress_callback(lambda attempts, filled, total: generator.cancel())
    with pytest.raises(GenerationCancelled):
        generator.generate()
    assert not generator.is_running


def test_module_level_generate_accepts_short_options(two_tile_catalog):
    result = generate(two_tile_catalog, {"size": "small", "entrances": 1,
                                         "seed": 3, "room_size": ROOM})
    assert isinstance(result, LayoutExport)


def test_options_mapping():
    settings = settings_from_options({"size": "large", "policy": "adjacent"})
    assert settings.size_preset == "large"
    assert settings.selection_policy == "adjacent"
    with pytest.raises(SettingsError):
        settings_from_options({"colour": "red"})
