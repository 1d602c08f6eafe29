import random

import pytest

from dungeon_tilesets.errors import EmptyHistoryBacktrack, ErrorKind, GenerationCancelled
from dungeon_tilesets.generators.layout.constraints import matches, required_open_sides, satisfies_all
from dungeon_tilesets.generators.layout.search import (
    CancellationToken, LayoutSearchEngine, SearchState, SelectionPolicy, rooms_for_preset,
)
from dungeon_tilesets.generators.tiles.boundary import CLOSED, UNKNOWN, BoundaryConstraints, Open
from dungeon_tilesets.generators.tiles.catalog import TileCatalog
from dungeon_tilesets.generators.tiles.tile import TileDefinition
from dungeon_tilesets.generators.tiles.transform import enumerate_variants
from dungeon_tilesets.validation.checks.layout_checks import validate_layout

from conftest import ROOM, make_dead_end_tile, make_open_tile


def _engine(catalog, rooms=3, seed=1, **kwargs):
    return LayoutSearchEngine(catalog, rooms=rooms, room_size=ROOM,
                              rng=random.Random(seed), **kwargs)


def test_size_presets():
    assert rooms_for_preset("small") == 3
    assert rooms_for_preset("medium") == 5
    assert rooms_for_preset("large") == 7
    with pytest.raises(ValueError):
        rooms_for_preset("huge")


@pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
def test_open_and_dead_end_catalog_completes(two_tile_catalog, seed):
    outcome = _engine(two_tile_catalog, seed=seed).run()
    assert outcome.state is SearchState.COMPLETE
    assert outcome.completed
    assert outcome.grid.is_full()
    assert len(outcome.history) == outcome.grid.cell_count


@pytest.mark.parametrize("rooms", [3, 5, 7])
def test_dead_end_layouts_are_consistent(rooms):
    catalog = TileCatalog("dungeon", [make_dead_end_tile()])
    outcome = _engine(catalog, rooms=rooms, seed=rooms).run()
    _assert_consistent(outcome)


def test_two_tile_layout_is_consistent(two_tile_catalog):
    _assert_consistent(_engine(two_tile_catalog, seed=7).run())


def _assert_consistent(outcome):
    assert outcome.completed
    grid = outcome.grid

    for x, y, cell in grid.cells():
        for direction, coord in grid.neighbors(x, y):
            edge = cell.boundary.side(direction)
            if coord is None:
                assert all(seg.is_closed for seg in edge)
                continue
            facing = grid.get(*coord).boundary.side(direction.opposite())
            assert matches(edge, facing) and matches(facing, edge)

    assert validate_layout(grid, outcome.history).passed


def test_seed_cell_is_the_centre(two_tile_catalog):
    engine = _engine(two_tile_catalog, rooms=5)
    engine.step()
    assert list(engine.history) == [(2, 2)]
    assert not engine.grid.get(2, 2).is_blank


def test_empty_catalog_fills_with_blanks():
    outcome = _engine(TileCatalog("dungeon")).run()
    assert outcome.completed
    assert all(cell.is_blank for _, _, cell in outcome.grid.cells())


def test_open_only_catalog_exhausts_budget():
    outcome = _engine(TileCatalog("dungeon", [make_open_tile()]), max_attempts=25).run()
    assert outcome.state is SearchState.FAILED
    assert outcome.error_kind is ErrorKind.BUDGET_EXHAUSTED
    assert outcome.attempts == 25
    assert outcome.backtracks > 0


def test_same_seed_same_layout(two_tile_catalog):
    first = _engine(two_tile_catalog, rooms=5, seed=99).run()
    second = _engine(two_tile_catalog, rooms=5, seed=99).run()
    assert first.grid.snapshot() == second.grid.snapshot()
    assert list(first.history) == list(second.history)


def test_run_resets_between_calls(two_tile_catalog):
    engine = _engine(two_tile_catalog)
    engine.run()
    outcome = engine.run()
    assert len(outcome.history) == outcome.grid.cell_count


def test_cancellation_stops_the_search(two_tile_catalog):
    token = CancellationToken()
    engine = _engine(two_tile_catalog, rooms=5, cancel_token=token,
                     progress_callback=lambda attempts, filled, total: token.cancel())
    with pytest.raises(GenerationCancelled):
        engine.run()
    assert engine.attempts == 1


def test_progress_callback_reports_counts(two_tile_catalog):
    calls = []
    _engine(two_tile_catalog, progress_callback=lambda *args: calls.append(args)).run()
    assert calls[0] == (1, 1, 9)
    assert calls[-1][1] == 9


def test_backtrack_with_empty_history_raises(two_tile_catalog):
    engine = _engine(two_tile_catalog)
    with pytest.raises(EmptyHistoryBacktrack):
        engine.backtrack()


def test_adjacent_policy_moves_west_first(two_tile_catalog):
    engine = _engine(two_tile_catalog, policy=SelectionPolicy.ADJACENT)
    engine.step()
    engine.step()
    assert list(engine.history) == [(1, 1), (0, 1)]


def test_variants_are_cached_per_tile(two_tile_catalog):
    engine = _engine(two_tile_catalog)
    tile = two_tile_catalog.get("dead_end")
    assert engine.variants_of(tile) is engine.variants_of(tile)


def test_mismatched_tile_sizes_are_not_placed():
    catalog = TileCatalog("dungeon", [make_dead_end_tile(size=5, name="big"), make_dead_end_tile()])
    outcome = _engine(catalog).run()
    assert outcome.completed
    assert all(cell.size == ROOM for _, _, cell in outcome.grid.cells())


def test_open_side_count_never_hides_a_fitting_tile():
    # One open unit on north and east: two demanding sides, two open units
    elbow = TileDefinition("elbow", ROOM, BoundaryConstraints(
        north=(CLOSED, Open("door"), CLOSED), east=(CLOSED, Open("door"), CLOSED),
        south=(CLOSED,) * ROOM, west=(CLOSED,) * ROOM,
    ))
    catalog = TileCatalog("dungeon", [make_open_tile(), make_dead_end_tile(), elbow])
    engine = _engine(catalog)
    engine.step()

    constraints = BoundaryConstraints(
        north=(UNKNOWN, Open(), UNKNOWN), east=(UNKNOWN, Open(), UNKNOWN),
        south=(CLOSED,) * ROOM, west=(UNKNOWN,) * ROOM,
    )
    assert required_open_sides(constraints) == 2
    assert any(satisfies_all(v, constraints) for v in enumerate_variants(elbow))
    assert elbow in engine.candidate_tiles(required_open_sides(constraints))
