from dungeon_tilesets.generators.layout.constraints import (
    derive_constraints, is_required, matches, required_open_sides, satisfies_all,
)
from dungeon_tilesets.generators.layout.grid import PlacementGrid
from dungeon_tilesets.generators.tiles.boundary import CLOSED, UNKNOWN, Direction, Open
from dungeon_tilesets.generators.tiles.tile import blank_variant
from dungeon_tilesets.generators.tiles.transform import transform

from conftest import make_dead_end_tile, make_open_tile


def test_corner_cell_is_closed_toward_the_outside():
    grid = PlacementGrid(3, 3)
    c = derive_constraints(grid, 0, 0)
    assert c.north == (CLOSED,) * 3
    assert c.west == (CLOSED,) * 3
    assert c.east == (UNKNOWN,) * 3
    assert c.south == (UNKNOWN,) * 3


def test_placed_neighbour_side_is_copied_verbatim():
    grid = PlacementGrid(3, 3)
    variant = transform(make_dead_end_tile(), 90)  # open toward the east
    grid.place(0, 1, variant)
    c = derive_constraints(grid, 1, 1)
    assert c.west == variant.boundary.east
    assert all(seg.is_open for seg in c.west)


def test_unknown_matches_anything():
    assert matches((Open(), CLOSED, UNKNOWN), (UNKNOWN, UNKNOWN, UNKNOWN))


def test_closed_requires_closed():
    assert matches((CLOSED,), (CLOSED,))
    assert not matches((Open(),), (CLOSED,))
    assert not matches((UNKNOWN,), (CLOSED,))


def test_open_requires_open_and_ignores_kind():
    assert matches((Open("door"),), (Open("hallway"),))
    assert not matches((CLOSED,), (Open(),))


def test_length_mismatch_does_not_match():
    assert not matches((CLOSED, CLOSED), (CLOSED,))


def test_blank_fits_only_without_open_demands():
    grid = PlacementGrid(3, 3)
    blank = blank_variant(3)
    assert satisfies_all(blank, derive_constraints(grid, 0, 0))

    grid.place(1, 1, transform(make_open_tile(), 0))
    c = derive_constraints(grid, 1, 0)
    assert required_open_sides(c) == 1
    assert not satisfies_all(blank, c)


def test_required_cells_face_an_opening():
    grid = PlacementGrid(3, 3)
    grid.place(1, 1, transform(make_dead_end_tile(), 0))  # open toward the north
    assert is_required(grid, 1, 0)
    assert not is_required(grid, 0, 1)
    assert not is_required(grid, 1, 1)


def test_neighbour_offsets():
    grid = PlacementGrid(3, 3)
    assert grid.neighbor(1, 1, Direction.NORTH) == (1, 0)
    assert grid.neighbor(1, 1, Direction.EAST) == (2, 1)
    assert grid.neighbor(0, 0, Direction.WEST) is None
