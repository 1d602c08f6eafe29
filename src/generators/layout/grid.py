"""
Placement grid and history for tile layout generation.

- PlacementGrid: Square matrix of cells indexed [x][y]; each cell is None
  (empty, not yet decided) or a TileVariant (a placed room or the Blank
  placeholder)
- PlacementHistory: Order in which cells were committed, for LIFO backtracking
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from dungeon_tilesets.generators.tiles.boundary import CLOCKWISE, Direction
from dungeon_tilesets.generators.tiles.tile import TileVariant

Coord = Tuple[int, int]


class PlacementGrid:
    """A ``rooms x rooms`` grid of tile placements.

    Args:
        rooms: Number of cells per side
        room_size: Boundary units per tile side
    """

    def __init__(self, rooms: int, room_size: int):
        if rooms < 1:
            raise ValueError(f"Grid needs at least one room per side, got {rooms}")
        self.rooms = rooms
        self.room_size = room_size
        self._cells: List[List[Optional[TileVariant]]] = [
            [None for _ in range(rooms)] for _ in range(rooms)
        ]

    @property
    def center(self) -> Coord:
        mid = self.rooms // 2
        return (mid, mid)

    @property
    def cell_count(self) -> int:
        return self.rooms * self.rooms

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.rooms and 0 <= y < self.rooms

    def get(self, x: int, y: int) -> Optional[TileVariant]:
        return self._cells[x][y]

    def place(self, x: int, y: int, variant: TileVariant) -> None:
        self._cells[x][y] = variant

    def clear(self, x: int, y: int) -> None:
        self._cells[x][y] = None

    def is_empty(self, x: int, y: int) -> bool:
        return self._cells[x][y] is None

    def neighbor(self, x: int, y: int, direction: Direction) -> Optional[Coord]:
        """Coordinates of the neighbour in ``direction``, or None outside the grid."""
        dx, dy = direction.offset
        nx, ny = x + dx, y + dy
        if not self.in_bounds(nx, ny):
            return None
        return (nx, ny)

    def neighbors(self, x: int, y: int) -> Iterator[Tuple[Direction, Optional[Coord]]]:
        for direction in CLOCKWISE:
            yield direction, self.neighbor(x, y, direction)

    def cells(self) -> Iterator[Tuple[int, int, Optional[TileVariant]]]:
        """Iterate all cells, column-major (x outer, y inner)."""
        for x in range(self.rooms):
            for y in range(self.rooms):
                yield x, y, self._cells[x][y]

    def empty_cells(self) -> List[Coord]:
        return [(x, y) for x, y, cell in self.cells() if cell is None]

    def filled_count(self) -> int:
        return sum(1 for _, _, cell in self.cells() if cell is not None)

    def is_full(self) -> bool:
        return all(cell is not None for _, _, cell in self.cells())

    def snapshot(self) -> Tuple[Tuple[str, ...], ...]:
        """Compact, comparable view of the grid (variant labels, '.' for empty)."""
        return tuple(
            tuple(
                cell.describe() if cell is not None else "."
                for cell in column
            )
            for column in self._cells
        )

    def __repr__(self) -> str:
        return f"PlacementGrid(rooms={self.rooms}, filled={self.filled_count()})"


class PlacementHistory:
    """Ordered record of committed cells."""

    def __init__(self):
        self._entries: List[Coord] = []

    def push(self, coord: Coord) -> None:
        self._entries.append(coord)

    def pop(self) -> Coord:
        """Remove and return the most recent entry.

        Raises:
            IndexError: If the history is empty
        """
        return self._entries.pop()

    def last(self) -> Optional[Coord]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, coord: Coord) -> bool:
        return coord in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
