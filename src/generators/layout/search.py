"""
Backtracking layout search.

Fills a PlacementGrid with tile variants so that every shared boundary is
consistent and the grid perimeter stays closed.

Algorithm:
1. The centre cell is seeded with the most open tiles available
2. Next cell: an empty cell that a placed room opens into (a "required"
   cell) if any, else any empty cell (a "filler" cell)
3. Candidate tiles expand into their 12 variants; those satisfying the
   neighbour constraints are eligible and one is chosen at random. When
   none fit, the Blank placeholder is tried
4. A failed attempt undoes the most recent placement (single-step
   backtracking) and the search continues
5. The run completes when no empty cell remains, or fails when the attempt
   budget is spent

States per step: SEEKING -> COMMITTING | BACKTRACKING, ending in COMPLETE
or FAILED. All random choices use the injected ``random.Random``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from dungeon_tilesets.errors import EmptyHistoryBacktrack, ErrorKind, GenerationCancelled
from dungeon_tilesets.generators.tiles.catalog import TileCatalog
from dungeon_tilesets.generators.tiles.tile import TileDefinition, TileVariant, blank_variant
from dungeon_tilesets.generators.tiles.transform import enumerate_variants

from .constraints import derive_constraints, is_required, required_open_sides, satisfies_all
from .grid import Coord, PlacementGrid, PlacementHistory

logger = logging.getLogger(__name__)


# Rooms per grid side for each named size. Odd, so a centre cell exists.
SIZE_PRESETS: Dict[str, int] = {
    "small": 3,
    "medium": 5,
    "large": 7,
}

# Maximum placement attempts before a layout is declared failed
MAX_ALLOWED_ATTEMPTS = 1000

DEFAULT_ROOM_SIZE = 9

# Neighbour probe order for the ADJACENT policy: west, east, north, south
_ADJACENT_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class SearchState(Enum):
    SEEKING = "seeking"
    COMMITTING = "committing"
    BACKTRACKING = "backtracking"
    COMPLETE = "complete"
    FAILED = "failed"


class SelectionPolicy(Enum):
    """How the next cell to fill is chosen.

    FRONTIER: random required cell, else random empty cell
    ADJACENT: first empty neighbour of the last placement, else random empty cell
    """
    FRONTIER = "frontier"
    ADJACENT = "adjacent"


def rooms_for_preset(preset: str) -> int:
    """Grid rooms per side for a size preset name.

    Raises:
        ValueError: For an unknown preset
    """
    try:
        return SIZE_PRESETS[preset]
    except KeyError:
        raise ValueError(
            f"Unknown size preset {preset!r}; expected one of {sorted(SIZE_PRESETS)}"
        ) from None


class CancellationToken:
    """Cooperative cancellation flag, checked once per attempt."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass
class AttemptResult:
    """Outcome of one placement attempt.

    ``variant`` is None when no candidate (not even Blank) fit the cell.
    """
    coord: Coord
    variant: Optional[TileVariant]
    candidates: int = 0

    @property
    def matched(self) -> bool:
        return self.variant is not None


@dataclass
class SearchOutcome:
    """Final state of a search run."""
    state: SearchState
    grid: PlacementGrid
    history: PlacementHistory
    attempts: int
    backtracks: int

    @property
    def completed(self) -> bool:
        return self.state is SearchState.COMPLETE

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        if self.state is SearchState.FAILED:
            return ErrorKind.BUDGET_EXHAUSTED
        return None


ProgressCallback = Callable[[int, int, int], None]


class LayoutSearchEngine:
    """Runs one layout search over a fresh grid.

    Args:
        catalog: Tiles to draw candidates from
        rooms: Grid rooms per side
        room_size: Boundary units per tile side
        max_attempts: Attempt budget
        rng: Random source (a new unseeded one if omitted)
        policy: Next-cell selection policy
        cancel_token: Optional cooperative cancellation token
        progress_callback: Called after each attempt with
            (attempts, filled_cells, total_cells)
    """

    def __init__(
        self,
        catalog: TileCatalog,
        rooms: int,
        room_size: int = DEFAULT_ROOM_SIZE,
        max_attempts: int = MAX_ALLOWED_ATTEMPTS,
        rng: Optional[random.Random] = None,
        policy: SelectionPolicy = SelectionPolicy.FRONTIER,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.catalog = catalog
        self.rooms = rooms
        self.room_size = room_size
        self.max_attempts = max_attempts
        self.rng = rng if rng is not None else random.Random()
        self.policy = policy
        self.cancel_token = cancel_token
        self.progress_callback = progress_callback

        self.grid = PlacementGrid(rooms, room_size)
        self.history = PlacementHistory()
        self.state = SearchState.SEEKING
        self.attempts = 0
        self.backtracks = 0

        self._variants: Dict[str, List[TileVariant]] = {}
        for tile in catalog:
            if tile.size != room_size:
                logger.warning(
                    "Tile '%s' has size %d, layout uses %d; it will not be placed",
                    tile.name, tile.size, room_size,
                )

    # -- run loop --

    def reset(self) -> None:
        """Clear the grid and history for a new run."""
        self.grid = PlacementGrid(self.rooms, self.room_size)
        self.history.clear()
        self.state = SearchState.SEEKING
        self.attempts = 0
        self.backtracks = 0

    def run(self) -> SearchOutcome:
        """Search until the grid is complete or the budget is spent.

        Returns:
            SearchOutcome in state COMPLETE or FAILED

        Raises:
            GenerationCancelled: If the cancellation token is triggered
            EmptyHistoryBacktrack: If the very first placement fails
        """
        self.reset()
        while self.state not in (SearchState.COMPLETE, SearchState.FAILED):
            self.step()

        if self.state is SearchState.COMPLETE:
            logger.info(
                "Layout complete: %dx%d grid after %d attempt(s), %d backtrack(s)",
                self.rooms, self.rooms, self.attempts, self.backtracks,
            )
        else:
            logger.warning(
                "Failed to generate a valid layout after %d attempts (%d of %d cells filled)",
                self.attempts, self.grid.filled_count(), self.grid.cell_count,
            )
        return SearchOutcome(
            state=self.state,
            grid=self.grid,
            history=self.history,
            attempts=self.attempts,
            backtracks=self.backtracks,
        )

    def step(self) -> SearchState:
        """Perform a single placement attempt and return the resulting state."""
        if self.cancel_token is not None and self.cancel_token.cancelled:
            raise GenerationCancelled(f"Layout search cancelled after {self.attempts} attempts")

        if self.grid.is_full():
            self.state = SearchState.COMPLETE
            return self.state
        if self.attempts >= self.max_attempts:
            self.state = SearchState.FAILED
            return self.state

        self.state = SearchState.SEEKING
        coord = self.next_location()
        result = self.attempt(coord)
        self.attempts += 1

        if result.matched:
            self.state = SearchState.COMMITTING
            self._commit(result.coord, result.variant)
        else:
            self.state = SearchState.BACKTRACKING
            logger.debug(
                "[%s] no variant fits (%d, %d); backtracking",
                ErrorKind.NO_SATISFYING_VARIANT.value, coord[0], coord[1],
            )
            self.backtrack()

        if self.progress_callback is not None:
            self.progress_callback(self.attempts, self.grid.filled_count(), self.grid.cell_count)

        if self.grid.is_full():
            self.state = SearchState.COMPLETE
        return self.state

    # -- placement --

    def next_location(self) -> Coord:
        """Choose the next empty cell according to the selection policy."""
        if not self.history:
            return self.grid.center

        empty = self.grid.empty_cells()
        if self.policy is SelectionPolicy.ADJACENT:
            last = self.history.last()
            for dx, dy in _ADJACENT_OFFSETS:
                nx, ny = last[0] + dx, last[1] + dy
                if self.grid.in_bounds(nx, ny) and self.grid.is_empty(nx, ny):
                    return (nx, ny)
            return self.rng.choice(empty)

        required = [c for c in empty if is_required(self.grid, *c)]
        if required:
            return self.rng.choice(required)
        return self.rng.choice(empty)

    def variants_of(self, tile: TileDefinition) -> List[TileVariant]:
        """The 12 variants of a tile, computed once per run."""
        variants = self._variants.get(tile.name)
        if variants is None:
            variants = enumerate_variants(tile)
            self._variants[tile.name] = variants
        return variants

    def candidate_tiles(self, constraints_open_sides: int) -> List[TileDefinition]:
        """Tiles worth expanding for the next cell.

        The seed cell only takes tiles with at least ``room_size`` open units.
        Past the seed this is a cheap pre-screen, not the match: a tile that
        opens on k sides has at least k open units, so bounding open units by
        the number of sides that demand an opening never drops a tile that
        satisfies_all() would accept. Variants are still checked one by one.
        """
        if not self.history:
            tiles = self.catalog.find_tiles(min_open=self.room_size)
        elif constraints_open_sides:
            tiles = self.catalog.find_tiles(min_open=constraints_open_sides)
        else:
            tiles = self.catalog.find_tiles()
        return [t for t in tiles if t.size == self.room_size]

    def attempt(self, coord: Coord) -> AttemptResult:
        """Try to find a variant for ``coord`` without modifying the grid."""
        x, y = coord
        constraints = derive_constraints(self.grid, x, y)
        tiles = self.candidate_tiles(required_open_sides(constraints))

        eligible = [
            variant
            for tile in tiles
            for variant in self.variants_of(tile)
            if satisfies_all(variant, constraints)
        ]
        if not eligible:
            blank = blank_variant(self.room_size)
            if satisfies_all(blank, constraints):
                eligible.append(blank)

        if not eligible:
            return AttemptResult(coord, None, 0)

        chosen = self.rng.choice(eligible)
        return AttemptResult(coord, chosen, len(eligible))

    def _commit(self, coord: Coord, variant: TileVariant) -> None:
        self.grid.place(coord[0], coord[1], variant)
        self.history.push(coord)
        logger.debug("Placed %s at (%d, %d)", variant.describe(), coord[0], coord[1])

    def backtrack(self) -> Coord:
        """Undo the most recent placement.

        Returns:
            The cell that was cleared

        Raises:
            EmptyHistoryBacktrack: If nothing has been placed
        """
        if not self.history:
            raise EmptyHistoryBacktrack("The first placement failed; the layout cannot be built")
        x, y = self.history.pop()
        self.grid.clear(x, y)
        self.backtracks += 1
        return (x, y)
