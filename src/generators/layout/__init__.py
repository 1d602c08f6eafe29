"""
Layout generation: placement grid, adjacency constraints and the
backtracking search that fills the grid with tile variants.
"""

from .grid import Coord, PlacementGrid, PlacementHistory
from .constraints import (
    derive_constraints,
    matches,
    satisfies_all,
    required_open_sides,
    is_required,
)
from .search import (
    LayoutSearchEngine,
    SearchOutcome,
    SearchState,
    SelectionPolicy,
    AttemptResult,
    CancellationToken,
    SIZE_PRESETS,
    MAX_ALLOWED_ATTEMPTS,
    rooms_for_preset,
)

__all__ = [
    # Grid
    'Coord',
    'PlacementGrid',
    'PlacementHistory',
    # Constraints
    'derive_constraints',
    'matches',
    'satisfies_all',
    'required_open_sides',
    'is_required',
    # Search
    'LayoutSearchEngine',
    'SearchOutcome',
    'SearchState',
    'SelectionPolicy',
    'AttemptResult',
    'CancellationToken',
    'SIZE_PRESETS',
    'MAX_ALLOWED_ATTEMPTS',
    'rooms_for_preset',
]
