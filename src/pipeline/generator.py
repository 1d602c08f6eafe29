"""
Dungeon generator facade.

Runs one layout search over a tile catalog and exports the result:
- Completed layouts are validated and returned as a LayoutExport
- Exhausted attempt budgets are returned as a GenerationFailure carrying
  the partial grid and its partial export
- Cancellation and a failed first placement are raised
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional, Union

from dungeon_tilesets.conversion.layout_export import LayoutExport, export_layout
from dungeon_tilesets.errors import ErrorKind, SettingsError
from dungeon_tilesets.generators.layout.grid import PlacementGrid
from dungeon_tilesets.generators.layout.search import (
    CancellationToken, LayoutSearchEngine, SearchOutcome,
)
from dungeon_tilesets.generators.tiles.catalog import TileCatalog
from dungeon_tilesets.validation.checks.layout_checks import validate_layout
from dungeon_tilesets.validation.core import ValidationError, ValidationResult

from .settings import GeneratorSettings

logger = logging.getLogger(__name__)

# Option keys accepted by generate() in addition to GeneratorSettings fields
OPTION_ALIASES = {
    "size": "size_preset",
    "entrances": "entrance_count",
    "policy": "selection_policy",
}


@dataclass
class GenerationFailure:
    """A run that ended without a complete layout."""
    kind: ErrorKind
    message: str
    attempts: int
    grid: PlacementGrid
    partial: LayoutExport
    seed: Optional[int] = None

    @property
    def success(self) -> bool:
        return False


@dataclass
class GenerationStats:
    """Bookkeeping of the most recent run."""
    seed: Optional[int] = None
    attempts: int = 0
    backtracks: int = 0
    filled_cells: int = 0
    total_cells: int = 0
    elapsed: float = 0.0
    validation: Optional[ValidationResult] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


class DungeonGenerator:
    """Generates tile layouts from a catalog.

    Example:
        generator = DungeonGenerator(catalog, GeneratorSettings(seed=7))
        result = generator.generate(size_preset="medium")
        if isinstance(result, GenerationFailure):
            ...
    """

    def __init__(self, catalog: TileCatalog, settings: Optional[GeneratorSettings] = None):
        self.catalog = catalog
        self.settings = settings or GeneratorSettings()
        self.settings.validate()
        self.is_running = False
        self.stats = GenerationStats()
        self.progress_callback: Optional[Callable[[int, int, int], None]] = None
        self._cancel_token: Optional[CancellationToken] = None

    # -- helpers --

    def set_progress_callback(self, callback: Callable[[int, int, int], None]):
        self.progress_callback = callback

    def cancel(self):
        """Request cancellation of the running generation."""
        if self._cancel_token is not None:
            self._cancel_token.cancel()

    def _resolve_seed(self) -> int:
        if self.settings.seed is not None:
            return self.settings.seed
        return random.randint(0, 2**31 - 1)

    def _validate(self, outcome: SearchOutcome) -> ValidationResult:
        result = validate_layout(outcome.grid, outcome.history)
        for issue in result.errors:
            logger.error(str(issue))
        for issue in result.warnings:
            logger.warning(str(issue))
        if result.failed and self.settings.strict_validation:
            raise ValidationError(result)
        return result

    # -- main entry --

    def generate(self, size_preset: Optional[str] = None,
                 entrance_count: Optional[int] = None) -> Union[LayoutExport, GenerationFailure]:
        """
        Generate one layout.

        Args:
            size_preset: small, medium or large (defaults to the settings)
            entrance_count: Reserved; recorded but not enforced

        Returns:
            LayoutExport on success, GenerationFailure when the attempt
            budget runs out

        Raises:
            SettingsError: If the preset is unknown
            GenerationCancelled: If cancel() was called during the run
            EmptyHistoryBacktrack: If the first placement could not be made
            ValidationError: If strict validation is enabled and the
                completed layout has FAIL issues
        """
        settings = self.settings
        if size_preset is not None or entrance_count is not None:
            settings = replace(
                settings,
                size_preset=size_preset if size_preset is not None else settings.size_preset,
                entrance_count=entrance_count if entrance_count is not None else settings.entrance_count,
            )
            settings.validate()

        seed = self._resolve_seed()
        self.stats = GenerationStats(seed=seed)
        self._cancel_token = CancellationToken()
        self.is_running = True
        start_time = time.time()

        logger.info("Generation seed: %d", seed)
        logger.info("Starting layout generation: theme '%s', size %s (%dx%d rooms), %d tile(s)",
                    self.catalog.theme, settings.size_preset, settings.rooms, settings.rooms,
                    len(self.catalog))

        try:
            engine = LayoutSearchEngine(
                self.catalog,
                rooms=settings.rooms,
                room_size=settings.room_size,
                max_attempts=settings.max_attempts,
                rng=random.Random(seed),
                policy=settings.policy,
                cancel_token=self._cancel_token,
                progress_callback=self.progress_callback,
            )
            outcome = engine.run()
        finally:
            self.is_running = False
            self._cancel_token = None

        export = export_layout(outcome.grid, settings.room_size, settings.pixels_per_unit)

        self.stats.attempts = outcome.attempts
        self.stats.backtracks = outcome.backtracks
        self.stats.filled_cells = outcome.grid.filled_count()
        self.stats.total_cells = outcome.grid.cell_count
        self.stats.elapsed = time.time() - start_time
        self.stats.metrics.update({
            'tiles': len(export.tiles),
            'walls': len(export.walls),
            'entrance_count': settings.entrance_count,
        })

        if not outcome.completed:
            return GenerationFailure(
                kind=ErrorKind.BUDGET_EXHAUSTED,
                message=(f"Failed to generate a valid layout after {outcome.attempts} attempts"),
                attempts=outcome.attempts,
                grid=outcome.grid,
                partial=export,
                seed=seed,
            )

        self.stats.validation = self._validate(outcome)
        logger.info("Generation complete in %.2fs: %d tile(s), %d wall(s)",
                    self.stats.elapsed, len(export.tiles), len(export.walls))
        return export


def settings_from_options(options: Optional[Dict[str, Any]] = None,
                          base: Optional[GeneratorSettings] = None) -> GeneratorSettings:
    """
    Build settings from a plain options mapping.

    Accepts GeneratorSettings field names and the short aliases ``size``,
    ``entrances`` and ``policy``.

    Raises:
        SettingsError: For unknown option names or invalid values
    """
    base = base or GeneratorSettings()
    values: Dict[str, Any] = {}
    known = set(base.__dataclass_fields__)
    for key, value in (options or {}).items():
        name = OPTION_ALIASES.get(key, key)
        if name not in known:
            raise SettingsError(f"Unknown generator option: {key}")
        values[name] = value
    settings = replace(base, **values)
    settings.validate()
    return settings


def generate(catalog: TileCatalog,
             options: Optional[Dict[str, Any]] = None) -> Union[LayoutExport, GenerationFailure]:
    """
    Generate a layout with one-off options.

    Args:
        catalog: Tile catalog to draw from
        options: e.g. ``{"size": "medium", "entrances": 1, "seed": 42}``

    Returns:
        LayoutExport or GenerationFailure
    """
    return DungeonGenerator(catalog, settings_from_options(options)).generate()
