"""
Error kinds and exceptions for tileset loading and layout generation.

Recoverable conditions (a missing image, a placement with no candidates, an
exhausted attempt budget) are reported as values or log records; only
conditions that end a run or reject a request are raised.
"""

from enum import Enum


class ErrorKind(Enum):
    """Categories of problems reported by the loader and the generator."""
    MISSING_ASSET = "missing_asset"
    NO_SATISFYING_VARIANT = "no_satisfying_variant"
    BUDGET_EXHAUSTED = "budget_exhausted"
    EMPTY_HISTORY_BACKTRACK = "empty_history_backtrack"
    CANCELLED = "cancelled"


class TilesetError(Exception):
    """Base class for all errors raised by this package."""
    pass


class TileRecordError(TilesetError):
    """A tile record could not be parsed."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class MissingAssetError(TilesetError):
    """A tile's image reference does not resolve."""
    kind = ErrorKind.MISSING_ASSET

    def __init__(self, tile_name: str, image: str):
        self.tile_name = tile_name
        self.image = image
        super().__init__(f"Tile '{tile_name}' image not found: {image}")


class SettingsError(TilesetError):
    """Generator settings are invalid."""
    pass


class GenerationError(TilesetError):
    """A generation run ended abnormally."""
    kind: ErrorKind = ErrorKind.NO_SATISFYING_VARIANT


class EmptyHistoryBacktrack(GenerationError):
    """Backtracking was requested with nothing placed: the first placement failed."""
    kind = ErrorKind.EMPTY_HISTORY_BACKTRACK


class GenerationCancelled(GenerationError):
    """The run's cancellation token was triggered."""
    kind = ErrorKind.CANCELLED
