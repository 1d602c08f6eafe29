"""
Generator settings and their persistence.

Settings are saved as JSON to ~/.config/dungeon_tilesets/settings.json.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from dungeon_tilesets.errors import SettingsError
from dungeon_tilesets.generators.layout.search import (
    DEFAULT_ROOM_SIZE, MAX_ALLOWED_ATTEMPTS, SIZE_PRESETS, SelectionPolicy,
)
from dungeon_tilesets.generators.tiles.tile import DEFAULT_PIXELS_PER_UNIT

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


@dataclass
class GeneratorSettings:
    # Layout
    size_preset: str = "small"
    entrance_count: int = 1  # reserved, not enforced
    room_size: int = DEFAULT_ROOM_SIZE
    pixels_per_unit: int = DEFAULT_PIXELS_PER_UNIT

    # Search
    max_attempts: int = MAX_ALLOWED_ATTEMPTS
    selection_policy: str = SelectionPolicy.FRONTIER.value
    seed: Optional[int] = None  # None = random seed, otherwise deterministic

    # Validation
    strict_validation: bool = False

    # Tiles
    theme: str = "dungeon"
    tiles_root: Optional[str] = None
    check_images: bool = True

    def validate(self) -> None:
        """
        Check the settings for consistency.

        Raises:
            SettingsError: Listing every problem found
        """
        errors = []
        if self.size_preset not in SIZE_PRESETS:
            errors.append(f"Size preset must be one of {', '.join(SIZE_PRESETS)}")
        if self.room_size < 1:
            errors.append("Room size must be at least 1")
        if self.pixels_per_unit < 1:
            errors.append("Pixels per unit must be at least 1")
        if self.max_attempts < 1:
            errors.append("Max attempts must be at least 1")
        if self.entrance_count < 0:
            errors.append("Entrance count cannot be negative")
        try:
            SelectionPolicy(self.selection_policy)
        except ValueError:
            errors.append(
                f"Selection policy must be one of {', '.join(p.value for p in SelectionPolicy)}"
            )
        if not self.theme:
            errors.append("Theme name is required")
        if errors:
            raise SettingsError(f"Invalid settings: {'; '.join(errors)}")

    @property
    def policy(self) -> SelectionPolicy:
        return SelectionPolicy(self.selection_policy)

    @property
    def rooms(self) -> int:
        return SIZE_PRESETS[self.size_preset]


def get_config_dir() -> Path:
    """
    Get the directory for storing generator settings.

    Returns:
        Path to ~/.config/dungeon_tilesets/
    """
    return Path.home() / ".config" / "dungeon_tilesets"


def _settings_to_dict(settings: GeneratorSettings) -> Dict[str, Any]:
    """Convert GeneratorSettings to a JSON-serializable dictionary."""
    return asdict(settings)


def _dict_to_settings(data: Dict[str, Any]) -> GeneratorSettings:
    """Create GeneratorSettings from a dictionary, ignoring unknown keys."""
    known = {f.name for f in fields(GeneratorSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
    return GeneratorSettings(**{k: v for k, v in data.items() if k in known})


def save_settings(settings: GeneratorSettings, path: Optional[Path] = None) -> Path:
    """
    Save settings as JSON.

    Args:
        settings: Settings to save
        path: Target file (defaults to the config directory)

    Returns:
        Path to the saved file
    """
    if path is None:
        path = get_config_dir() / SETTINGS_FILENAME
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(_settings_to_dict(settings), f, indent=2)

    return path


def load_settings(path: Optional[Path] = None) -> GeneratorSettings:
    """
    Load settings from JSON.

    A missing file yields defaults; an unreadable or invalid file is logged
    and also yields defaults.

    Args:
        path: Source file (defaults to the config directory)

    Returns:
        GeneratorSettings
    """
    if path is None:
        path = get_config_dir() / SETTINGS_FILENAME
    path = Path(path)

    if not path.exists():
        return GeneratorSettings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError("settings file must hold an object")
        settings = _dict_to_settings(data)
        settings.validate()
        return settings
    except (OSError, json.JSONDecodeError, TypeError, SettingsError) as e:
        logger.warning("Could not load settings from %s (%s); using defaults", path, e)
        return GeneratorSettings()
