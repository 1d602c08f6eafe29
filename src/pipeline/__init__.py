"""
Dungeon layout generation pipeline.

Provides the generator facade, its settings and settings persistence.
"""

from .settings import (
    GeneratorSettings,
    get_config_dir,
    save_settings,
    load_settings,
)

from .generator import (
    DungeonGenerator,
    GenerationFailure,
    GenerationStats,
    generate,
    settings_from_options,
)

__all__ = [
    # Settings
    'GeneratorSettings',
    'get_config_dir',
    'save_settings',
    'load_settings',
    # Generator
    'DungeonGenerator',
    'GenerationFailure',
    'GenerationStats',
    'generate',
    'settings_from_options',
]
