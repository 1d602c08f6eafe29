"""
Dungeon Tilesets: constraint-based dungeon layout generation from room tiles.
"""

__version__ = "0.1.0"
