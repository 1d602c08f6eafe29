#!/usr/bin/env python3
"""
Dungeon Tilesets - Command Line Entry Point

Runs the layout generator CLI. Equivalent to the ``dungeon-tilesets``
console script.
"""

import sys

from dungeon_tilesets.cli import main

if __name__ == "__main__":
    sys.exit(main())
