#!/usr/bin/env python3
"""
cuecut - Main Entry Point

Splits continuous audio disc images into per-track files using CUE sheets.
Features:
- Recursive search for CUE sheets in directory trees
- Strict sheet parsing with exact track boundaries
- Template-based, path-safe output naming
- Parallel per-track extraction with ffmpeg, failing fast on the first error
"""
import os
import sys

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from cuecut.cli import main


if __name__ == "__main__":
    sys.exit(main())
