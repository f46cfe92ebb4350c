"""
cuecut - split a continuous audio disc image into per-track files

This package provides functionality to:
- Parse CUE sheets into an ordered, validated track list
- Compute per-track extraction windows
- Render collision-free output paths from a naming template
- Extract all tracks in parallel with fail-fast error handling
"""

__version__ = "1.0.0"
__author__ = "cuecut Project"
