"""Core functionality modules"""

from .sheet_parser import Disc, Track, parse, load_sheet
from .boundaries import Boundary, boundaries
from .naming import NameTemplate, render, path_safe
from .file_finder import find_cue_sheets, resolve_inputs, resolve_audio_file
from .audio_processor import extract_track
from .job_orchestrator import (
    ExtractionJob,
    FirstError,
    plan_jobs,
    run_jobs,
    split_sheets,
)

__all__ = [
    "Disc",
    "Track",
    "parse",
    "load_sheet",
    "Boundary",
    "boundaries",
    "NameTemplate",
    "render",
    "path_safe",
    "find_cue_sheets",
    "resolve_inputs",
    "resolve_audio_file",
    "extract_track",
    "ExtractionJob",
    "FirstError",
    "plan_jobs",
    "run_jobs",
    "split_sheets",
]
