"""Utility functions and helpers"""

from .helpers import safe_print, make_logger, null_log, run_command
from .encoding import decode_sheet, read_sheet_text

__all__ = [
    "safe_print",
    "make_logger",
    "null_log",
    "run_command",
    "decode_sheet",
    "read_sheet_text",
]
