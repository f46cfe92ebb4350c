"""File discovery and searching utilities"""
import os

from ..errors import InputError
from ..utils.helpers import null_log

AUDIO_EXTENSIONS = (".flac", ".ape", ".wav", ".wv", ".tta", ".m4a")


def _is_cue(name):
    return name.lower().endswith(".cue")


def find_cue_sheets(root_path, log_func=None):
    """
    Recursively search for CUE sheets in root_path and all subdirectories.

    Directories and files are visited in sorted order so the result, and
    therefore the order errors are reported in, is deterministic.

    Args:
        root_path: Root directory to search
        log_func: Optional function to call for logging messages

    Returns:
        List of CUE sheet paths
    """
    log_func = log_func or null_log
    sheets = []

    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames.sort()
        cue_files = sorted(f for f in filenames if _is_cue(f))

        if cue_files:
            rel_dir = os.path.relpath(dirpath, root_path) if dirpath != root_path else "."
            log_func(f"📁 Scanning directory: {rel_dir}")

        for cue_file in cue_files:
            log_func(f"  📄 Found CUE file: {cue_file}")
            sheets.append(os.path.join(dirpath, cue_file))

    return sheets


def resolve_inputs(paths, log_func=None):
    """
    Turn command line inputs into a list of CUE sheet paths.

    Args:
        paths: Directories and/or CUE files; empty means the current directory
        log_func: Optional function to call for logging messages

    Returns:
        List of CUE sheet paths in discovery order

    Raises:
        InputError: If a path does not exist or is neither a directory nor a CUE sheet
    """
    sheets = []
    for path in paths or ["."]:
        if os.path.isdir(path):
            sheets.extend(find_cue_sheets(path, log_func))
        elif not os.path.exists(path):
            raise InputError("no such file or directory", path)
        elif not _is_cue(path):
            raise InputError("only directories and CUE sheets are supported as inputs", path)
        else:
            sheets.append(path)
    return sheets


def _find_case_insensitive(dirpath, name):
    try:
        filenames = os.listdir(dirpath or ".")
    except OSError:
        return None
    for existing_file in filenames:
        if existing_file.lower() == name.lower():
            return os.path.join(dirpath, existing_file)
    return None


def resolve_audio_file(cue_path, audio_path, log_func=None):
    """
    Locate the audio image a CUE sheet refers to.

    Sheets often name a file that was later re-encoded or renamed, so after
    trying the FILE directive as written this falls back to:
    1. A case-insensitive match of the referenced name
    2. cue_basename + audio extensions (e.g., album.cue -> album.flac)
    3. The CUE name minus ``.cue`` when it ends with an audio extension
       (e.g., album.flac.cue -> album.flac)

    Args:
        cue_path: Path to the CUE file
        audio_path: Audio path from the FILE directive, joined to the sheet directory
        log_func: Optional function to call for logging messages

    Returns:
        Path to the audio file, or audio_path unchanged if nothing matched
    """
    log_func = log_func or null_log

    if os.path.exists(audio_path):
        return audio_path

    match = _find_case_insensitive(os.path.dirname(audio_path), os.path.basename(audio_path))
    if match:
        log_func(f"    ✅ Found matching audio file (case-insensitive): {os.path.basename(match)}")
        return match

    dirpath = os.path.dirname(cue_path)
    cue_basename = os.path.splitext(os.path.basename(cue_path))[0]

    log_func(f"    🔍 Fallback: Trying to find audio file with same name as CUE...")
    candidates = [cue_basename + ext for ext in AUDIO_EXTENSIONS]
    if cue_basename.lower().endswith(AUDIO_EXTENSIONS):
        candidates.append(cue_basename)

    for candidate in candidates:
        match = _find_case_insensitive(dirpath, candidate)
        if match:
            log_func(f"    ✅ Found matching audio file: {os.path.basename(match)}")
            return match

    log_func(f"    ❌ Audio file not found: {os.path.basename(audio_path)}")
    return audio_path
