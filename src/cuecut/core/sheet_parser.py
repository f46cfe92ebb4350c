"""CUE sheet parsing into the Disc/Track model"""
import os
import re
from dataclasses import dataclass, replace

from ..errors import FormatError
from ..utils.encoding import read_sheet_text
from .file_finder import resolve_audio_file

FRAMES_PER_SECOND = 75

# ASCII digits only; str.isdigit also accepts superscripts that int() rejects
_NUMBER = re.compile(r"[0-9]+")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

# Fields that may appear once at disc level, keyed by command
_DISC_TEXT_FIELDS = {"PERFORMER": "performer", "TITLE": "title"}
_DISC_REM_FIELDS = {"DATE": "date", "GENRE": "genre"}
_TRACK_TEXT_FIELDS = {"PERFORMER": "performer", "TITLE": "title", "ISRC": "isrc"}


@dataclass(frozen=True)
class Track:
    """One extractable segment of a disc image. ``start`` is in milliseconds."""

    number: int
    start: int
    title: str = None
    performer: str = None
    isrc: str = None

    def to_dict(self):
        return {
            "number": self.number,
            "start": self.start,
            "title": self.title,
            "performer": self.performer,
            "isrc": self.isrc,
        }


@dataclass(frozen=True)
class Disc:
    """
    One parsed sheet.

    Attributes:
        sheet_path: Path of the CUE file, or None for text parsed directly
        source_path: Audio image the sheet describes
        performer: Disc-level PERFORMER
        title: Disc-level TITLE
        date: REM DATE
        genre: REM GENRE
        tracks: Tracks ordered by strictly increasing start offset
    """

    sheet_path: str
    source_path: str
    performer: str = None
    title: str = None
    date: str = None
    genre: str = None
    tracks: tuple = ()

    @property
    def track_count(self):
        return len(self.tracks)

    def to_dict(self):
        return {
            "sheet_path": self.sheet_path,
            "source_path": self.source_path,
            "performer": self.performer,
            "title": self.title,
            "date": self.date,
            "genre": self.genre,
            "tracks": [track.to_dict() for track in self.tracks],
        }


def parse_timestamp(value, path=None, line=None):
    """
    Convert a CUE ``MM:SS:FF`` timestamp to milliseconds.

    Frames are 1/75 s and are rounded to the nearest millisecond.

    Raises:
        FormatError: If the value is not three numeric fields or a field is out of range
    """
    parts = value.split(":")
    if len(parts) != 3 or not all(_NUMBER.fullmatch(p) for p in parts):
        raise FormatError(f"invalid timestamp {value!r}, expected MM:SS:FF", path, line)
    minutes, seconds, frames = (int(p) for p in parts)
    if seconds >= 60:
        raise FormatError(f"seconds out of range in timestamp {value!r}", path, line)
    if frames >= FRAMES_PER_SECOND:
        raise FormatError(f"frames out of range in timestamp {value!r}", path, line)
    return (minutes * 60 + seconds) * 1000 + round(frames * 1000 / FRAMES_PER_SECOND)


def _unquote(value, path, line):
    if value.startswith('"'):
        if len(value) < 2 or not value.endswith('"'):
            raise FormatError(f"unterminated quoted value: {value}", path, line)
        return value[1:-1]
    return value


def _parse_file_field(rest, path, line):
    """Split ``"name" TYPE`` into the file name; the type is not needed."""
    if rest.startswith('"'):
        end = rest.rfind('"')
        if end == 0:
            raise FormatError(f"unterminated quoted value: {rest}", path, line)
        name = rest[1:end]
    else:
        name = rest.split()[0] if rest else ""
    if not name:
        raise FormatError("FILE without a file name", path, line)
    return name


def _parse_track_number(rest, previous, path, line):
    args = rest.split()
    if not args or (len(args) == 1 and args[0].isalpha()):
        return previous + 1
    if not _NUMBER.fullmatch(args[0]):
        raise FormatError(f"invalid track number {args[0]!r}", path, line)
    number = int(args[0])
    if number < 1:
        raise FormatError("track numbers start at 1", path, line)
    if number <= previous:
        raise FormatError(
            f"track number {number} does not follow track {previous}", path, line
        )
    return number


def _finish_track(pending, previous_start, path):
    if pending["start"] is None:
        raise FormatError(
            f"track {pending['number']} has no INDEX 01", path, pending["line"]
        )
    if previous_start is not None and pending["start"] <= previous_start:
        raise FormatError(
            f"track {pending['number']} does not start after the previous track",
            path, pending["start_line"],
        )
    return Track(
        number=pending["number"],
        start=pending["start"],
        title=pending["title"],
        performer=pending["performer"],
        isrc=pending["isrc"],
    )


def parse(text, path=None):
    """
    Parse CUE sheet text into a Disc.

    Args:
        text: Sheet contents
        path: Path the text was read from, used to resolve the FILE directive
            and to name the sheet in errors

    Returns:
        Disc with at least one track

    Raises:
        FormatError: If the text is not a well-formed single-file sheet
    """
    disc_fields = {}
    file_name = None
    tracks = []
    pending = None

    for lineno, raw_line in enumerate(_LINE_BREAK.split(text.lstrip("\ufeff")), 1):
        line = raw_line.strip()
        if not line:
            continue
        parts = line.split(None, 1)
        command = parts[0].upper()
        rest = parts[1].strip() if len(parts) > 1 else ""

        if command == "FILE":
            if file_name is not None:
                raise FormatError("only one FILE per sheet is supported", path, lineno)
            file_name = _parse_file_field(rest, path, lineno)

        elif command == "TRACK":
            previous = pending["number"] if pending else 0
            if pending:
                tracks.append(_finish_track(
                    pending, tracks[-1].start if tracks else None, path
                ))
            pending = {
                "number": _parse_track_number(rest, previous, path, lineno),
                "line": lineno,
                "start": None,
                "start_line": None,
                "title": None,
                "performer": None,
                "isrc": None,
            }

        elif command == "INDEX":
            if pending is None:
                raise FormatError("INDEX before any TRACK", path, lineno)
            args = rest.split()
            if len(args) != 2 or not _NUMBER.fullmatch(args[0]):
                raise FormatError(f"malformed INDEX line: {line}", path, lineno)
            offset = parse_timestamp(args[1], path, lineno)
            if int(args[0]) == 1:
                if pending["start"] is not None:
                    raise FormatError("duplicate INDEX 01", path, lineno)
                pending["start"] = offset
                pending["start_line"] = lineno

        elif command == "REM":
            key, _, value = rest.replace("\t", " ").partition(" ")
            field = _DISC_REM_FIELDS.get(key.upper())
            if field and pending is None:
                if field in disc_fields:
                    raise FormatError(f"duplicate REM {key.upper()}", path, lineno)
                disc_fields[field] = _unquote(value.strip(), path, lineno) or None

        elif pending is not None and command in _TRACK_TEXT_FIELDS:
            field = _TRACK_TEXT_FIELDS[command]
            if pending[field] is not None:
                raise FormatError(
                    f"duplicate {command} in track {pending['number']}", path, lineno
                )
            pending[field] = _unquote(rest, path, lineno)

        elif pending is None and command in _DISC_TEXT_FIELDS:
            field = _DISC_TEXT_FIELDS[command]
            if field in disc_fields:
                raise FormatError(f"duplicate disc-level {command}", path, lineno)
            disc_fields[field] = _unquote(rest, path, lineno) or None

    if pending:
        tracks.append(_finish_track(pending, tracks[-1].start if tracks else None, path))
    if not tracks:
        raise FormatError("sheet has no tracks", path)
    if file_name is None:
        raise FormatError("sheet has no FILE directive", path)

    source_path = file_name
    if path:
        source_path = os.path.join(os.path.dirname(path), file_name)

    return Disc(
        sheet_path=path,
        source_path=source_path,
        tracks=tuple(tracks),
        **disc_fields,
    )


def load_sheet(cue_path, log_func=None):
    """
    Read and parse a CUE sheet file, resolving the audio image it refers to.

    Args:
        cue_path: Path to the CUE file
        log_func: Function to call for logging messages

    Returns:
        Disc

    Raises:
        FormatError: If the sheet is malformed
        OSError: If the sheet cannot be read
    """
    disc = parse(read_sheet_text(cue_path, log_func), cue_path)
    source_path = resolve_audio_file(cue_path, disc.source_path, log_func)
    return replace(disc, source_path=source_path)
