"""Shared fixtures for the cuecut test suite."""

import pytest

from cuecut.core.sheet_parser import Disc, Track

SAMPLE_SHEET = """\
REM GENRE Rock
REM DATE 1999
REM COMMENT "ExactAudioCopy v1.0"
PERFORMER "Some Band"
TITLE "Greatest Hits"
FILE "album.flac" WAVE
  TRACK 01 AUDIO
    TITLE "Intro"
    PERFORMER "Some Band"
    INDEX 01 00:00:00
  TRACK 02 AUDIO
    TITLE "Second Song"
    FLAGS DCP
    INDEX 00 02:58:00
    INDEX 01 03:00:00
  TRACK 03 AUDIO
    TITLE "Finale"
    PERFORMER "Guest Star"
    INDEX 01 07:30:00
"""


def make_disc(count, performer="Artist", title="Album", date=None, sheet_path="disc.cue"):
    """Build a disc with ``count`` tracks one minute apart."""
    tracks = tuple(
        Track(number=n, start=(n - 1) * 60000, title=f"Song {n}")
        for n in range(1, count + 1)
    )
    return Disc(
        sheet_path=sheet_path,
        source_path="disc.flac",
        performer=performer,
        title=title,
        date=date,
        tracks=tracks,
    )


@pytest.fixture
def sample_sheet():
    """Text of a well-formed three track sheet."""
    return SAMPLE_SHEET


@pytest.fixture
def write_sheet(tmp_path):
    """Write sheet text to a .cue file under tmp_path and return its path."""

    def _write(text, name="album.cue", encoding="utf-8"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode(encoding))
        return str(path)

    return _write
