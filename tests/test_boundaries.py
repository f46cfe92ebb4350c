"""Tests for track boundary computation."""

import pytest

from cuecut.core.boundaries import Boundary, boundaries
from cuecut.core.sheet_parser import Disc, Track, parse
from cuecut.errors import ValidationError


class TestBoundaries:
    """Test [start, end) windows."""

    def test_three_tracks(self, sample_sheet):
        """Test windows of a three track disc with an open-ended last track."""
        result = boundaries(parse(sample_sheet))

        assert [(b.start, b.end) for b in result] == [
            (0, 180000),
            (180000, 450000),
            (450000, None),
        ]
        assert [b.track.number for b in result] == [1, 2, 3]

    def test_single_track_is_open_ended(self):
        """Test a single track runs to the end of the source."""
        disc = Disc("a.cue", "a.flac", tracks=(Track(number=1, start=2000),))

        assert boundaries(disc) == [Boundary(disc.tracks[0], 2000, None)]

    def test_deterministic(self, sample_sheet):
        """Test the same disc always yields the same boundaries."""
        disc = parse(sample_sheet)

        assert boundaries(disc) == boundaries(disc)

    def test_end_after_start(self, sample_sheet):
        """Test every closed window ends after it starts."""
        for boundary in boundaries(parse(sample_sheet)):
            assert boundary.end is None or boundary.end > boundary.start

    def test_identical_starts_rejected(self):
        """Test a hand-built disc with shared starts fails validation."""
        disc = Disc(
            "dup.cue", "dup.flac",
            tracks=(Track(1, 0), Track(2, 60000), Track(3, 60000)),
        )

        with pytest.raises(ValidationError) as excinfo:
            boundaries(disc)

        assert excinfo.value.track == 2
        assert "dup.cue: track 2: " in str(excinfo.value)

    def test_decreasing_starts_rejected(self):
        """Test a hand-built disc with out of order starts fails validation."""
        disc = Disc("x.cue", "x.flac", tracks=(Track(1, 5000), Track(2, 1000)))

        with pytest.raises(ValidationError):
            boundaries(disc)

    def test_negative_start_rejected(self):
        """Test a negative offset fails validation."""
        disc = Disc("x.cue", "x.flac", tracks=(Track(1, -1),))

        with pytest.raises(ValidationError, match="negative"):
            boundaries(disc)
