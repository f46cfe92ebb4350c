"""Per-track extraction windows"""
from collections import namedtuple

from ..errors import ValidationError

# end is None for the last track: it runs until the source is exhausted
Boundary = namedtuple("Boundary", ["track", "start", "end"])


def boundaries(disc):
    """
    Compute the ``[start, end)`` window of every track of a disc.

    Args:
        disc: Parsed Disc

    Returns:
        List of Boundary in track order

    Raises:
        ValidationError: If a track starts at a negative offset or would end
            at or before its own start
    """
    tracks = disc.tracks
    result = []
    for i, track in enumerate(tracks):
        if track.start < 0:
            raise ValidationError(
                f"starts at a negative offset ({track.start} ms)",
                disc.sheet_path, track.number,
            )
        end = tracks[i + 1].start if i + 1 < len(tracks) else None
        if end is not None and end <= track.start:
            raise ValidationError(
                f"ends at {end} ms, not after its start at {track.start} ms",
                disc.sheet_path, track.number,
            )
        result.append(Boundary(track, track.start, end))
    return result
