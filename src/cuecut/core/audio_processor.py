"""Per-track audio extraction through ffmpeg"""
import os

from ..errors import ExtractionError
from ..utils.helpers import run_command, null_log


def format_seconds(milliseconds):
    """Render milliseconds as an ffmpeg time duration (``S.mmm``)"""
    seconds, millis = divmod(milliseconds, 1000)
    return f"{seconds}.{millis:03d}"


def _metadata_args(job):
    disc, track = job.disc, job.track
    tags = [
        ("title", track.title),
        ("artist", track.performer or disc.performer),
        ("album_artist", disc.performer),
        ("album", disc.title),
        ("date", disc.date),
        ("genre", disc.genre),
        ("track", f"{track.number}/{disc.track_count}"),
    ]
    args = []
    for key, value in tags:
        if value:
            args += ["-metadata", f"{key}={value}"]
    return args


def build_command(job, extra_args=()):
    """
    Build the ffmpeg command line for one extraction job.

    Seeking is done on the input (``-ss`` before ``-i``) and the length is
    bounded with ``-t`` so the window is exact for any container. Tags from
    the source are dropped and replaced with the sheet's metadata.

    Args:
        job: ExtractionJob
        extra_args: Arguments inserted right before the destination

    Returns:
        Command and arguments as a list
    """
    cmd = [
        "ffmpeg", "-nostdin", "-hide_banner", "-loglevel", "error", "-y",
        "-ss", format_seconds(job.start),
        "-i", job.disc.source_path,
    ]
    if job.end is not None:
        cmd += ["-t", format_seconds(job.end - job.start)]
    cmd += ["-map", "0:a", "-map_metadata", "-1"]
    cmd += _metadata_args(job)
    cmd += list(extra_args)
    cmd.append(job.destination)
    return cmd


def extract_track(job, config, log=None, logfile=None):
    """
    Extract one track to its destination.

    Args:
        job: ExtractionJob to perform
        config: SplitConfig supplying passthrough ffmpeg arguments
        log: Function to call for logging messages
        logfile: Optional path to a log file for ffmpeg's output

    Raises:
        ExtractionError: If ffmpeg cannot be started or exits with a non-zero code
    """
    log = log or null_log
    disc, track = job.disc, job.track

    parent = os.path.dirname(job.destination)
    if parent:
        os.makedirs(parent, exist_ok=True)

    log(f"✂️ Track {track.number}/{disc.track_count} → {job.destination}")
    cmd = build_command(job, config.extra_args)
    try:
        exit_code, output = run_command(cmd, logfile)
    except OSError as e:
        raise ExtractionError(f"could not run ffmpeg: {e}", disc.sheet_path, track.number) from e

    if exit_code != 0:
        lines = output.strip().splitlines()
        reason = lines[-1] if lines else "no output"
        raise ExtractionError(
            f"ffmpeg failed with exit code {exit_code}: {reason}",
            disc.sheet_path, track.number,
        )
    log(f"✅ Track {track.number}/{disc.track_count} done")
