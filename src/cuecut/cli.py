"""Command line entry point"""
import os
import sys
import json
import shutil
import argparse

from .config import SplitConfig, DEFAULT_TEMPLATE, DEFAULT_FORMAT
from .errors import CueCutError
from .core.file_finder import resolve_inputs
from .core.job_orchestrator import FirstError, split_sheets
from .utils.helpers import safe_print, make_logger


def parse_arguments(argv=None):
    """Parse command line arguments and environment variables"""
    # Read defaults from environment variables
    env_threads = int(os.environ.get("CUECUT_THREADS", "0")) or None
    env_format = os.environ.get("CUECUT_FORMAT", DEFAULT_FORMAT)
    env_output_dir = os.environ.get("CUECUT_OUTPUT_DIR", ".")
    env_template = os.environ.get("CUECUT_TEMPLATE", DEFAULT_TEMPLATE)

    parser = argparse.ArgumentParser(
        prog="cuecut",
        description="Split audio disc images into per-track files using CUE sheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
INPUT can be either a directory (searched recursively) or a CUE sheet file.
If no inputs are given, the current directory is used.

Examples:
  %(prog)s -o ~/Music rips/
  %(prog)s -f ogg -F=-qscale:a -F=6 album.cue
  %(prog)s -t 3 -t 4 -n "{track.number|pad}. {track.title}" album.cue

Template fields:
  disc.performer disc.artist disc.title disc.date disc.genre disc.tracks
  track.number track.title track.performer
  Filters: |pad (zero-pad numbers), |default:TEXT. Optional group: [ ... ]

Environment Variables:
  CUECUT_THREADS     - Number of parallel extraction workers
  CUECUT_FORMAT      - Output format
  CUECUT_OUTPUT_DIR  - Output directory
  CUECUT_TEMPLATE    - File naming template
"""
    )

    parser.add_argument("inputs", nargs="*", metavar="INPUT", help="Directory or CUE sheet")
    parser.add_argument(
        "-o", "--output-dir",
        default=env_output_dir,
        help=f"Output directory (default: {env_output_dir}, env: CUECUT_OUTPUT_DIR)"
    )
    parser.add_argument(
        "-f", "--format",
        default=env_format,
        help=f"Output format; any format ffmpeg can write (default: {env_format}, env: CUECUT_FORMAT)"
    )
    parser.add_argument(
        "-F", "--ffmpeg-arg",
        action="append", default=[], dest="ffmpeg_args",
        help='Add an argument to ffmpeg, repeatable. Example: "-F=-qscale:a -F=2"'
    )
    parser.add_argument(
        "-t", "--track",
        action="append", type=int, default=[], dest="tracks",
        help='Extract only this track number, repeatable. Example: "-t 1 -t 2"'
    )
    parser.add_argument(
        "-n", "--name",
        default=env_template, dest="template",
        help="File naming template (default: %(default)s, env: CUECUT_TEMPLATE)"
    )
    parser.add_argument(
        "-j", "--threads",
        type=int, default=env_threads,
        help="Number of parallel extraction workers (default: CPU count, env: CUECUT_THREADS)"
    )
    parser.add_argument("-d", "--dry-run", action="store_true", help="Only print the files that would be written")
    parser.add_argument("--json", action="store_true", help="Dump all parsed inputs as JSON to stdout instead of the dry-run listing")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print errors")
    parser.add_argument("--log-file", help="Append log messages and ffmpeg output to this file")

    args = parser.parse_args(argv)
    if args.threads is not None and args.threads < 1:
        parser.error("--threads must be at least 1")
    return args


def build_config(args):
    """Turn parsed arguments into a SplitConfig"""
    return SplitConfig(
        template=args.template,
        output_dir=args.output_dir,
        output_format=args.format,
        extra_args=tuple(args.ffmpeg_args),
        tracks=frozenset(args.tracks),
        concurrency=args.threads,
        dry_run=args.dry_run,
        log_file=args.log_file,
    )


def main(argv=None):
    """Main entry point. Returns the process exit code."""
    args = parse_arguments(argv)
    config = build_config(args)
    log = make_logger(args.log_file, quiet=args.quiet)

    if not config.dry_run and shutil.which("ffmpeg") is None:
        log("❌ ffmpeg not found in PATH", error=True)
        return 1

    first_error = FirstError()
    try:
        sheets = resolve_inputs(args.inputs, log)
        if not sheets:
            log("❌ No CUE sheets found", error=True)
            return 1
        log(f"🔍 Found {len(sheets)} CUE sheet(s)")
        discs, jobs = split_sheets(sheets, config, log=log, first_error=first_error)
    except CueCutError as e:
        log(f"💥 {e}", error=True)
        return 1

    if args.json:
        safe_print(json.dumps([disc.to_dict() for disc in discs], ensure_ascii=False))
    elif config.dry_run:
        for job in jobs:
            safe_print(job.destination)

    log(f"✅ Done: {len(jobs)} track(s) from {len(discs)} disc(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
