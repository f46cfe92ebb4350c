"""Configuration shared by the parser pipeline, path renderer and scheduler"""
import os
from dataclasses import dataclass, field

DEFAULT_TEMPLATE = (
    "{disc.performer}/[{disc.date} - ]{disc.title|default:Unknown Album}"
    "/{track.number|pad} - {track.title}"
)
DEFAULT_FORMAT = "flac"


@dataclass(frozen=True)
class SplitConfig:
    """
    Options for one invocation.

    Attributes:
        template: Naming template for output files (without extension)
        output_dir: Directory the rendered paths are relative to
        output_format: Output container/extension, anything ffmpeg can write
        extra_args: Additional arguments passed through to ffmpeg
        tracks: Track numbers to extract; empty means every track
        concurrency: Worker count; None means one per CPU core
        dry_run: Plan and report jobs without extracting anything
        log_file: Optional file receiving log lines and ffmpeg output
    """

    template: str = DEFAULT_TEMPLATE
    output_dir: str = "."
    output_format: str = DEFAULT_FORMAT
    extra_args: tuple = ()
    tracks: frozenset = field(default_factory=frozenset)
    concurrency: int = None
    dry_run: bool = False
    log_file: str = None

    @property
    def workers(self):
        """Effective worker count"""
        return self.concurrency or os.cpu_count() or 1

    def wants(self, track):
        """True if the track passes the selected-track filter"""
        return not self.tracks or track.number in self.tracks
