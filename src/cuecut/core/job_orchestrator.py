"""Job orchestration and parallel processing"""
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from ..errors import ExtractionError, InputError, TemplateError
from ..utils.helpers import null_log
from .boundaries import boundaries
from .naming import NameTemplate
from .sheet_parser import load_sheet
from .audio_processor import extract_track

PENDING = "pending"
DISPATCHED = "dispatched"
SUCCEEDED = "succeeded"
FAILED = "failed"


class FirstError:
    """
    Single-assignment cell holding the first extraction failure.

    Shared by every worker of an invocation. Only the first ``set`` wins;
    later writers are told the slot is already taken and keep their error
    to themselves.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._error = None

    def set(self, error):
        """Store ``error`` if the slot is empty. Returns True if it was stored."""
        with self._lock:
            if self._error is not None:
                return False
            self._error = error
            return True

    def is_set(self):
        with self._lock:
            return self._error is not None

    @property
    def error(self):
        with self._lock:
            return self._error


@dataclass
class ExtractionJob:
    """One track of one disc, bound to its window and destination"""

    disc: object
    track: object
    start: int
    end: int
    destination: str
    state: str = PENDING

    def __str__(self):
        return f"{self.disc.sheet_path} track {self.track.number}"


def plan_jobs(discs, template, config):
    """
    Create the extraction jobs for every selected track of every disc.

    Args:
        discs: Parsed Discs in discovery order
        template: NameTemplate for destination paths
        config: SplitConfig

    Returns:
        List of ExtractionJob

    Raises:
        ValidationError: If a disc has inconsistent track boundaries
        TemplateError: If a path cannot be rendered, or two tracks render to the same file
    """
    jobs = []
    claimed = {}
    for disc in discs:
        for boundary in boundaries(disc):
            if not config.wants(boundary.track):
                continue
            relative = template.render(disc, boundary.track)
            destination = os.path.join(
                config.output_dir, f"{relative}.{config.output_format}"
            )
            # Case-insensitive volumes (macOS, SMB) treat these as one file
            key = os.path.normcase(os.path.normpath(destination)).casefold()
            if key in claimed:
                raise TemplateError(
                    f"renders to {destination}, already used by {claimed[key]}",
                    disc.sheet_path, boundary.track.number,
                )
            job = ExtractionJob(
                disc=disc,
                track=boundary.track,
                start=boundary.start,
                end=boundary.end,
                destination=destination,
            )
            claimed[key] = str(job)
            jobs.append(job)
    return jobs


def run_jobs(jobs, extract, concurrency=None, first_error=None, log=None):
    """
    Run every job on a bounded thread pool, failing fast on the first error.

    Jobs that are already running when a failure is recorded run to
    completion; jobs that have not started by then are never started and
    stay pending.

    Args:
        jobs: ExtractionJobs to run
        extract: Callable performing one job, raising ExtractionError on failure
        concurrency: Maximum number of parallel workers (None = auto)
        first_error: FirstError slot shared by the whole invocation
        log: Function to call for logging messages

    Returns:
        The jobs, each in a terminal state, if nothing failed

    Raises:
        ExtractionError: The first failure, once every running job has finished
    """
    log = log or null_log
    slot = first_error if first_error is not None else FirstError()

    if concurrency is None:
        concurrency = os.cpu_count() or 1
    concurrency = max(1, min(concurrency, len(jobs) or 1))

    def dispatch(job):
        if slot.is_set():
            return job
        job.state = DISPATCHED
        try:
            extract(job)
        except ExtractionError as e:
            job.state = FAILED
            error = e
        except Exception as e:
            job.state = FAILED
            error = ExtractionError(str(e), job.disc.sheet_path, job.track.number)
            error.__cause__ = e
        else:
            job.state = SUCCEEDED
            return job

        if slot.set(error):
            log(f"❌ {error}", error=True)
            log("🛑 No new tracks will be started; waiting for running tracks to finish")
        else:
            log(f"⚠️ {error}")
        return job

    log(f"🔧 Extracting {len(jobs)} track(s) with {concurrency} parallel worker(s)")
    with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="extract") as executor:
        futures = [executor.submit(dispatch, job) for job in jobs]
        for future in as_completed(futures):
            future.result()

    if slot.error is not None:
        raise slot.error

    log(f"📊 Summary: {sum(1 for j in jobs if j.state == SUCCEEDED)} track(s) extracted")
    return jobs


def split_sheets(sheet_paths, config, extract=None, log=None, first_error=None):
    """
    Split every disc described by the given sheets.

    All sheets are parsed and every job is planned before anything is
    extracted, so one malformed sheet aborts the whole batch with no output
    written.

    Args:
        sheet_paths: CUE sheet paths in discovery order
        config: SplitConfig
        extract: Callable performing one job; defaults to ffmpeg extraction
        log: Function to call for logging messages
        first_error: FirstError slot shared by the whole invocation

    Returns:
        Tuple of (discs, jobs)

    Raises:
        InputError, FormatError, ValidationError, TemplateError: Before any extraction
        ExtractionError: The first extraction failure
    """
    log = log or null_log
    template = NameTemplate(config.template)

    discs = []
    for sheet_path in sheet_paths:
        log(f"📄 Reading {sheet_path}")
        try:
            disc = load_sheet(sheet_path, log)
        except OSError as e:
            raise InputError(f"cannot read sheet: {e.strerror or e}", sheet_path) from e
        log(f"✅ {disc.track_count} track(s) from {disc.source_path}")
        discs.append(disc)

    jobs = plan_jobs(discs, template, config)
    if config.dry_run:
        log(f"📝 Dry run: {len(jobs)} track(s) planned, nothing extracted")
        return discs, jobs

    if extract is None:
        def extract(job):
            extract_track(job, config, log, config.log_file)

    run_jobs(jobs, extract, config.workers, first_error, log)
    return discs, jobs
