"""General utility functions"""
import sys
import time
import threading
import subprocess


def safe_print(msg, stream=None):
    """Print with handling for surrogate characters that can't be encoded"""
    stream = stream or sys.stdout
    try:
        print(msg, file=stream)
    except UnicodeEncodeError:
        # Replace problematic characters with safe representation
        safe_msg = msg.encode('utf-8', errors='replace').decode('utf-8')
        print(safe_msg, file=stream)
    stream.flush()


def make_logger(logfile=None, quiet=False):
    """
    Build a thread-safe log function.

    The returned callable takes a message and an optional ``error`` flag.
    Messages go to stderr so stdout stays free for data output (destinations,
    JSON). Non-error messages are suppressed when ``quiet`` is set. Every
    message is mirrored into ``logfile`` when one is given.

    Args:
        logfile: Optional path of a file to append log lines to
        quiet: If True, only errors are printed

    Returns:
        Function ``log(msg, error=False)``
    """
    log_lock = threading.Lock()

    def log(msg, error=False):
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        formatted_msg = f"[{timestamp}] {msg}"
        with log_lock:
            if error or not quiet:
                safe_print(formatted_msg, stream=sys.stderr)
            if logfile:
                with open(logfile, "a", encoding="utf-8", errors="replace") as f:
                    f.write(formatted_msg + "\n")

    return log


def null_log(msg, error=False):
    """Log function that discards everything"""


def run_command(cmd, logfile=None, env=None):
    """
    Execute a command and capture its combined output.

    Args:
        cmd: Command and arguments as a list
        logfile: Optional path to a log file the command and its output are appended to
        env: Optional environment variables dict

    Returns:
        Tuple of (exit code, captured output)

    Raises:
        OSError: If the command cannot be started
    """
    result = subprocess.run(
        cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL, check=False, env=env,
        encoding="utf-8", errors="replace",
    )
    output = result.stdout or ""
    if logfile:
        with open(logfile, "a", encoding="utf-8", errors="replace") as f:
            # Handle potential encoding issues in command strings
            try:
                cmd_str = ' '.join(str(c) for c in cmd)
            except UnicodeEncodeError:
                cmd_str = ' '.join(repr(c) for c in cmd)
            f.write(f"\n$ {cmd_str}\n")
            f.write(output)
            f.write(f"[Exit code: {result.returncode}]\n")
    return result.returncode, output
