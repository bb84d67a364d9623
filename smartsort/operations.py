"""
Core file operations for SmartSort.

These functions perform the actual file system operations (listing, mkdir, rename).
They report through an injected Reporter to separate concerns from the CLI,
and return per-file outcomes as LogEntry values instead of raising.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Set

from . import __version__
from .config import ConfigurationError, RunConfig, DEFAULT_CONFIG
from .output import ConfirmCallback, ConsoleReporter, Reporter
from .report import Action, LogEntry, RunLog, Summary, persist_log, show_summary, summarize
from .utils import (
    date_bucket,
    get_extension,
    resolve_destination,
    should_skip_directory,
    should_skip_file,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileTask:
    """Everything needed to place one file."""

    source: Path
    extension: str
    category: str
    bucket: Optional[str]
    destination: Path

    @property
    def is_noop(self) -> bool:
        """True when the file is already where it belongs."""
        return self.destination == self.source

    @property
    def destination_root(self) -> Path:
        """The category folder next to the source that the move goes into."""
        return self.source.parent / self.category


@dataclass
class RunResult:
    """Result of a complete run."""

    run_log: RunLog = field(default_factory=RunLog)
    summary: Summary = field(default_factory=Summary)
    cancelled: bool = False
    log_file: Optional[Path] = None
    log_error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.summary.error_count == 0 and self.log_error is None


def _default_reporter() -> Reporter:
    """Default reporter that prints to stdout."""
    return ConsoleReporter()


def build_task(file_path: Path, config: RunConfig = DEFAULT_CONFIG, root: Optional[Path] = None) -> FileTask:
    """
    Classify a file and work out its destination.

    Args:
        file_path: File to place
        config: Configuration to use
        root: Directory being organised (limits already-placed detection)

    Returns:
        FileTask for the file

    Raises:
        OSError: If the modification time is needed and cannot be read
    """
    extension = get_extension(file_path)
    category = config.get_category(extension)

    bucket = None
    if config.date_organisation:
        bucket = date_bucket(file_path.stat().st_mtime, config)

    destination = resolve_destination(file_path, category, bucket, root=root)
    return FileTask(
        source=file_path,
        extension=extension,
        category=category,
        bucket=bucket,
        destination=destination,
    )


def _failed(source: Path, destination: Path, cause: str, reporter: Reporter) -> LogEntry:
    reporter.error(f"Error moving {source.name}: {cause}")
    return LogEntry(source, destination, Action.FAILED, success=False, error=cause)


def move_file(
    source: Path,
    destination: Path,
    dry_run: bool = False,
    reporter: Optional[Reporter] = None,
) -> LogEntry:
    """
    Move (or simulate moving) one file.

    In dry-run mode nothing is touched. In live mode the destination
    directory is created with all missing parents and the file is renamed.
    An existing destination is never overwritten.

    Args:
        source: File to move
        destination: Target path
        dry_run: If True, only report the intended move
        reporter: Where to report progress

    Returns:
        Exactly one LogEntry describing the outcome
    """
    if reporter is None:
        reporter = _default_reporter()

    if dry_run:
        reporter.info(f"[DRY RUN] Would move: {source.name} → {destination.parent}")
        return LogEntry(source, destination, Action.DRY_RUN, success=False)

    try:
        if destination.exists() or destination.is_symlink():
            return _failed(source, destination, f"Destination already exists: {destination}", reporter)
        destination.parent.mkdir(parents=True, exist_ok=True)
        source.rename(destination)
    except OSError as e:
        return _failed(source, destination, str(e), reporter)

    reporter.info(f"Moved: {source.name} → {destination.parent}")
    return LogEntry(source, destination, Action.MOVED, success=True)


@dataclass
class _WalkState:
    """Bookkeeping shared across one traversal."""

    # Category folders that did not exist before this run moved a file in
    created: Set[Path] = field(default_factory=set)
    # Paths files were moved to this run; they are not visited again
    moved: Set[Path] = field(default_factory=set)


def _process_file(
    file_path: Path,
    root: Path,
    config: RunConfig,
    reporter: Reporter,
    state: _WalkState,
) -> LogEntry:
    try:
        task = build_task(file_path, config, root=root)
    except OSError as e:
        return _failed(file_path, file_path, f"Could not read file metadata: {e}", reporter)

    logger.debug("%s -> %s (category=%s, bucket=%s)", file_path, task.destination, task.category, task.bucket)

    if task.is_noop:
        return LogEntry(file_path, task.destination, Action.SKIPPED, success=True)

    root_existed = task.destination_root.exists()
    entry = move_file(file_path, task.destination, dry_run=config.dry_run, reporter=reporter)

    if entry.action is Action.MOVED:
        state.moved.add(task.destination)
        if not root_existed:
            state.created.add(task.destination_root)
    return entry


def _walk(
    directory: Path,
    root: Path,
    config: RunConfig,
    reporter: Reporter,
    run_log: RunLog,
    state: _WalkState,
) -> None:
    # Snapshot entries so moves made below don't change what we iterate
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        reporter.warning(f"Could not read directory {directory}: {e}")
        return

    for entry in entries:
        if entry.is_dir():
            if entry in state.created:
                logger.debug("Not descending into destination created this run: %s", entry)
                continue
            if should_skip_directory(entry, config):
                logger.debug("Skipping directory: %s", entry)
                continue
            _walk(entry, root, config, reporter, run_log, state)
            continue

        if not entry.is_file():
            continue

        if entry in state.moved:
            logger.debug("Already moved this run: %s", entry)
            continue

        if should_skip_file(entry, config):
            logger.debug("Skipping file: %s", entry)
            continue

        run_log.append(_process_file(entry, root, config, reporter, state))


def walk_directory(
    root: Path,
    config: RunConfig = DEFAULT_CONFIG,
    reporter: Optional[Reporter] = None,
) -> RunLog:
    """
    Organise every file below `root` into category subfolders.

    Traversal is pre-order and depth-first. Each directory's entries are
    snapshotted before any of them is processed, so a category folder
    created while processing a directory is not in that directory's
    listing. Folders created as move destinations are also never descended
    into, as a second guard for listings that already name them. Files
    moved into a folder that is walked later in the run (a category folder
    that already existed) are not visited again, so every file gets exactly
    one log entry per run.

    Args:
        root: Directory to organise
        config: Configuration to use
        reporter: Where to report progress

    Returns:
        RunLog with one entry per file processed

    Raises:
        ConfigurationError: If root is not a directory
    """
    if reporter is None:
        reporter = _default_reporter()

    if not root.is_dir():
        raise ConfigurationError(f"'{root}' is not a valid directory")

    run_log = RunLog()
    _walk(root, root, config, reporter, run_log, _WalkState())
    return run_log


def organise(
    root: Path,
    config: RunConfig = DEFAULT_CONFIG,
    reporter: Optional[Reporter] = None,
    confirm: Optional[ConfirmCallback] = None,
) -> RunResult:
    """
    Run SmartSort once over a directory tree.

    Validates the root, asks for confirmation in interactive mode, walks the
    tree, shows the summary and (unless dry-run) appends the run log to the
    log file.

    Args:
        root: Directory to organise
        config: Configuration to use
        reporter: Where to report progress
        confirm: Asked once before any change in interactive mode;
            a missing callback counts as "no"

    Returns:
        RunResult with the log, summary and overall success

    Raises:
        ConfigurationError: If root is missing or not a directory
    """
    if reporter is None:
        reporter = _default_reporter()

    if not root.is_dir():
        raise ConfigurationError(f"'{root}' is not a valid directory")
    root = root.resolve()

    result = RunResult()

    reporter.info(f"SmartSort v{__version__} - Scanning: {root}")
    reporter.info("Mode: " + ("Dry Run" if config.dry_run else "Live"))

    if config.interactive:
        reporter.info("Interactive mode: enabled")
        if confirm is None or not confirm("Continue with organisation?"):
            reporter.info("Operation cancelled.")
            result.cancelled = True
            return result

    result.run_log = walk_directory(root, config, reporter)
    result.summary = summarize(result.run_log)
    show_summary(result.summary, reporter, dry_run=config.dry_run)

    if not config.dry_run:
        try:
            result.log_file = persist_log(result.run_log, config.log_file)
        except OSError as e:
            result.log_error = str(e)
            reporter.error(f"Could not write log file {config.log_file}: {e}")
        else:
            reporter.info(f"Log written to: {result.log_file}")

    return result
