"""
Run log, summary and log-file persistence.

Every processed file produces exactly one LogEntry. The RunLog collects
them in processing order; `summarize` aggregates them and `persist_log`
appends them to the log file after a live run.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .output import Reporter

logger = logging.getLogger(__name__)

LOG_HEADER = "SmartSort Operation"


class Action(str, Enum):
    """What happened to a file."""

    DRY_RUN = "dry_run"
    MOVED = "moved"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class LogEntry:
    """Outcome for a single file. Never modified once created."""

    source: Path
    destination: Path
    action: Action
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used in the log file."""
        return {
            "from": str(self.source),
            "to": str(self.destination),
            "action": self.action.value,
            "success": self.success,
            "error": self.error,
        }


class RunLog:
    """Append-only, ordered list of LogEntry for one invocation."""

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> List[LogEntry]:
        """A copy of the entries, in processing order."""
        return list(self._entries)

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class Summary:
    """Counts for one run, plus the failed entries."""

    total: int = 0
    moved_count: int = 0
    skipped_count: int = 0
    dry_run_count: int = 0
    error_count: int = 0
    errors: List[LogEntry] = field(default_factory=list)


def summarize(run_log: RunLog) -> Summary:
    """
    Aggregate a run log.

    Only `moved` entries count as moves and only `failed` entries count as
    errors. Dry-run entries carry success=False but are not failures.

    Args:
        run_log: Entries of the run

    Returns:
        Summary with counts and failed entries
    """
    summary = Summary()
    for entry in run_log:
        summary.total += 1
        if entry.action is Action.MOVED:
            summary.moved_count += 1
        elif entry.action is Action.SKIPPED:
            summary.skipped_count += 1
        elif entry.action is Action.DRY_RUN:
            summary.dry_run_count += 1
        elif entry.action is Action.FAILED:
            summary.error_count += 1
            summary.errors.append(entry)
    return summary


def show_summary(summary: Summary, reporter: Reporter, dry_run: bool = False) -> None:
    """
    Report the end-of-run summary, itemizing every failure.

    Args:
        summary: Summary to show
        reporter: Where to send the lines
        dry_run: Whether the run was a simulation
    """
    reporter.info("\n" + "=" * 50)
    reporter.info("SUMMARY:")
    reporter.info(f"Files processed: {summary.total}")
    if dry_run:
        reporter.info(f"Would move: {summary.dry_run_count}")
    reporter.info(f"Successfully moved: {summary.moved_count}")
    reporter.info(f"Already in place: {summary.skipped_count}")
    reporter.info(f"Errors: {summary.error_count}")

    if summary.errors:
        reporter.warning("\nErrors:")
        for entry in summary.errors:
            reporter.warning(f" - {entry.source}: {entry.error}")


def format_log_block(run_log: RunLog, now: Optional[datetime] = None) -> str:
    """
    Render one run as a log-file block.

    The block is a timestamp header line, the JSON list of entries and a
    blank separator line.
    """
    if now is None:
        now = datetime.now()
    header = f"{now.strftime('%Y-%m-%d %H:%M:%S')} - {LOG_HEADER}\n"
    body = json.dumps(run_log.to_list(), indent=4)
    return f"{header}{body}\n\n"


def persist_log(
    run_log: RunLog,
    log_file: Path,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> Optional[Path]:
    """
    Append the run log to the log file.

    Args:
        run_log: Entries of the run
        log_file: File to append to (created with its parents if missing)
        dry_run: If True, nothing is written
        now: Timestamp for the header (optional, for testing)

    Returns:
        The log file path, or None in dry-run mode

    Raises:
        OSError: If the log file cannot be written
    """
    if dry_run:
        logger.debug("Dry run: not writing %d entries to %s", len(run_log), log_file)
        return None

    log_file.parent.mkdir(parents=True, exist_ok=True)
    with log_file.open("a", encoding="utf-8") as f:
        f.write(format_log_block(run_log, now=now))

    logger.debug("Appended %d entries to %s", len(run_log), log_file)
    return log_file
