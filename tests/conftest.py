"""
Pytest fixtures for SmartSort tests.

Provides reusable test fixtures for creating temporary directories,
test files, and a reporter that records what the core says.
"""

import logging
import os
from datetime import datetime
from pathlib import Path

import pytest

from smartsort.config import RunConfig
from smartsort.output import Reporter


class RecordingReporter(Reporter):
    """Reporter that keeps (severity, message) pairs."""

    def __init__(self):
        self.records = []

    def report(self, severity: str, message: str) -> None:
        self.records.append((severity, message))

    @property
    def messages(self) -> list:
        return [message for _, message in self.records]

    def by_severity(self, severity: str) -> list:
        return [message for level, message in self.records if level == severity]


def set_mtime(path: Path, when: datetime) -> None:
    """Set both atime and mtime of a file."""
    timestamp = when.timestamp()
    os.utime(path, (timestamp, timestamp))


def snapshot_tree(root: Path) -> dict:
    """Map every path below root to its bytes (None for directories)."""
    return {
        p.relative_to(root): (None if p.is_dir() else p.read_bytes())
        for p in sorted(root.rglob("*"))
    }


@pytest.fixture(autouse=True)
def reset_smartsort_logger():
    """Undo handler changes made by setup_logging in CLI tests."""
    yield
    logger = logging.getLogger("smartsort")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create a temporary directory to organise."""
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Log file location outside the organised tree."""
    return tmp_path / "logs" / "smartsort.log"


@pytest.fixture
def test_config(log_file: Path) -> RunConfig:
    """Default rules, with the log file kept out of the organised tree."""
    return RunConfig(log_file=log_file)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def sample_files(temp_dir: Path) -> dict:
    """
    Create the four-file scenario: one file per default category plus one
    without an extension.

    Returns a dict mapping file name to its created path.
    """
    files = {}
    for name in ["photo.JPG", "report.pdf", "archive.zip", "notes"]:
        f = temp_dir / name
        f.write_text(f"content of {name}")
        files[name] = f
    return files


@pytest.fixture
def march_file(temp_dir: Path) -> Path:
    """A document last modified in March 2024."""
    f = temp_dir / "minutes.docx"
    f.write_text("minutes")
    set_mtime(f, datetime(2024, 3, 15, 12, 0, 0))
    return f


@pytest.fixture
def hidden_file(temp_dir: Path) -> Path:
    """Create a hidden file (starts with dot)."""
    f = temp_dir / ".hidden_file.txt"
    f.write_text("hidden content")
    return f
