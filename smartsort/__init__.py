"""
SmartSort - Automated file organisation.

This package moves files within a directory tree into category subfolders
based on their extension and, optionally, their modification date.
"""

__version__ = "1.0.0"

from .config import CategoryRules, ConfigurationError, RunConfig, load_config
from .operations import (
    FileTask,
    RunResult,
    build_task,
    move_file,
    organise,
    walk_directory,
)
from .report import Action, LogEntry, RunLog, Summary, persist_log, summarize

__all__ = [
    "Action",
    "CategoryRules",
    "ConfigurationError",
    "FileTask",
    "LogEntry",
    "RunConfig",
    "RunLog",
    "RunResult",
    "Summary",
    "build_task",
    "load_config",
    "move_file",
    "organise",
    "persist_log",
    "summarize",
    "walk_directory",
]
