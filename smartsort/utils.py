"""
Pure utility functions for SmartSort.

These functions are stateless and have no side effects (except reading file metadata).
They are easy to unit test in isolation.
"""

import os
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

from .config import CategoryRules, RunConfig, DEFAULT_CONFIG

Timestamp = Union[float, int, datetime]


def get_extension(file_path: Path) -> str:
    """
    Get the lowercase extension of a file without the leading dot.

    Args:
        file_path: Path to the file

    Returns:
        Extension like "jpg", or "" when the name has none

    Example:
        >>> get_extension(Path("photo.JPG"))
        'jpg'
        >>> get_extension(Path("archive.tar.gz"))
        'gz'
    """
    return file_path.suffix.lower().lstrip(".")


def get_file_mtime(file_path: Path) -> datetime:
    """
    Get the modification time of a file as a datetime object.

    Args:
        file_path: Path to the file

    Returns:
        Datetime of last modification (local time)
    """
    return datetime.fromtimestamp(file_path.stat().st_mtime)


def classify(extension: str, rules: CategoryRules) -> str:
    """
    Map a file extension to its category name.

    Args:
        extension: File extension, with or without dot, any case
        rules: Ordered category rules

    Returns:
        First category whose extension set contains the extension,
        otherwise the catch-all category
    """
    return rules.get_category(extension)


def get_category(file_path: Path, config: RunConfig = DEFAULT_CONFIG) -> str:
    """
    Determine the category for a file based on its extension.

    Args:
        file_path: Path to the file
        config: Configuration to use

    Returns:
        Category name (e.g., "images", "documents", "other")
    """
    return classify(get_extension(file_path), config.rules)


def date_bucket(mtime: Timestamp, config: RunConfig = DEFAULT_CONFIG) -> Optional[str]:
    """
    Derive the date subfolder name for a modification time.

    Args:
        mtime: POSIX timestamp or datetime of last modification
        config: Configuration to use (date_organisation, date_format)

    Returns:
        Formatted bucket name like "2024-03", or None if date
        organisation is disabled
    """
    if not config.date_organisation:
        return None
    if not isinstance(mtime, datetime):
        mtime = datetime.fromtimestamp(mtime)
    return mtime.strftime(config.date_format)


_SEPARATORS = re.compile("|".join(re.escape(sep) for sep in {"/", os.sep, os.altsep} if sep))


def bucket_segments(bucket: Optional[str]) -> Tuple[str, ...]:
    """
    Split a date bucket into folder names.

    Formats like "%Y/%m" produce nested folders, so "2024/03" becomes
    ("2024", "03"). Empty and "." parts are dropped.

    Example:
        >>> bucket_segments("2024/03")
        ('2024', '03')
        >>> bucket_segments(None)
        ()
    """
    if bucket is None:
        return ()
    return tuple(part for part in _SEPARATORS.split(bucket) if part not in ("", "."))


def _is_already_placed(parent: Path, segments: tuple, root: Optional[Path]) -> bool:
    if len(parent.parts) < len(segments):
        return False
    if parent.parts[len(parent.parts) - len(segments):] != segments:
        return False
    if root is None:
        return True

    # The category folder must live below root, not be root itself
    try:
        relative = parent.relative_to(root)
    except ValueError:
        return False
    return len(relative.parts) >= len(segments)


def resolve_destination(
    source: Path,
    category: str,
    bucket: Optional[str] = None,
    root: Optional[Path] = None,
) -> Path:
    """
    Compute where a file should live.

    The destination is the source's parent directory plus the category
    folder (plus the date bucket folder, if any). The file name is never
    changed. A file that already sits in a matching category/bucket folder
    resolves to its own path, which means there is nothing to do.

    Args:
        source: Current path of the file
        category: Category folder name
        bucket: Optional date bucket; path separators in it nest folders
        root: Directory being organised; when given, only folders strictly
            below it count as already placed

    Returns:
        Destination path (equal to source for already placed files)
    """
    segments = (category,) + bucket_segments(bucket)
    parent = source.parent

    if _is_already_placed(parent, segments, root):
        return source

    return parent.joinpath(*segments, source.name)


def should_skip_file(file_path: Path, config: RunConfig = DEFAULT_CONFIG) -> bool:
    """
    Check if a file should be left alone by the walker.

    Skips hidden files (when configured) and the run's own log file.

    Args:
        file_path: Path to the file
        config: Configuration to use

    Returns:
        True if file should be skipped
    """
    if config.skip_hidden and config.is_hidden(file_path.name):
        return True

    try:
        return file_path.resolve() == config.log_file.resolve()
    except OSError:
        return False


def should_skip_directory(dir_path: Path, config: RunConfig = DEFAULT_CONFIG) -> bool:
    """
    Check if a directory should not be descended into.

    Skips symlinked directories (to avoid cycles) and hidden directories
    (when configured).
    """
    if dir_path.is_symlink():
        return True
    return config.skip_hidden and config.is_hidden(dir_path.name)
