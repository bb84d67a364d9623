"""
Configuration for SmartSort.

Uses frozen dataclasses so one resolved configuration can be built at startup
and passed explicitly into every component.
"""

import json
import logging
from dataclasses import dataclass, field, replace as _replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when the run cannot start: bad root path, rules or config file."""


# Category name -> extensions (lowercase, no dot). Order matters: first match wins.
DEFAULT_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "images": ("jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"),
    "documents": ("pdf", "doc", "docx", "txt", "rtf", "xls", "xlsx", "ppt", "pptx"),
    "archives": ("zip", "rar", "7z", "tar", "gz"),
    "code": ("php", "js", "html", "css", "py", "java", "cpp", "json"),
    "audio": ("mp3", "wav", "flac", "aac"),
    "video": ("mp4", "avi", "mov", "wmv", "flv"),
    "other": (),  # Catch-all category
}

DEFAULT_DATE_FORMAT = "%Y-%m"
DEFAULT_LOG_FILE = "smartsort.log"


def normalize_extension(extension: str) -> str:
    """
    Normalize an extension for lookup.

    Args:
        extension: Extension with or without a leading dot (e.g. ".JPG", "jpg")

    Returns:
        Lowercase extension without the leading dot ("" for no extension)
    """
    return extension.lower().lstrip(".")


@dataclass(frozen=True)
class CategoryRules:
    """
    Ordered extension rules with exactly one catch-all category.

    The catch-all is the single category declared with no extensions. It is
    only returned when no other category claims the extension.

    Example:
        rules = CategoryRules.from_mapping({"images": ["jpg"], "other": []})
        rules.get_category(".JPG")  # "images"
        rules.get_category("zip")   # "other"
    """

    categories: Tuple[Tuple[str, FrozenSet[str]], ...]

    def __post_init__(self) -> None:
        seen = set()
        catch_alls = []
        for name, extensions in self.categories:
            if not isinstance(name, str) or not name.strip():
                raise ConfigurationError("Category names must be non-empty strings")
            if name in seen:
                raise ConfigurationError(f"Category '{name}' is declared more than once")
            seen.add(name)
            if not extensions:
                catch_alls.append(name)

        if not catch_alls:
            raise ConfigurationError(
                "Category rules need a catch-all category (one with no extensions)"
            )
        if len(catch_alls) > 1:
            raise ConfigurationError(
                f"Only one catch-all category is allowed, found: {', '.join(catch_alls)}"
            )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "CategoryRules":
        """
        Build rules from a category -> extensions mapping, keeping its order.

        Extensions are normalized (lowercase, leading dot removed).

        Raises:
            ConfigurationError: If the mapping is malformed
        """
        categories = []
        for name, extensions in mapping.items():
            if isinstance(extensions, str) or not isinstance(extensions, Iterable):
                raise ConfigurationError(
                    f"Extensions for category '{name}' must be a list of strings"
                )
            normalized = []
            for ext in extensions:
                if not isinstance(ext, str):
                    raise ConfigurationError(
                        f"Extension {ext!r} in category '{name}' is not a string"
                    )
                normalized.append(normalize_extension(ext))
            categories.append((name, frozenset(normalized)))
        return cls(tuple(categories))

    @property
    def names(self) -> Tuple[str, ...]:
        """Category names in declaration order."""
        return tuple(name for name, _ in self.categories)

    @property
    def catch_all(self) -> str:
        """Name of the category used when nothing else matches."""
        for name, extensions in self.categories:
            if not extensions:
                return name
        # __post_init__ guarantees one exists
        raise ConfigurationError("Category rules have no catch-all category")

    def get_category(self, extension: str) -> str:
        """
        Get the category for a file extension.

        Args:
            extension: File extension, with or without dot, any case

        Returns:
            First matching category name, or the catch-all category
        """
        ext = normalize_extension(extension)
        for name, extensions in self.categories:
            if ext in extensions:
                return name
        return self.catch_all

    def to_mapping(self) -> Dict[str, list]:
        """Plain mapping form, with sorted extension lists."""
        return {name: sorted(extensions) for name, extensions in self.categories}


DEFAULT_RULES = CategoryRules.from_mapping(DEFAULT_CATEGORIES)


@dataclass(frozen=True)
class RunConfig:
    """
    Fully resolved settings for one SmartSort run.

    Immutable for the duration of the run. Use `replace` to derive a
    modified copy, e.g. when command-line options override file settings.

    Example:
        # Use defaults
        config = RunConfig()

        # Override for testing
        config = RunConfig(date_organisation=True, date_format="%Y")
    """

    rules: CategoryRules = DEFAULT_RULES

    # Date bucket settings
    date_organisation: bool = False
    date_format: str = DEFAULT_DATE_FORMAT

    # Where the run log is appended (relative paths are relative to the cwd)
    log_file: Path = field(default_factory=lambda: Path(DEFAULT_LOG_FILE))

    # Mode flags
    dry_run: bool = False
    interactive: bool = False

    # Skip files and folders whose name starts with a dot
    skip_hidden: bool = True

    def __post_init__(self) -> None:
        if not self.date_format:
            raise ConfigurationError("Date format must not be empty")
        if not isinstance(self.log_file, Path):
            object.__setattr__(self, "log_file", Path(self.log_file))

    def replace(self, **changes: Any) -> "RunConfig":
        """Return a copy with the given fields changed."""
        return _replace(self, **changes)

    def get_category(self, extension: str) -> str:
        """Shortcut for `self.rules.get_category`."""
        return self.rules.get_category(extension)

    def is_hidden(self, name: str) -> bool:
        """Check if a file/folder name is hidden (starts with dot)."""
        return name.startswith(".")


# Default configuration instance
DEFAULT_CONFIG = RunConfig()


_KNOWN_KEYS = {"categories", "date_organisation", "date_format", "log_file", "skip_hidden"}


def _expect(data: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key, default)
    if not isinstance(value, kind):
        raise ConfigurationError(
            f"Config key '{key}' must be of type {kind.__name__}, got {type(value).__name__}"
        )
    return value


def config_from_dict(data: Mapping[str, Any], base: Optional[RunConfig] = None) -> RunConfig:
    """
    Build a RunConfig from already-parsed configuration data.

    Missing keys fall back to `base` (or the defaults).

    Args:
        data: Parsed configuration mapping
        base: Configuration supplying values for missing keys

    Returns:
        Resolved RunConfig

    Raises:
        ConfigurationError: If a value has the wrong type or the rules are invalid
    """
    if base is None:
        base = DEFAULT_CONFIG
    if not isinstance(data, Mapping):
        raise ConfigurationError("Configuration must be a JSON object")

    for key in data:
        if key not in _KNOWN_KEYS:
            logger.warning("Ignoring unknown config key: %s", key)

    rules = base.rules
    if "categories" in data:
        categories = _expect(data, "categories", dict, None)
        rules = CategoryRules.from_mapping(categories)

    return base.replace(
        rules=rules,
        date_organisation=_expect(data, "date_organisation", bool, base.date_organisation),
        date_format=_expect(data, "date_format", str, base.date_format),
        log_file=Path(_expect(data, "log_file", str, str(base.log_file))),
        skip_hidden=_expect(data, "skip_hidden", bool, base.skip_hidden),
    )


def load_config(path: Union[str, Path], base: Optional[RunConfig] = None) -> RunConfig:
    """
    Load a RunConfig from a JSON configuration file.

    Args:
        path: Path to the JSON file
        base: Configuration supplying values for keys the file leaves out

    Returns:
        Resolved RunConfig

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read {config_path}: {e}") from e

    logger.debug("Loaded configuration from %s", config_path)
    return config_from_dict(data, base=base)
