"""
Output, confirmation and logging helpers.

The core never prints or prompts directly: it reports through a Reporter
and asks through a confirm callable, both injected by the caller.
"""

import logging
import sys
from typing import Callable, Optional, TextIO

# Type alias for the confirmation callback
ConfirmCallback = Callable[[str], bool]

INFO = "info"
WARNING = "warning"
ERROR = "error"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Reporter:
    """
    Sink for human-readable progress and summary lines.

    Subclasses implement `report`; the severity helpers route to it.
    """

    def report(self, severity: str, message: str) -> None:
        raise NotImplementedError

    def info(self, message: str) -> None:
        self.report(INFO, message)

    def warning(self, message: str) -> None:
        self.report(WARNING, message)

    def error(self, message: str) -> None:
        self.report(ERROR, message)


class ConsoleReporter(Reporter):
    """Writes each message on its own line, ANSI-coloured by severity."""

    COLORS = {
        INFO: "\033[0;32m",     # Green
        WARNING: "\033[0;33m",  # Yellow
        ERROR: "\033[0;31m",    # Red
    }
    RESET = "\033[0m"

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self.stream = stream if stream is not None else sys.stdout
        if color is None:
            color = hasattr(self.stream, "isatty") and self.stream.isatty()
        self.color = color

    def report(self, severity: str, message: str) -> None:
        if self.color:
            message = f"{self.COLORS.get(severity, '')}{message}{self.RESET}"
        print(message, file=self.stream)


class CallbackReporter(Reporter):
    """Adapts a plain `(severity, message)` callable into a Reporter."""

    def __init__(self, callback: Callable[[str, str], None]):
        self.callback = callback

    def report(self, severity: str, message: str) -> None:
        self.callback(severity, message)


def confirm_prompt(
    message: str,
    input_func: Callable[[str], str] = input,
) -> bool:
    """
    Ask a yes/no question on the terminal.

    Args:
        message: Question to show
        input_func: Function used to read the answer (for testing)

    Returns:
        True only for "y" or "yes" (case-insensitive); False otherwise,
        including end of input
    """
    try:
        response = input_func(f"{message} (y/N): ")
    except EOFError:
        return False
    return response.strip().lower() in ("y", "yes")


def setup_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the `smartsort` logger for diagnostics.

    Args:
        verbose: Log at DEBUG instead of WARNING
        stream: Destination stream (default: stderr)

    Returns:
        The configured package logger
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger("smartsort")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(level)
    logger.addHandler(handler)

    # Prevent duplicate messages through the root logger
    logger.propagate = False
    return logger
