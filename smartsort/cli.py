"""
Command-line interface for SmartSort.

Handles argument parsing, builds the run configuration and maps the
outcome of a run to an exit code.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ConfigurationError, RunConfig, DEFAULT_CONFIG, load_config
from .operations import organise
from .output import ConfirmCallback, ConsoleReporter, Reporter, confirm_prompt, setup_logging


def create_parser(config: RunConfig = DEFAULT_CONFIG) -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Args:
        config: Configuration to use for default values in help text

    Returns:
        Configured ArgumentParser
    """
    categories = "\n".join(
        f"  {name:<11} - {', '.join(exts) if exts else 'everything else'}"
        for name, exts in config.rules.to_mapping().items()
    )
    parser = argparse.ArgumentParser(
        prog="smartsort",
        description="Organise files into category subfolders by type and date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Categories:
{categories}

Files are moved into <category>/ (or <category>/<date>/ with --by-date)
next to where they are found. Existing files are never overwritten.
Hidden files and folders (names starting with ".") are left alone unless
the config file sets "skip_hidden": false.

Examples:
  smartsort ./downloads
  smartsort ~/Desktop --dry-run
  smartsort ./projects --interactive
        """
    )

    parser.add_argument(
        "directory",
        type=str,
        help="Directory to organise"
    )

    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Preview changes without moving files"
    )

    parser.add_argument(
        "--interactive", "-i",
        action="store_true",
        help="Confirm before processing"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="JSON configuration file (categories, date options, log file)"
    )

    parser.add_argument(
        "--by-date",
        action="store_true",
        help="Also sort into date subfolders by modification time"
    )

    parser.add_argument(
        "--date-format",
        type=str,
        default=None,
        # argparse %-formats help text
        help=f"strftime format for date subfolders (default: {config.date_format.replace('%', '%%')})"
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help=f"File the run log is appended to (default: {config.log_file})"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug diagnostics on stderr"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace, config: RunConfig = DEFAULT_CONFIG) -> RunConfig:
    """
    Resolve the run configuration from a config file and CLI options.

    Command-line options win over the config file.

    Raises:
        ConfigurationError: If the config file is missing or invalid
    """
    if args.config:
        config = load_config(args.config, base=config)

    changes = {
        "dry_run": args.dry_run,
        "interactive": args.interactive,
    }
    if args.by_date:
        changes["date_organisation"] = True
    if args.date_format is not None:
        changes["date_format"] = args.date_format
    if args.log_file is not None:
        changes["log_file"] = Path(args.log_file).expanduser()

    return config.replace(**changes)


def run(
    args: argparse.Namespace,
    config: RunConfig = DEFAULT_CONFIG,
    reporter: Optional[Reporter] = None,
    confirm: ConfirmCallback = confirm_prompt,
) -> int:
    """
    Run SmartSort with the given arguments.

    Args:
        args: Parsed command-line arguments
        config: Base configuration
        reporter: Where to report progress (default: coloured console)
        confirm: Confirmation callback for --interactive

    Returns:
        Exit code (0 for success or cancellation, 1 for any error)
    """
    setup_logging(verbose=args.verbose)

    if reporter is None:
        reporter = ConsoleReporter(color=False if args.no_color else None)

    directory = Path(args.directory).expanduser()

    try:
        run_config = build_config(args, config)
        result = organise(directory, run_config, reporter=reporter, confirm=confirm)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0 if result.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    config = DEFAULT_CONFIG
    parser = create_parser(config)
    args = parser.parse_args(argv)
    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())
