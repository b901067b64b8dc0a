"""Command-line interface for the Composer dependency analyzer.

This module provides the main entry point for running the analyzer from the
command line. It uses argparse for the options, loads composer.json, the
vendor autoload metadata and the optional Python config file, then prints
the result with the selected formatter.
"""

import argparse
import logging
import os
import sys
from typing import Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .analysis.analyzer import DependencyAnalyzer
from .autoload.classmap import Classmap
from .autoload.loader import load_classmap
from .config.configuration import Configuration
from .config.loader import DEFAULT_CONFIG_FILENAME, load_configuration
from .exceptions import AnalyzerError, InvalidCliError, InvalidConfigError, InvalidPathError
from .formatters.base import FormatterOptions, ResultFormatter
from .formatters.console import ConsoleFormatter
from .formatters.junit import JunitFormatter
from .models.error_type import ErrorType
from .parsers.base_parser import BaseParser
from .parsers.php_parser import PhpParser
from .utils import path as paths
from .utils.composer_json import ComposerJson

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 255

IGNORE_FLAGS = {
    "ignore_unknown_classes": ErrorType.UNKNOWN_CLASS,
    "ignore_unknown_functions": ErrorType.UNKNOWN_FUNCTION,
    "ignore_unused_deps": ErrorType.UNUSED_DEPENDENCY,
    "ignore_shadow_deps": ErrorType.SHADOW_DEPENDENCY,
    "ignore_dev_in_prod_deps": ErrorType.DEV_DEPENDENCY_IN_PROD,
    "ignore_prod_only_in_dev_deps": ErrorType.PROD_DEPENDENCY_ONLY_IN_DEV,
}


def create_analyzer(
    parser: BaseParser,
    classmap: Classmap,
    config: Configuration,
    dependencies: Dict[str, bool],
) -> DependencyAnalyzer:
    """Create a DependencyAnalyzer with injected dependencies.

    Args:
        parser: Parser used to extract used symbols from each file.
        classmap: Classmap built from the vendor autoload metadata.
        config: Configuration of the run.
        dependencies: Declared packages, name -> True for require-dev.

    Returns:
        DependencyAnalyzer: Configured analyzer instance.
    """
    return DependencyAnalyzer(
        parser=parser, classmap=classmap, config=config, dependencies=dependencies
    )


def create_formatter(output_format: str, cwd: str, console: Console) -> ResultFormatter:
    """Create the formatter selected by --format.

    Raises:
        InvalidCliError: If the format is unknown.
    """
    if output_format == "junit":
        return JunitFormatter(cwd, console)
    if output_format == "console":
        return ConsoleFormatter(cwd, console)
    raise InvalidCliError("Invalid format option provided, allowed are 'console' or 'junit'.")


def init_configuration(
    args: argparse.Namespace, composer_json: ComposerJson, cwd: str, stderr: Console
) -> Configuration:
    """Build the run configuration.

    The config file (--config, or composer-deps.py in the working directory
    when present) is loaded first, then CLI ignore flags are merged in and
    the composer.json autoload paths are added unless disabled.

    Args:
        args: Parsed command-line arguments.
        composer_json: Loaded composer.json.
        cwd: Working directory relative paths are resolved against.
        stderr: Console for status messages.

    Returns:
        Configuration with at least one path to scan.

    Raises:
        InvalidConfigError: If the config file is invalid or nothing is
            left to scan.
    """
    if args.config is not None:
        config_path = paths.resolve(cwd, args.config)
        if not os.path.isfile(config_path):
            raise InvalidConfigError(f"Invalid config path given, {config_path} is not a file.")
    else:
        config_path = os.path.join(cwd, DEFAULT_CONFIG_FILENAME)

    if os.path.isfile(config_path):
        stderr.print(f"[grey50]Using config[/grey50] {escape(config_path)}", highlight=False)
        config = load_configuration(config_path)
    else:
        config = Configuration()

    ignored = [error_type for flag, error_type in IGNORE_FLAGS.items() if getattr(args, flag)]
    if ignored:
        config.ignore_errors(ignored)

    if config.should_scan_composer_autoload_paths:
        try:
            for absolute_path, is_dev in composer_json.autoload_paths.items():
                config.add_path_to_scan(absolute_path, is_dev)
        except InvalidPathError as e:
            raise InvalidConfigError(
                f"Error while processing composer.json autoload path: {e}"
            ) from e

        if not config.paths_to_scan:
            raise InvalidConfigError(
                "No paths to scan! There is no composer autoload section "
                "and no extra path to scan configured."
            )
    elif not config.paths_to_scan:
        raise InvalidConfigError(
            "No paths to scan! Scanning composer's 'autoload' sections is disabled "
            "and no extra path to scan was configured."
        )

    return config


def configure_logging(verbose: bool, console: Console) -> None:
    """Route stdlib logging through a RichHandler on the stderr console."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)

    root_logger.addHandler(
        RichHandler(console=console, show_time=False, show_path=False, markup=False)
    )
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser of the composer-deps command."""
    parser = argparse.ArgumentParser(
        prog="composer-deps",
        description=(
            "Detect shadow, unused and misplaced dependencies of a Composer "
            "project by scanning the PHP sources for used symbols"
        ),
        epilog="Use --config for finer-grained ignores than the --ignore-* flags.",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("paths", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument(
        "--verbose", action="store_true", help="Print more usage examples"
    )
    parser.add_argument(
        "--show-all-usages",
        action="store_true",
        help="Remove the limit of showing only few usages",
    )
    parser.add_argument(
        "--dump-usages",
        metavar="PACKAGE",
        help="Dump usages of given package, * placeholder can be used",
    )
    parser.add_argument(
        "--composer-json",
        metavar="PATH",
        help="Path to composer.json (default: composer.json in the working directory)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help=(
            "Path to a Python configuration file defining a 'config' "
            f"Configuration (default: {DEFAULT_CONFIG_FILENAME} when present)"
        ),
    )
    parser.add_argument(
        "--format",
        choices=["console", "junit"],
        default="console",
        help="Output format (default: console)",
    )

    ignore_group = parser.add_argument_group("ignore options")
    ignore_group.add_argument(
        "--ignore-unknown-classes",
        action="store_true",
        help="Ignore all non-autoloadable classes",
    )
    ignore_group.add_argument(
        "--ignore-unknown-functions",
        action="store_true",
        help="Ignore all undeclared functions",
    )
    ignore_group.add_argument(
        "--ignore-unused-deps",
        action="store_true",
        help="Ignore all unused dependency issues",
    )
    ignore_group.add_argument(
        "--ignore-shadow-deps",
        action="store_true",
        help="Ignore all shadow dependency issues",
    )
    ignore_group.add_argument(
        "--ignore-dev-in-prod-deps",
        action="store_true",
        help="Ignore all dev dependency in production code issues",
    )
    ignore_group.add_argument(
        "--ignore-prod-only-in-dev-deps",
        action="store_true",
        help="Ignore all prod dependency used only in dev paths issues",
    )
    return parser


def run(args: argparse.Namespace, cwd: str, stdout: Console, stderr: Console) -> int:
    """Execute one analysis run.

    Args:
        args: Parsed command-line arguments.
        cwd: Working directory.
        stdout: Console the report is written to.
        stderr: Console for status messages.

    Returns:
        Exit code of the formatter (0 clean, 1 findings reported).

    Raises:
        AnalyzerError: On any fatal precondition failure.
    """
    if args.paths:
        raise InvalidCliError(
            f"Cannot pass paths ({', '.join(args.paths)}) to analyse as arguments, "
            "use --config instead."
        )

    composer_json_path = (
        paths.resolve(cwd, args.composer_json)
        if args.composer_json is not None
        else paths.normalize(os.path.join(cwd, "composer.json"))
    )
    composer_json = ComposerJson(composer_json_path)
    config = init_configuration(args, composer_json, cwd, stderr)
    classmap = load_classmap(composer_json.vendor_dir)

    options = FormatterOptions(
        verbose=args.verbose,
        show_all_usages=args.show_all_usages,
        dump_usages=args.dump_usages,
    )
    formatter = create_formatter(args.format, cwd, stdout)

    analyzer = create_analyzer(PhpParser(), classmap, config, composer_json.dependencies)
    result = analyzer.analyze()

    return formatter.format(result, options, config)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 when no issues, 1 when issues were reported, 255 on a
        fatal error).
    """
    args = build_parser().parse_args(argv)

    stdout = Console(highlight=False)
    stderr = Console(stderr=True, highlight=False)
    configure_logging(args.verbose, stderr)

    try:
        return run(args, os.getcwd(), stdout, stderr)
    except AnalyzerError as e:
        stderr.print()
        stderr.print(f"[red]{escape(str(e))}[/red]")
        stderr.print()
        if args.verbose:
            logger.debug("Fatal error", exc_info=True)
        return FATAL_EXIT_CODE


if __name__ == "__main__":
    sys.exit(main())
