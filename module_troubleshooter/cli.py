"""
Command line interface for the Module Troubleshooter.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .analysis import TroubleshootEngine
from .config import OUTPUT_FORMATS, get_default_config_path, load_config
from .exceptions import TroubleshooterError
from .logging_config import setup_logging
from .reporting import create_reporter
from .snapshot import SnapshotLoader
from .version import get_full_name_with_version

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_ISSUES_FOUND = 2


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='module-troubleshooter',
        description='Diagnose why modules and components of a modular runtime are not running'
    )
    parser.add_argument('snapshot', help='Inventory snapshot file (JSON or YAML)')
    parser.add_argument('-f', '--format', choices=OUTPUT_FORMATS, default=None,
                        help='Report format (default: from configuration, else text)')
    parser.add_argument('-o', '--output', help='Write the report to this file')
    parser.add_argument('-c', '--config', help='Configuration file (YAML)')
    parser.add_argument('--log-level', default=None, help='Logging level (DEBUG, INFO, WARNING, ERROR)')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose log format')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')
    parser.add_argument('--detailed', action='store_true', help='List every blocked component')
    parser.add_argument('--fail-on-issues', action='store_true',
                        help=f'Exit with code {EXIT_ISSUES_FOUND} when problems are found')
    parser.add_argument('--version', action='version', version=get_full_name_with_version())
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the troubleshooter from the command line.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:]

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config or get_default_config_path())
    except TroubleshooterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.log_level:
        config.logging.level = args.log_level
    if args.log_file:
        config.logging.log_file = args.log_file
    if args.verbose:
        config.logging.verbose = True
    if args.no_color:
        config.output.use_colors = False
    if args.detailed:
        config.output.detailed = True

    setup_logging(config.logging.level, config.logging.log_file, config.logging.verbose,
                  use_colors=config.output.use_colors)

    try:
        snapshot = SnapshotLoader().load(args.snapshot)
        report = TroubleshootEngine(config.diagnosis).run(snapshot)
        reporter = create_reporter(args.format or config.output.default_format, config.output)
        content = reporter.generate_report(report, args.output)
    except FileNotFoundError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except TroubleshooterError as e:
        logger.error(str(e))
        return EXIT_ERROR

    if args.output:
        logger.info(f"Report written to {args.output}")
    else:
        print(content)

    if args.fail_on_issues and report.has_issues:
        return EXIT_ISSUES_FOUND
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
