"""
Entry Point for the Finance Ledger CLI

Wires settings, logging, storage and services together and starts the
command loop.
"""

import argparse
import sys
from typing import Optional, Sequence, TextIO

from finance_ledger.cli.commands import CommandLoop
from finance_ledger.config import LOG_LEVELS, LedgerSettings, get_settings
from finance_ledger.logs import configure_logging, get_logger
from finance_ledger.reporting import StatsReporter
from finance_ledger.services.registry import UserRegistry
from finance_ledger.services.storage import JsonFileUserStorage


logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finance-ledger",
        description="Personal finance ledger with budgets and statistics.",
    )
    parser.add_argument("--data-file", help="JSON file holding users and ledgers")
    parser.add_argument("--stats-file", help="Default file for 'statsout file'")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Diagnostic log level (logs go to stderr)",
    )
    return parser


def apply_overrides(settings: LedgerSettings, args: argparse.Namespace) -> LedgerSettings:
    """Command-line flags win over environment and .env values."""
    overrides = {}
    if args.data_file:
        overrides["data_file"] = args.data_file
    if args.stats_file:
        overrides["stats_file"] = args.stats_file
    if args.log_level:
        overrides["log_level"] = args.log_level
    if not overrides:
        return settings
    return LedgerSettings.model_validate({**settings.model_dump(), **overrides})


def create_command_loop(
    settings: LedgerSettings,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> CommandLoop:
    """
    Factory function to create all application components.

    Returns:
        A CommandLoop ready to run()
    """
    stdout = stdout or sys.stdout
    reporter = StatsReporter(
        console=stdout,
        default_file=settings.stats_file,
        to_file=settings.stats_to_file,
    )
    return CommandLoop(
        registry=UserRegistry(),
        storage=JsonFileUserStorage(settings.data_file),
        reporter=reporter,
        stdin=stdin,
        stdout=stdout,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)

    configure_logging(settings.log_level, json_output=settings.log_json)
    logger.info("starting", data_file=str(settings.data_file))

    loop = create_command_loop(settings)
    try:
        loop.run()
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
