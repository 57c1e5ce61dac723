"""Command line interface package."""

from finance_ledger.cli.commands import CommandLoop
from finance_ledger.cli.main import create_command_loop, main

__all__ = ["CommandLoop", "create_command_loop", "main"]
