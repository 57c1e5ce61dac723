"""Stats reporting package."""

from finance_ledger.reporting.formatter import StatsFormatter
from finance_ledger.reporting.reporter import StatsReporter

__all__ = ["StatsFormatter", "StatsReporter"]
