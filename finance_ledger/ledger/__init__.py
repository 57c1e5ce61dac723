"""Ledger write operations package."""

from finance_ledger.ledger.operations import (
    BUDGET_SET,
    EXPENSE_ADDED,
    INCOME_ADDED,
    OVERSPEND_WARNING,
    LedgerOperations,
    budget_exceeded_warning,
)

__all__ = [
    "BUDGET_SET",
    "EXPENSE_ADDED",
    "INCOME_ADDED",
    "OVERSPEND_WARNING",
    "LedgerOperations",
    "budget_exceeded_warning",
]
