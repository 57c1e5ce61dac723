"""
Data Models Package

This package contains the Pydantic models and money helpers used by the
ledger. Every amount that flows through the system is a Decimal.
"""

from finance_ledger.models.ledger import (
    BudgetTable,
    Ledger,
    PasswordCredential,
    TransactionEntry,
    TransactionKind,
    User,
    is_blank,
)
from finance_ledger.models.money import (
    MoneyParseError,
    Sign,
    parse_money,
)
from finance_ledger.models.results import (
    BudgetLine,
    CategorySumResult,
    Err,
    Ok,
    OperationResult,
    StatsReport,
    Warn,
)

__all__ = [
    # Ledger models
    "BudgetTable",
    "Ledger",
    "PasswordCredential",
    "TransactionEntry",
    "TransactionKind",
    "User",
    "is_blank",
    # Money
    "MoneyParseError",
    "Sign",
    "parse_money",
    # Results and reports
    "BudgetLine",
    "CategorySumResult",
    "Err",
    "Ok",
    "OperationResult",
    "StatsReport",
    "Warn",
]
