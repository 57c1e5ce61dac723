"""Validation package."""

from finance_ledger.validation.validator import (
    AMOUNT_NOT_A_NUMBER,
    AMOUNT_NOT_POSITIVE,
    CATEGORY_REQUIRED,
    LIMIT_INVALID,
    LedgerInputValidator,
)

__all__ = [
    "AMOUNT_NOT_A_NUMBER",
    "AMOUNT_NOT_POSITIVE",
    "CATEGORY_REQUIRED",
    "LIMIT_INVALID",
    "LedgerInputValidator",
]
