"""
Input Validation for Ledger Writes

Validation runs BEFORE any mutation. A write either passes every check
and is applied in full, or fails and changes nothing.

Checks run in a fixed order and the first failure wins, so the user
always sees one clear reason:

ENTRIES (income / expense):
1. Category must be non-empty
2. Amount must parse as a decimal number within money.within_bounds()
3. Amount must be strictly positive

BUDGETS:
1. Category must be non-empty
2. Limit must be a decimal number within bounds and >= 0 (zero allowed)

IMPORTANT: Validation NEVER silently fixes input.
Categories are not trimmed or re-cased; they are only checked.
"""

from decimal import Decimal
from typing import Optional, Union

from finance_ledger.models import money
from finance_ledger.models.ledger import is_blank
from finance_ledger.models.money import MoneyParseError
from finance_ledger.models.results import Err


CATEGORY_REQUIRED = "Category must be non-empty."
AMOUNT_NOT_A_NUMBER = "Amount must be a number."
AMOUNT_NOT_POSITIVE = "Amount must be > 0."
LIMIT_INVALID = "Budget limit must be >= 0."

AmountInput = Union[str, Decimal, None]


def _coerce_amount(value: AmountInput) -> Optional[Decimal]:
    """Turn raw input into a Decimal, or None if it is not a usable number."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value if money.within_bounds(value) else None
    try:
        return money.parse_money(value)
    except MoneyParseError:
        return None


class LedgerInputValidator:
    """
    Validates raw command input for ledger writes.

    Each method returns ``(value, error)``: exactly one of them is None.
    """

    def validate_entry(
        self,
        category: Optional[str],
        amount: AmountInput,
    ) -> tuple[Optional[Decimal], Optional[Err]]:
        """Validate an income or expense entry."""
        if is_blank(category):
            return None, Err(reason=CATEGORY_REQUIRED)

        parsed = _coerce_amount(amount)
        if parsed is None:
            return None, Err(reason=AMOUNT_NOT_A_NUMBER)

        if money.sign(parsed) is not money.Sign.POSITIVE:
            return None, Err(reason=AMOUNT_NOT_POSITIVE)

        return parsed, None

    def validate_budget(
        self,
        category: Optional[str],
        limit: AmountInput,
    ) -> tuple[Optional[Decimal], Optional[Err]]:
        """Validate a budget limit."""
        if is_blank(category):
            return None, Err(reason=CATEGORY_REQUIRED)

        parsed = _coerce_amount(limit)
        if parsed is None or money.sign(parsed) is money.Sign.NEGATIVE:
            return None, Err(reason=LIMIT_INVALID)

        return parsed, None
