"""
Ledger Operations (write path)

Every write to a user's ledger or budget table goes through here:
1. Validate → reject with Err, nothing changes
2. Apply → append the entry or set the budget
3. Check → for expenses, evaluate post-write warnings

DESIGN DECISION: Budget overrun is a POINT-IN-TIME warning.
It is evaluated only when an expense is written, against the full
expense history including the new entry. Setting a budget later never
raises a warning about expenses already recorded; the next stats call
simply shows the (possibly negative) remaining amount.
"""

from typing import Optional

from finance_ledger.logs import get_logger
from finance_ledger.models import money
from finance_ledger.models.ledger import TransactionKind, User
from finance_ledger.models.results import Ok, OperationResult, Warn
from finance_ledger.queries import AggregationEngine
from finance_ledger.validation import LedgerInputValidator
from finance_ledger.validation.validator import AmountInput


logger = get_logger(__name__)

INCOME_ADDED = "Income added."
EXPENSE_ADDED = "Expense added."
BUDGET_SET = "Budget set."
OVERSPEND_WARNING = "WARNING: total expenses exceeded total income."


def budget_exceeded_warning(category: str, remaining) -> str:
    return (
        f"WARNING: budget exceeded for category '{category}'. "
        f"Remaining: {money.to_string(remaining)}"
    )


class LedgerOperations:
    """
    Validating write operations on a user's ledger and budgets.

    Expected failures are returned as Err, never raised. A failed
    validation leaves the ledger and budget table untouched.
    """

    def __init__(
        self,
        validator: Optional[LedgerInputValidator] = None,
        aggregation: Optional[AggregationEngine] = None,
    ):
        self._validator = validator or LedgerInputValidator()
        self._aggregation = aggregation or AggregationEngine()

    def add_income(
        self,
        user: User,
        category: str,
        amount: AmountInput,
        comment: str = "",
    ) -> OperationResult:
        """Record an income entry."""
        parsed, error = self._validator.validate_entry(category, amount)
        if error is not None:
            logger.info(
                "validation_failed",
                login=user.login,
                operation="income",
                reason=error.reason,
            )
            return error

        user.ledger.append(TransactionKind.INCOME, category, parsed, comment)

        logger.info(
            "income_added",
            login=user.login,
            category=category,
            amount=money.to_string(parsed),
        )
        return Ok(message=INCOME_ADDED)

    def add_expense(
        self,
        user: User,
        category: str,
        amount: AmountInput,
        comment: str = "",
    ) -> OperationResult:
        """
        Record an expense entry and check for overruns.

        Two independent checks run after the append, in this order:
        1. Category budget exceeded (remaining < 0)
        2. Total expenses strictly greater than total income

        Both may fire together. Any warning turns the result into Warn.
        """
        parsed, error = self._validator.validate_entry(category, amount)
        if error is not None:
            logger.info(
                "validation_failed",
                login=user.login,
                operation="expense",
                reason=error.reason,
            )
            return error

        user.ledger.append(TransactionKind.EXPENSE, category, parsed, comment)

        logger.info(
            "expense_added",
            login=user.login,
            category=category,
            amount=money.to_string(parsed),
        )

        warnings: list[str] = []

        remaining = self._aggregation.budget_remaining(user, category)
        if remaining is not None and money.sign(remaining) is money.Sign.NEGATIVE:
            warnings.append(budget_exceeded_warning(category, remaining))
            logger.warning(
                "budget_exceeded",
                login=user.login,
                category=category,
                remaining=money.to_string(remaining),
            )

        total_income = user.ledger.total_income()
        total_expense = user.ledger.total_expense()
        if total_expense > total_income:
            warnings.append(OVERSPEND_WARNING)
            logger.warning(
                "overspend_detected",
                login=user.login,
                total_income=money.to_string(total_income),
                total_expense=money.to_string(total_expense),
            )

        if warnings:
            return Warn(message=EXPENSE_ADDED, warnings=warnings)
        return Ok(message=EXPENSE_ADDED)

    def set_budget(
        self,
        user: User,
        category: str,
        limit: AmountInput,
    ) -> OperationResult:
        """Set or replace the spending limit for a category."""
        parsed, error = self._validator.validate_budget(category, limit)
        if error is not None:
            logger.info(
                "validation_failed",
                login=user.login,
                operation="budget",
                reason=error.reason,
            )
            return error

        user.budgets.set(category, parsed)

        logger.info(
            "budget_set",
            login=user.login,
            category=category,
            limit=money.to_string(parsed),
        )
        return Ok(message=BUDGET_SET)
