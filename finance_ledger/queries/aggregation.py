"""
Aggregation Engine

DESIGN DECISION: Aggregation is READ-ONLY and DETERMINISTIC.
Every figure is derived from the user's ledger and budget table at the
moment of the call. Nothing is cached, so totals always reconcile with
the transaction log and budgets always reflect live spend.

Category keys in returned mappings are sorted by ordinal name so the
reporting layer can render them in a stable order.
"""

from decimal import Decimal
from typing import Iterable, Optional

from finance_ledger.logs import get_logger
from finance_ledger.models import money
from finance_ledger.models.ledger import TransactionKind, User
from finance_ledger.models.results import (
    BudgetLine,
    CategorySumResult,
    StatsReport,
)


logger = get_logger(__name__)


def _sorted_by_key(mapping: dict) -> dict:
    return {key: mapping[key] for key in sorted(mapping)}


class AggregationEngine:
    """
    Derives statistics from a user's Ledger and BudgetTable.

    GUARANTEES:
    - Never mutates the ledger or budgets
    - Calling twice without writes in between gives identical results
    - A category absent from the ledger counts as zero, never as an error
    """

    def build_stats(self, user: User) -> StatsReport:
        """
        Build the all-time statistics report for a user.

        budget_lines holds every budgeted category, including ones with
        no expenses (remaining == limit). Expense categories without a
        budget are not part of budget_lines.
        """
        ledger = user.ledger

        income_by_category = ledger.sums_by_category(TransactionKind.INCOME)
        expense_by_category = ledger.sums_by_category(TransactionKind.EXPENSE)

        budget_lines: dict[str, BudgetLine] = {}
        for category, limit in user.budgets.entries().items():
            spent = expense_by_category.get(category, money.ZERO)
            budget_lines[category] = BudgetLine(
                limit=limit,
                remaining=money.subtract(limit, spent),
            )

        report = StatsReport(
            total_income=ledger.total_income(),
            total_expense=ledger.total_expense(),
            income_by_category=_sorted_by_key(income_by_category),
            expense_by_category=_sorted_by_key(expense_by_category),
            budget_lines=_sorted_by_key(budget_lines),
        )

        logger.debug(
            "stats_built",
            login=user.login,
            income_categories=len(report.income_by_category),
            expense_categories=len(report.expense_by_category),
            budgets=len(report.budget_lines),
        )
        return report

    def sums_by_category(
        self,
        user: User,
        kind: TransactionKind,
    ) -> dict[str, Decimal]:
        """Per-category sums of one kind, sorted by category."""
        return _sorted_by_key(user.ledger.sums_by_category(kind))

    def budget_remaining(self, user: User, category: str) -> Optional[Decimal]:
        """
        Remaining budget for one category, or None if it has no budget.

        Always recomputed from the full expense history.
        """
        limit = user.budgets.get(category)
        if limit is None:
            return None
        spent = user.ledger.sum_for(TransactionKind.EXPENSE, category)
        return money.subtract(limit, spent)

    def sum_by_categories(
        self,
        user: User,
        kind: TransactionKind,
        categories: Iterable[str],
    ) -> CategorySumResult:
        """
        Sum several categories of one kind.

        not_found lists, in the order requested, every category with no
        entries of this kind. Those categories contribute zero to the sum.
        """
        requested = list(categories)
        present = user.ledger.sums_by_category(kind)

        not_found = [category for category in requested if category not in present]

        result = CategorySumResult(
            kind=kind,
            categories=requested,
            sum=user.ledger.sum_for_categories(kind, requested),
            not_found=not_found,
        )

        if not_found:
            logger.info(
                "categories_not_found",
                login=user.login,
                kind=kind.value,
                not_found=not_found,
            )
        return result
