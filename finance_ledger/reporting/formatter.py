"""
Stats Formatting

Turns computed reports into text lines. Categories are always printed in
ordinal name order so the same ledger always produces the same text.
"""

from decimal import Decimal
from typing import Mapping

from finance_ledger.models.ledger import TransactionKind
from finance_ledger.models.money import to_string
from finance_ledger.models.results import CategorySumResult, StatsReport


HEADINGS = {
    TransactionKind.INCOME: "Income by categories:",
    TransactionKind.EXPENSE: "Expense by categories:",
}


def _format_list(items: list[str]) -> str:
    return "[" + ", ".join(items) + "]"


class StatsFormatter:
    """Renders StatsReport and CategorySumResult as text lines."""

    def category_lines(self, sums: Mapping[str, Decimal]) -> list[str]:
        if not sums:
            return ["  (empty)"]
        return [f"  {category}: {to_string(sums[category])}" for category in sorted(sums)]

    def full_stats(self, report: StatsReport) -> list[str]:
        lines = [f"Total income: {to_string(report.total_income)}"]
        lines.append(HEADINGS[TransactionKind.INCOME])
        lines.extend(self.category_lines(report.income_by_category))

        lines.append(f"Total expense: {to_string(report.total_expense)}")
        lines.append(HEADINGS[TransactionKind.EXPENSE])
        lines.extend(self.category_lines(report.expense_by_category))

        lines.append("Budgets by categories:")
        if not report.budget_lines:
            lines.append("  (no budgets set)")
        else:
            for category in sorted(report.budget_lines):
                line = report.budget_lines[category]
                lines.append(
                    f"  {category}: limit={to_string(line.limit)}, "
                    f"remaining={to_string(line.remaining)}"
                )
        return lines

    def category_sums(self, report: StatsReport, kind: TransactionKind) -> list[str]:
        sums = (
            report.income_by_category
            if kind is TransactionKind.INCOME
            else report.expense_by_category
        )
        return [HEADINGS[kind], *self.category_lines(sums)]

    def category_query(self, result: CategorySumResult) -> list[str]:
        lines = [
            f"Sum ({result.kind.value}) for {_format_list(result.categories)} "
            f"= {to_string(result.sum)}"
        ]
        if result.not_found:
            lines.append(f"WARNING: categories not found: {_format_list(result.not_found)}")
        return lines
