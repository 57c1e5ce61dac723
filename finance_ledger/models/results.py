"""
Operation Results and Reports

Write operations return one of three tagged results instead of
raising for expected failures:

- Ok:   the operation succeeded
- Warn: the operation succeeded, but something needs the user's attention
- Err:  validation failed and nothing was changed

Read operations return fully computed report models. Formatting them
into text is the reporting layer's job.
"""

from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from finance_ledger.models.ledger import TransactionKind


# =============================================================================
# WRITE RESULTS
# =============================================================================

class Ok(BaseModel):
    """Successful operation."""

    kind: Literal["ok"] = "ok"
    message: str

    @property
    def succeeded(self) -> bool:
        return True

    @property
    def text(self) -> str:
        return self.message


class Warn(BaseModel):
    """
    Successful operation with advisories.

    The write has already been applied; warnings are informational.
    """

    kind: Literal["warn"] = "warn"
    message: str
    warnings: list[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return True

    @property
    def text(self) -> str:
        """Primary message followed by one warning per line."""
        return "\n".join([self.message, *self.warnings])


class Err(BaseModel):
    """Rejected operation. No state was changed."""

    kind: Literal["err"] = "err"
    reason: str

    @property
    def succeeded(self) -> bool:
        return False

    @property
    def text(self) -> str:
        return self.reason


OperationResult = Annotated[
    Union[Ok, Warn, Err],
    Field(discriminator="kind"),
]


# =============================================================================
# READ REPORTS
# =============================================================================

class BudgetLine(BaseModel):
    """Limit and what is left of it for one budgeted category."""

    limit: Decimal
    remaining: Decimal = Field(
        ...,
        description="limit minus all expenses in the category; negative when overrun"
    )


class StatsReport(BaseModel):
    """
    All-time statistics for one user.

    Category mappings are complete (every category with at least one
    entry of that kind) and keyed in sorted order.
    """

    total_income: Decimal
    total_expense: Decimal
    income_by_category: dict[str, Decimal] = Field(default_factory=dict)
    expense_by_category: dict[str, Decimal] = Field(default_factory=dict)
    budget_lines: dict[str, BudgetLine] = Field(default_factory=dict)


class CategorySumResult(BaseModel):
    """
    Result of summing several categories of one kind.

    Categories in ``not_found`` contributed zero. That is advisory,
    not a failure.
    """

    kind: TransactionKind
    categories: list[str]
    sum: Decimal
    not_found: list[str] = Field(default_factory=list)

    @property
    def all_found(self) -> bool:
        return not self.not_found
