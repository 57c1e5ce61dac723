"""
Core Ledger Models

These models hold everything the system knows about a user's money:
- TransactionEntry: one dated, typed, categorized amount
- Ledger: the append-only history of entries
- BudgetTable: spending limits per category
- User: login, credential, ledger and budgets travelling together

DESIGN DECISION: History is permanent. There is no API to edit or
remove an entry once appended; the only write on a Ledger is append().

Categories are free-form and stored verbatim. "Food" and "food" are
different categories.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from finance_ledger.models import money


class TransactionKind(str, Enum):
    """The two kinds of ledger entries. Closed set."""
    INCOME = "income"
    EXPENSE = "expense"


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only text."""
    return value is None or not value.strip()


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionEntry(BaseModel):
    """
    A single income or expense record.

    Immutable once created. Only Ledger.append() creates these during
    normal operation; storage rebuilds them when loading a snapshot.
    """
    model_config = ConfigDict(frozen=True)

    kind: TransactionKind = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category tag (case-sensitive, not normalized)"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount, strictly positive"
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="Local time the entry was appended"
    )
    comment: str = Field(
        default="",
        description="Free-text note, may be empty"
    )

    @field_validator('category')
    @classmethod
    def category_not_blank(cls, v: str) -> str:
        if is_blank(v):
            raise ValueError("Category must be non-empty")
        return v

    @field_validator('amount')
    @classmethod
    def amount_within_bounds(cls, v: Decimal) -> Decimal:
        if not money.within_bounds(v):
            raise ValueError("Amount out of range")
        return v


class Ledger(BaseModel):
    """
    Append-only, ordered list of a user's transactions.

    Aggregations are order-independent sums, but insertion order is
    kept so snapshots round-trip exactly. entries is a tuple, so the
    only way to grow it is append().
    """

    entries: tuple[TransactionEntry, ...] = Field(default=())

    def append(
        self,
        kind: TransactionKind,
        category: str,
        amount: Decimal,
        comment: str = "",
    ) -> TransactionEntry:
        """
        Append a new entry stamped with the current time.

        Callers validate input first (see LedgerOperations). These
        checks only catch programming errors.

        Raises:
            ValueError: If category is blank, or amount is not positive or
                out of range
        """
        if is_blank(category):
            raise ValueError("Category must be non-empty")
        if money.sign(amount) is not money.Sign.POSITIVE:
            raise ValueError("Amount must be > 0")

        entry = TransactionEntry(
            kind=kind,
            category=category,
            amount=amount,
            comment=comment or "",
        )
        self.entries = self.entries + (entry,)
        return entry

    def _of_kind(self, kind: TransactionKind) -> Iterable[TransactionEntry]:
        return (entry for entry in self.entries if entry.kind == kind)

    def total_for(self, kind: TransactionKind) -> Decimal:
        """Sum of all amounts of the given kind (zero if none)."""
        return money.total(entry.amount for entry in self._of_kind(kind))

    def total_income(self) -> Decimal:
        return self.total_for(TransactionKind.INCOME)

    def total_expense(self) -> Decimal:
        return self.total_for(TransactionKind.EXPENSE)

    def sums_by_category(self, kind: TransactionKind) -> dict[str, Decimal]:
        """
        Group entries of one kind by category and sum them.

        Categories without matching entries are absent, not zero.
        """
        sums: dict[str, Decimal] = {}
        for entry in self._of_kind(kind):
            current = sums.get(entry.category, money.ZERO)
            sums[entry.category] = money.add(current, entry.amount)
        return sums

    def sum_for(self, kind: TransactionKind, category: str) -> Decimal:
        """Sum for one category; zero when nothing matches."""
        return money.total(
            entry.amount
            for entry in self._of_kind(kind)
            if entry.category == category
        )

    def sum_for_categories(
        self,
        kind: TransactionKind,
        categories: Iterable[str],
    ) -> Decimal:
        """
        Sum over several categories.

        Each requested category is accumulated independently, so a
        category listed twice is counted twice.
        """
        return money.total(self.sum_for(kind, category) for category in categories)


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetTable(BaseModel):
    """
    Spending limit per category.

    At most one limit per category. Setting a limit again replaces it.
    A budget may exist for a category that has no transactions.
    """

    limits: dict[str, Decimal] = Field(default_factory=dict)

    @field_validator('limits')
    @classmethod
    def limits_not_negative(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for category, limit in v.items():
            if is_blank(category):
                raise ValueError("Budget category must be non-empty")
            if limit < 0:
                raise ValueError(f"Budget limit for '{category}' must be >= 0")
            if not money.within_bounds(limit):
                raise ValueError(f"Budget limit for '{category}' out of range")
        return v

    def set(self, category: str, limit: Decimal) -> None:
        """
        Set or replace the limit for a category.

        Raises:
            ValueError: If category is blank, or limit is negative or
                out of range
        """
        if is_blank(category):
            raise ValueError("Category must be non-empty")
        if money.sign(limit) is money.Sign.NEGATIVE:
            raise ValueError("Budget limit must be >= 0")
        if not money.within_bounds(limit):
            raise ValueError("Budget limit out of range")
        self.limits[category] = limit

    def get(self, category: str) -> Optional[Decimal]:
        return self.limits.get(category)

    def entries(self) -> dict[str, Decimal]:
        """Snapshot copy of the category -> limit mapping."""
        return dict(self.limits)


# =============================================================================
# USERS
# =============================================================================

class PasswordCredential(BaseModel):
    """
    Salted password hash.

    Opaque to the ledger. Only AuthService creates or checks these.
    """
    model_config = ConfigDict(frozen=True)

    salt: str = Field(..., description="Hex-encoded random salt")
    digest: str = Field(..., description="Hex-encoded PBKDF2-SHA256 digest")
    iterations: int = Field(..., ge=1)


class User(BaseModel):
    """
    A registered user.

    Each user owns exactly one Ledger and one BudgetTable. They are
    never shared between users.
    """

    login: str = Field(..., min_length=1)
    credential: PasswordCredential
    ledger: Ledger = Field(default_factory=Ledger)
    budgets: BudgetTable = Field(default_factory=BudgetTable)
