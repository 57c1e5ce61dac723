"""
Tests for the ledger write path (income, expense, budget).
"""

import pytest
from decimal import Decimal

from finance_ledger.ledger import LedgerOperations, OVERSPEND_WARNING
from finance_ledger.models import Err, Ok, TransactionKind, User, Warn
from finance_ledger.queries import AggregationEngine
from finance_ledger.services.auth import hash_password


INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE


@pytest.fixture
def ops():
    return LedgerOperations()


@pytest.fixture
def user():
    return User(login="alice", credential=hash_password("pw1", iterations=1))


class TestAddIncome:
    """Tests for LedgerOperations.add_income."""

    def test_income_added(self, ops, user):
        result = ops.add_income(user, "food", "100", "lunch")
        assert isinstance(result, Ok)
        assert result.message == "Income added."
        entry = user.ledger.entries[0]
        assert entry.kind is INCOME
        assert entry.category == "food"
        assert entry.amount == Decimal("100")
        assert entry.comment == "lunch"

    @pytest.mark.parametrize("amount", ["0.01", "1", "250.75", "99999999.99"])
    def test_income_increases_total_exactly(self, ops, user, amount):
        """Test income adds exactly its amount and touches nothing else."""
        user.ledger.append(EXPENSE, "rent", Decimal("10"))
        user.budgets.set("rent", Decimal("30"))
        income_before = user.ledger.total_income()
        expense_before = user.ledger.total_expense()
        budgets_before = user.budgets.entries()

        ops.add_income(user, "salary", amount)

        assert user.ledger.total_income() - income_before == Decimal(amount)
        assert user.ledger.total_expense() == expense_before
        assert user.budgets.entries() == budgets_before

    @pytest.mark.parametrize("amount", ["9" * 70, "0." + "0" * 70 + "1", Decimal("1E+20")])
    def test_out_of_range_amount_rejected(self, ops, user, amount):
        """Test amounts too wide to total exactly are refused."""
        ops.add_income(user, "food", "1")
        result = ops.add_income(user, "food", amount)
        assert isinstance(result, Err)
        assert result.reason == "Amount must be a number."
        assert len(user.ledger.entries) == 1
        assert AggregationEngine().build_stats(user).total_income == Decimal("1")

    def test_accepts_decimal_amount(self, ops, user):
        assert isinstance(ops.add_income(user, "food", Decimal("5.5")), Ok)
        assert user.ledger.total_income() == Decimal("5.5")

    @pytest.mark.parametrize("category,amount,reason", [
        ("", "10", "Category must be non-empty."),
        ("   ", "10", "Category must be non-empty."),
        ("", "abc", "Category must be non-empty."),
        ("food", "abc", "Amount must be a number."),
        ("food", None, "Amount must be a number."),
        ("food", "1e3", "Amount must be a number."),
        ("food", "0", "Amount must be > 0."),
        ("food", "-5", "Amount must be > 0."),
    ])
    def test_validation_order(self, ops, user, category, amount, reason):
        """Test the first failing rule wins and nothing is appended."""
        result = ops.add_income(user, category, amount)
        assert isinstance(result, Err)
        assert result.reason == reason
        assert user.ledger.entries == ()


class TestAddExpense:
    """Tests for LedgerOperations.add_expense."""

    def test_plain_expense(self, ops, user):
        """Test an expense within income and budget is a plain Ok."""
        ops.add_income(user, "salary", "100")
        result = ops.add_expense(user, "food", "40", "dinner")
        assert isinstance(result, Ok)
        assert result.message == "Expense added."
        assert user.ledger.total_expense() == Decimal("40")

    def test_budget_exceeded_warning(self, ops, user):
        """Test overrun is reported with the negative remaining amount."""
        ops.add_income(user, "salary", "1000")
        ops.set_budget(user, "food", "50")
        result = ops.add_expense(user, "food", "60", "dinner")

        assert isinstance(result, Warn)
        assert result.message == "Expense added."
        assert result.warnings == [
            "WARNING: budget exceeded for category 'food'. Remaining: -10",
        ]

    def test_budget_exactly_reached_is_not_exceeded(self, ops, user):
        ops.add_income(user, "salary", "1000")
        ops.set_budget(user, "food", "50")
        assert isinstance(ops.add_expense(user, "food", "50"), Ok)

    def test_budget_warning_counts_previous_expenses(self, ops, user):
        """Test remaining uses the full history including the new entry."""
        ops.add_income(user, "salary", "1000")
        ops.set_budget(user, "food", "50")
        assert isinstance(ops.add_expense(user, "food", "30"), Ok)
        result = ops.add_expense(user, "food", "25.50")
        assert result.warnings == [
            "WARNING: budget exceeded for category 'food'. Remaining: -5.50",
        ]

    def test_overspend_warning(self, ops, user):
        """Test total expense above total income warns."""
        ops.add_income(user, "salary", "10")
        result = ops.add_expense(user, "rent", "10.01")
        assert isinstance(result, Warn)
        assert result.warnings == [OVERSPEND_WARNING]

    def test_expense_equal_to_income_does_not_warn(self, ops, user):
        ops.add_income(user, "salary", "10")
        assert isinstance(ops.add_expense(user, "rent", "10"), Ok)

    def test_both_warnings_in_fixed_order(self, ops, user):
        """Test budget warning comes before overspend warning."""
        ops.set_budget(user, "food", "50")
        result = ops.add_expense(user, "food", "60")
        assert isinstance(result, Warn)
        assert result.warnings == [
            "WARNING: budget exceeded for category 'food'. Remaining: -10",
            OVERSPEND_WARNING,
        ]
        assert result.text == (
            "Expense added.\n"
            "WARNING: budget exceeded for category 'food'. Remaining: -10\n"
            "WARNING: total expenses exceeded total income."
        )

    def test_validation_failure_does_not_warn_or_mutate(self, ops, user):
        ops.set_budget(user, "food", "0")
        result = ops.add_expense(user, "food", "-1")
        assert isinstance(result, Err)
        assert result.reason == "Amount must be > 0."
        assert user.ledger.entries == ()

    def test_out_of_range_expense_rejected_before_budget_check(self, ops, user):
        """Test an over-long amount is refused and leaves stats usable."""
        ops.add_income(user, "salary", "100")
        ops.set_budget(user, "food", "50")
        result = ops.add_expense(user, "food", "9" * 70)
        assert isinstance(result, Err)
        assert result.reason == "Amount must be a number."
        assert len(user.ledger.entries) == 1
        assert AggregationEngine().build_stats(user).budget_lines["food"].remaining == Decimal("50")

    def test_budget_on_other_category_ignored(self, ops, user):
        ops.add_income(user, "salary", "100")
        ops.set_budget(user, "rent", "1")
        assert isinstance(ops.add_expense(user, "food", "5"), Ok)


class TestSetBudget:
    """Tests for LedgerOperations.set_budget."""

    def test_budget_set(self, ops, user):
        result = ops.set_budget(user, "food", "50")
        assert isinstance(result, Ok)
        assert result.message == "Budget set."
        assert user.budgets.get("food") == Decimal("50")

    def test_zero_budget_allowed(self, ops, user):
        assert isinstance(ops.set_budget(user, "groceries", "0"), Ok)

    @pytest.mark.parametrize("category,limit,reason", [
        ("", "50", "Category must be non-empty."),
        ("food", "-1", "Budget limit must be >= 0."),
        ("food", "lots", "Budget limit must be >= 0."),
        ("food", None, "Budget limit must be >= 0."),
        ("food", "1" * 16, "Budget limit must be >= 0."),
        ("food", Decimal("0.000000001"), "Budget limit must be >= 0."),
    ])
    def test_invalid_budget(self, ops, user, category, limit, reason):
        result = ops.set_budget(user, category, limit)
        assert isinstance(result, Err)
        assert result.reason == reason
        assert user.budgets.entries() == {}

    def test_setting_budget_after_overrun_does_not_warn(self, ops, user):
        """Test budgets are checked only when an expense is written."""
        ops.add_income(user, "salary", "1000")
        ops.add_expense(user, "food", "80")
        result = ops.set_budget(user, "food", "50")
        assert isinstance(result, Ok)
        report = AggregationEngine().build_stats(user)
        assert report.budget_lines["food"].remaining == Decimal("-30")


class TestBudgetInvariant:
    """Remaining always equals limit minus recorded expenses."""

    def test_random_sequence(self, ops, user):
        engine = AggregationEngine()
        commands = [
            ("budget", "food", "100"),
            ("expense", "food", "12.34"),
            ("income", "food", "5"),
            ("expense", "rent", "300"),
            ("budget", "rent", "250"),
            ("expense", "food", "0.66"),
            ("budget", "food", "10"),
            ("expense", "bad", "x"),
            ("expense", "food", "7"),
        ]
        for command, category, amount in commands:
            if command == "budget":
                ops.set_budget(user, category, amount)
            elif command == "income":
                ops.add_income(user, category, amount)
            else:
                ops.add_expense(user, category, amount)

            report = engine.build_stats(user)
            for budgeted, line in report.budget_lines.items():
                spent = user.ledger.sum_for(EXPENSE, budgeted)
                assert line.remaining == user.budgets.get(budgeted) - spent
