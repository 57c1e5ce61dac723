"""
Tests for JSON file persistence and the user registry.
"""

import json
import pytest
from decimal import Decimal

from finance_ledger.models import TransactionKind, User
from finance_ledger.services.auth import hash_password
from finance_ledger.services.registry import UserRegistry
from finance_ledger.services.storage import (
    SCHEMA_VERSION,
    JsonFileUserStorage,
    SchemaVersionError,
    StorageError,
)


INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE


def make_user(login: str) -> User:
    user = User(login=login, credential=hash_password("secret", iterations=1))
    user.ledger.append(INCOME, "salary", Decimal("1000.00"), "october")
    user.ledger.append(EXPENSE, "food", Decimal("12.30"), "")
    user.ledger.append(EXPENSE, "Food", Decimal("0.01"), "case matters")
    user.ledger.append(INCOME, "gift", Decimal("5"))
    user.budgets.set("food", Decimal("50.00"))
    user.budgets.set("groceries", Decimal("0"))
    return user


@pytest.fixture
def storage(tmp_path):
    return JsonFileUserStorage(tmp_path / "data.json")


class TestJsonFileUserStorage:
    """Tests for JsonFileUserStorage."""

    def test_missing_file_loads_empty(self, storage):
        assert storage.load_users() == {}

    def test_round_trip_preserves_everything(self, storage):
        """Test entries keep order and values; budgets keep their mapping."""
        users = {"alice": make_user("alice"), "bob": make_user("bob")}
        storage.save_users(users)
        loaded = storage.load_users()

        assert set(loaded) == {"alice", "bob"}
        for login, original in users.items():
            restored = loaded[login]
            assert restored.ledger.entries == original.ledger.entries
            assert restored.budgets.entries() == original.budgets.entries()
            assert restored.credential == original.credential
            assert restored == original

    def test_round_trip_keeps_amount_scale(self, storage):
        storage.save_users({"alice": make_user("alice")})
        restored = storage.load_users()["alice"]
        assert str(restored.ledger.entries[0].amount) == "1000.00"
        assert str(restored.budgets.get("food")) == "50.00"

    def test_document_shape(self, storage):
        """Test the on-disk schema is explicit and versioned."""
        storage.save_users({"alice": make_user("alice")})
        data = json.loads(storage.path.read_text(encoding="utf-8"))

        assert data["schema_version"] == SCHEMA_VERSION
        stored = data["users"][0]
        assert stored["login"] == "alice"
        assert [e["category"] for e in stored["ledger"]["entries"]] == [
            "salary", "food", "Food", "gift",
        ]
        assert stored["ledger"]["entries"][1]["amount"] == "12.30"
        assert stored["ledger"]["entries"][1]["kind"] == "expense"
        assert stored["budgets"]["limits"] == {"food": "50.00", "groceries": "0"}
        assert "secret" not in storage.path.read_text(encoding="utf-8")

    def test_save_creates_parent_directories(self, tmp_path):
        storage = JsonFileUserStorage(tmp_path / "nested" / "dir" / "data.json")
        storage.save_users({})
        assert storage.load_users() == {}

    def test_save_replaces_previous_content(self, storage):
        storage.save_users({"alice": make_user("alice")})
        storage.save_users({"bob": make_user("bob")})
        assert set(storage.load_users()) == {"bob"}

    def test_no_temp_files_left(self, storage, tmp_path):
        storage.save_users({"alice": make_user("alice")})
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_invalid_json(self, storage):
        storage.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            storage.load_users()

    def test_unknown_schema_version(self, storage):
        storage.path.write_text(json.dumps({"schema_version": 99, "users": []}), encoding="utf-8")
        with pytest.raises(SchemaVersionError):
            storage.load_users()

    def test_invalid_data(self, storage):
        """Test a negative amount in the file is rejected on load."""
        storage.save_users({"alice": make_user("alice")})
        data = json.loads(storage.path.read_text(encoding="utf-8"))
        data["users"][0]["ledger"]["entries"][0]["amount"] = "-1"
        storage.path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(StorageError):
            storage.load_users()

    def test_out_of_range_amount_in_file(self, storage):
        """Test an amount too wide to total exactly is rejected on load."""
        storage.save_users({"alice": make_user("alice")})
        data = json.loads(storage.path.read_text(encoding="utf-8"))
        data["users"][0]["ledger"]["entries"][0]["amount"] = "9" * 70
        storage.path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(StorageError):
            storage.load_users()

    def test_duplicate_login(self, storage):
        storage.save_users({"alice": make_user("alice")})
        data = json.loads(storage.path.read_text(encoding="utf-8"))
        data["users"].append(data["users"][0])
        storage.path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(StorageError, match="Duplicate login"):
            storage.load_users()

    def test_unwritable_target(self, tmp_path):
        """Test write failures surface as StorageError after retries."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        storage = JsonFileUserStorage(blocker / "data.json")
        with pytest.raises(StorageError):
            storage.save_users({})


class TestUserRegistry:
    """Tests for UserRegistry snapshot/restore hooks."""

    def test_put_get_exists(self):
        registry = UserRegistry()
        user = make_user("alice")
        registry.put(user)
        assert registry.exists("alice")
        assert registry.get("alice") is user
        assert registry.get("bob") is None
        assert len(registry) == 1

    def test_snapshot_is_independent(self):
        """Test writes after a snapshot do not leak into it."""
        registry = UserRegistry({"alice": make_user("alice")})
        snapshot = registry.snapshot()

        registry.get("alice").ledger.append(EXPENSE, "late", Decimal("1"))
        registry.get("alice").budgets.set("late", Decimal("2"))

        assert len(snapshot["alice"].ledger.entries) == 4
        assert snapshot["alice"].budgets.get("late") is None

    def test_snapshot_preserves_order(self):
        registry = UserRegistry({"alice": make_user("alice")})
        snapshot = registry.snapshot()
        assert snapshot["alice"].ledger.entries == registry.get("alice").ledger.entries

    def test_replace_all(self):
        registry = UserRegistry({"alice": make_user("alice")})
        registry.replace_all({"bob": make_user("bob")})
        assert not registry.exists("alice")
        assert registry.exists("bob")

    def test_replace_all_rejects_mismatched_keys(self):
        registry = UserRegistry()
        with pytest.raises(ValueError):
            registry.replace_all({"carol": make_user("alice")})
