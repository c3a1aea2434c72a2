"""Unit tests for budget_planner.ledger."""

from __future__ import annotations

import json
from datetime import datetime

from budget_planner.ledger import LedgerStore, Transaction, parse_amount, parse_timestamp
from budget_planner.persistent_store import LocalStorage


def _march(day: int = 1) -> datetime:
    return datetime(2024, 3, day, 12, 0)


def test_parse_amount() -> None:
    assert parse_amount("12.5") == 12.5
    assert parse_amount(" 7 ") == 7.0
    assert parse_amount(0) == 0.0
    assert parse_amount("abc") is None
    assert parse_amount("") is None
    assert parse_amount("-1") is None
    assert parse_amount("nan") is None
    assert parse_amount("inf") is None
    assert parse_amount(True) is None
    assert parse_amount(None) is None


def test_parse_timestamp_handles_utc_suffix() -> None:
    parsed = parse_timestamp("2024-03-05T10:00:00.000Z")
    assert parsed.tzinfo is None
    assert parsed.year == 2024


def test_add_assigns_unique_ids() -> None:
    ledger = LedgerStore()
    records = [ledger.add(f"Item {i}", i, "food", "expense") for i in range(20)]
    ids = [r.id for r in records]
    assert len(set(ids)) == 20
    assert ids == sorted(ids)
    assert all(ledger.get(r.id) == r for r in records)


def test_add_trims_and_parses() -> None:
    ledger = LedgerStore()
    record = ledger.add("  Groceries  ", "42.10", "food", "expense", date=_march())
    assert record.description == "Groceries"
    assert record.amount == 42.10
    assert record.date == _march()
    assert record.updated_at is None


def test_add_rejects_invalid_input() -> None:
    ledger = LedgerStore()
    ledger.add("Rent", 800, "housing", "expense")
    assert ledger.add("", 10, "food", "expense") is None
    assert ledger.add("   ", 10, "food", "expense") is None
    assert ledger.add("Lunch", "abc", "food", "expense") is None
    assert ledger.add("Lunch", -5, "food", "expense") is None
    assert ledger.add("Lunch", 5, "pets", "expense") is None
    assert ledger.add("Lunch", 5, "food", "refund") is None
    assert len(ledger) == 1


def test_remove_is_idempotent() -> None:
    ledger = LedgerStore()
    keep = ledger.add("Salary", 2000, "other", "income")
    drop = ledger.add("Movie", 12, "entertainment", "expense")
    assert ledger.remove(drop.id) is True
    assert ledger.remove(drop.id) is False
    assert ledger.records() == [keep]


def test_update_preserves_unspecified_fields() -> None:
    ledger = LedgerStore()
    original = ledger.add("Bus pass", 60, "transportation", "expense", date=_march(3))
    updated = ledger.update(original.id, {'amount': "65"})
    assert updated.amount == 65.0
    assert updated.description == original.description
    assert updated.category == original.category
    assert updated.kind == original.kind
    assert updated.date == original.date
    assert updated.updated_at is not None


def test_update_never_changes_id() -> None:
    ledger = LedgerStore()
    record = ledger.add("Gym", 30, "healthcare", "expense")
    updated = ledger.update(record.id, {'id': 1, 'description': "Gym membership"})
    assert updated.id == record.id
    assert ledger.get(1) is None


def test_update_rejects_invalid_fields_as_a_whole() -> None:
    ledger = LedgerStore()
    record = ledger.add("Gym", 30, "healthcare", "expense")
    assert ledger.update(record.id, {'description': "Yoga", 'amount': "lots"}) is None
    assert ledger.get(record.id) == record


def test_update_missing_id_is_noop() -> None:
    ledger = LedgerStore()
    ledger.add("Gym", 30, "healthcare", "expense")
    assert ledger.update(123, {'amount': 1}) is None


def test_sorted_by_date_and_for_month() -> None:
    ledger = LedgerStore()
    older = ledger.add("A", 1, "food", "expense", date=_march(1))
    newer = ledger.add("B", 1, "food", "expense", date=_march(20))
    april = ledger.add("C", 1, "food", "expense", date=datetime(2024, 4, 2))
    assert ledger.sorted_by_date() == [april, newer, older]
    assert ledger.for_month(2, 2024) == [older, newer]


def test_round_trip_through_dicts() -> None:
    ledger = LedgerStore()
    ledger.add("Salary", 2000, "other", "income", date=_march())
    record = ledger.add("Rent", 800, "housing", "expense", date=_march(2))
    ledger.update(record.id, {'description': "Rent (March)"})
    restored = [Transaction.from_dict(d) for d in ledger.to_records()]
    assert restored == ledger.records()


def test_mutations_write_through_to_storage(tmp_path) -> None:
    storage = LocalStorage(tmp_path)
    ledger = LedgerStore(storage=storage)
    record = ledger.add("Rent", 800, "housing", "expense", date=_march())
    stored = json.loads((tmp_path / "expenses.json").read_text())
    assert stored[0]['description'] == "Rent"
    assert stored[0]['kind'] == "expense"

    ledger.remove(record.id)
    assert json.loads((tmp_path / "expenses.json").read_text()) == []


def test_rejected_add_does_not_write(tmp_path) -> None:
    storage = LocalStorage(tmp_path)
    ledger = LedgerStore(storage=storage)
    ledger.add("", 5, "food", "expense")
    assert not (tmp_path / "expenses.json").exists()


def test_load_round_trip(tmp_path) -> None:
    storage = LocalStorage(tmp_path)
    ledger = LedgerStore(storage=storage)
    ledger.add("Salary", 2000, "other", "income", date=_march())
    ledger.add("Rent", 800, "housing", "expense", date=_march(2))
    restored = LedgerStore.load(storage)
    assert restored.records() == ledger.records()


def test_load_accepts_legacy_field_names(tmp_path) -> None:
    legacy = [{
        'id': 1709290000000,
        'description': "Coffee",
        'amount': 3.5,
        'category': "food",
        'type': "expense",
        'date': "2024-03-01T10:00:00.000Z",
        'updatedAt': "2024-03-02T10:00:00.000Z",
    }]
    (tmp_path / "expenses.json").write_text(json.dumps(legacy))
    ledger = LedgerStore.load(LocalStorage(tmp_path))
    record = ledger.records()[0]
    assert record.kind == "expense"
    assert record.updated_at is not None


def test_load_skips_malformed_records(tmp_path) -> None:
    data = [
        {'id': 1, 'description': "Ok", 'amount': 1, 'category': "food", 'kind': "expense",
         'date': "2024-03-01T00:00:00"},
        {'id': 2, 'description': "", 'amount': 1, 'category': "food", 'kind': "expense",
         'date': "2024-03-01T00:00:00"},
        {'id': 3, 'description': "No date", 'amount': 1, 'category': "food", 'kind': "expense"},
        "not a record",
    ]
    (tmp_path / "expenses.json").write_text(json.dumps(data))
    ledger = LedgerStore.load(LocalStorage(tmp_path))
    assert [r.id for r in ledger] == [1]


def test_load_corrupt_blob_gives_empty_ledger(tmp_path) -> None:
    (tmp_path / "expenses.json").write_text("{not json")
    assert len(LedgerStore.load(LocalStorage(tmp_path))) == 0


def test_ids_continue_after_loaded_records(tmp_path) -> None:
    future_id = 10 ** 15
    data = [{'id': future_id, 'description': "Old", 'amount': 1, 'category': "food",
             'kind': "expense", 'date': "2024-03-01T00:00:00"}]
    (tmp_path / "expenses.json").write_text(json.dumps(data))
    ledger = LedgerStore.load(LocalStorage(tmp_path))
    assert ledger.add("New", 1, "food", "expense").id == future_id + 1


def test_to_dataframe_columns() -> None:
    ledger = LedgerStore()
    assert list(ledger.to_dataframe().columns) == [
        'id', 'description', 'amount', 'category', 'kind', 'date', 'updated_at'
    ]
    ledger.add("Rent", 800, "housing", "expense", date=_march())
    df = ledger.to_dataframe()
    assert df.loc[0, 'amount'] == 800.0
    assert df.loc[0, 'date'].month == 3


def test_load_skips_infinite_id(tmp_path) -> None:
    (tmp_path / "expenses.json").write_text(
        '[{"id": Infinity, "description": "Bad", "amount": 1, "category": "food",'
        ' "kind": "expense", "date": "2024-03-01T00:00:00"},'
        ' {"id": 2, "description": "Good", "amount": 1, "category": "food",'
        ' "kind": "expense", "date": "2024-03-01T00:00:00"}]'
    )
    ledger = LedgerStore.load(LocalStorage(tmp_path))
    assert [r.id for r in ledger] == [2]


def test_load_skips_blank_date(tmp_path) -> None:
    data = [{'id': 1, 'description': "Blank", 'amount': 1, 'category': "food",
             'kind': "expense", 'date': ""}]
    (tmp_path / "expenses.json").write_text(json.dumps(data))
    assert len(LedgerStore.load(LocalStorage(tmp_path))) == 0


def test_blank_date_is_rejected_on_add_and_update() -> None:
    ledger = LedgerStore()
    assert ledger.add("Coffee", 3, "food", "expense", date="") is None
    record = ledger.add("Coffee", 3, "food", "expense", date=_march())
    assert ledger.update(record.id, {'date': ""}) is None
    assert ledger.get(record.id).date == _march()
    assert len(ledger) == 1


def test_stored_field_names() -> None:
    ledger = LedgerStore()
    record = ledger.add("Rent", 800, "housing", "expense", date=_march())
    assert 'updated_at' not in record.to_dict()
    stored = ledger.update(record.id, {'amount': 810}).to_dict()
    assert set(stored) == {'id', 'description', 'amount', 'category', 'kind', 'date', 'updated_at'}
