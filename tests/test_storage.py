import json

from ledger.storage import JsonFileStorage, MemoryStorage


def test_memory_storage_copies_snapshots():
    storage = MemoryStorage()
    assert storage.load() is None
    snap = {"transactions": [{"id": 1}]}
    storage.save(snap)
    snap["transactions"].clear()
    assert storage.load() == {"transactions": [{"id": 1}]}
    assert storage.saves == 1


def test_json_file_storage_round_trip(tmp_path):
    storage = JsonFileStorage(tmp_path / "nested" / "ledger.json")
    assert storage.load() is None
    storage.save({"transactions": [], "monthlyBudget": 10, "selectedCurrency": "€"})
    assert storage.load() == {"transactions": [], "monthlyBudget": 10, "selectedCurrency": "€"}
    storage.save({"transactions": []})
    assert storage.load() == {"transactions": []}
    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["ledger.json"]


def test_json_file_storage_corrupt_file_reads_as_absent(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text("{oops", encoding="utf-8")
    assert JsonFileStorage(path).load() is None
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    assert JsonFileStorage(path).load() is None
