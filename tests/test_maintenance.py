import json

import pytest

from mealplan.errors import SnapshotError
from mealplan.pricing.cache import DAY_MS, ProductCache
from mealplan.pricing.maintenance import (
    export_json,
    list_keys,
    load_snapshot,
    open_cache,
    sweep_and_report,
    write_snapshot,
)


def test_write_then_open_preserves_entries(tmp_path, clock):
    path = str(tmp_path / "cache" / "products.json")
    cache = ProductCache(clock=clock)
    cache.put("olive oil", {"productName": "Olive Oil 750ml"}, 2, "tbsp", "olive oil")
    write_snapshot(cache, path)

    reopened = open_cache(path, clock=clock)
    assert reopened.hydrated
    assert list_keys(reopened) == ["olive oil"]
    assert reopened.get("olive oil").product == {"productName": "Olive Oil 750ml"}


def test_writes_are_not_persisted_without_export(tmp_path, clock):
    path = str(tmp_path / "products.json")
    cache = ProductCache(clock=clock)
    write_snapshot(cache, path)
    cache.put("rice", {"productName": "Rice 1kg"}, 1, "cup", "rice")

    assert open_cache(path, clock=clock).get("rice") is None


def test_missing_snapshot_is_empty(tmp_path, clock):
    path = str(tmp_path / "nope.json")
    assert load_snapshot(path) == {}
    cache = open_cache(path, ttl_ms=DAY_MS, clock=clock)
    assert len(cache) == 0
    assert cache.ttl_ms == DAY_MS


def test_invalid_snapshot_file_raises(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf8")
    with pytest.raises(SnapshotError):
        load_snapshot(str(bad))

    listed = tmp_path / "list.json"
    listed.write_text("[]", encoding="utf8")
    with pytest.raises(SnapshotError):
        load_snapshot(str(listed))


def test_export_json_is_snapshot_format(clock):
    cache = ProductCache(clock=clock)
    cache.put("egg", {"productName": "Free Range Eggs 12pk"}, 6, "whole", "egg")
    data = json.loads(export_json(cache))
    assert data["meta"]["lastUpdated"] == 1_700_000_000_000
    assert data["products"]["egg"]["searchTerm"] == "egg"


def test_sweep_and_report(clock):
    cache = ProductCache(ttl_ms=DAY_MS, clock=clock)
    cache.put("egg", {"productName": "Eggs"}, 6, "whole", "egg")
    clock.advance(2 * DAY_MS / 1000)
    cache.put("milk", {"productName": "Milk"}, 1, "l", "milk")

    report = sweep_and_report(cache)
    assert report.removed == 1
    assert report.remaining.total == 1
    assert report.remaining.expired == 0
