"""Tests for result models and their JSON-ready forms."""

from __future__ import annotations

from pathlib import Path

import pytest

from reclaim.models.clean_result import PROTECTED_PATH, CleanupResult, cleanup_to_dict
from reclaim.models.scan_result import (
    Category,
    ScanCategory,
    ScanItem,
    ScanSummary,
    item_from_dict,
    item_to_dict,
    mtime_to_datetime,
)


def _item(path: str, size: int, **kwargs) -> ScanItem:
    return ScanItem(path=Path(path), size=size, category=Category.CACHE, can_delete=True, **kwargs)


class TestItemDict:
    def test_modified_time_survives(self):
        item = _item("/home/u/.cache/a", 10, last_modified=mtime_to_datetime(1_700_000_000))
        assert item_from_dict(item_to_dict(item)) == item

    def test_missing_can_delete_is_not_deletable(self):
        item = item_from_dict({"path": "/home/u/.cache/a", "size": 5, "category": "cache"})
        assert item.can_delete is False
        assert item.last_modified is None

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            item_from_dict({"path": "/x", "size": 1, "category": "photos"})


class TestScanSummary:
    def test_items_and_get(self):
        a, b = _item("/a", 2), _item("/b", 1)
        cache = ScanCategory("c", "Cache", "", Category.CACHE, size=3, item_count=2, items=(a, b))
        summary = ScanSummary(total_space=3, categories=(cache,), item_count=2, scan_time_ms=1)

        assert summary.items() == [a, b]
        assert summary.get(Category.CACHE) is cache
        assert summary.get(Category.TRASH) is None


class TestCleanupResult:
    def test_partition_and_errors(self):
        result = CleanupResult()
        ok, bad = _item("/a", 7), _item("/b", 3)
        result.add_cleaned(ok)
        result.add_failed(bad, PROTECTED_PATH)

        assert not result.success
        assert result.total_size_freed == 7

        data = cleanup_to_dict(result)
        assert data["success"] is False
        assert [i["path"] for i in data["cleaned"]] == ["/a"]
        assert data["errors"] == [{"path": "/b", "error": "protected path"}]

    def test_empty_result_is_success(self):
        assert CleanupResult(dry_run=True).success
