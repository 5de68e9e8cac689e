"""Scan result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any


class Category(Enum):
    """Logical source of reclaimable space."""

    CACHE = "cache"
    LOGS = "logs"
    DOWNLOADS = "downloads"
    TRASH = "trash"


@dataclass(frozen=True, slots=True)
class ScanItem:
    """Single file or directory that may be cleaned.

    ``size`` is the recursive total for directories. ``last_modified`` is
    only set for regular files. ``can_delete`` is the safety verdict at
    scan time; the cleaner re-checks it and never trusts a ``True``.
    """

    path: Path
    size: int
    category: Category
    can_delete: bool
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class ScanCategory:
    """One category's scan result.

    ``item_count`` may exceed ``len(items)`` when items are capped or
    withheld (restricted tier).
    """

    id: str
    name: str
    description: str
    category: Category
    size: int = 0
    item_count: int = 0
    items: tuple[ScanItem, ...] = ()


@dataclass(frozen=True, slots=True)
class ScanSummary:
    """Result of one orchestrated scan run."""

    total_space: int
    categories: tuple[ScanCategory, ...]
    item_count: int
    scan_time_ms: int
    free_space: int = 0
    total_disk_space: int = 0

    def items(self) -> list[ScanItem]:
        """Return all exposed items across categories, in phase order."""
        return [item for cat in self.categories for item in cat.items]

    def get(self, category: Category) -> ScanCategory | None:
        """Get the result for a category, if its phase ran."""
        for cat in self.categories:
            if cat.category is category:
                return cat
        return None


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Progress event emitted between scan phases."""

    percentage: int
    phase: str
    items_scanned: int


# ── serialization ────────────────────────────────────────────────────────

def item_to_dict(item: ScanItem) -> dict[str, Any]:
    return {
        "path": str(item.path),
        "size": item.size,
        "category": item.category.value,
        "can_delete": item.can_delete,
        "last_modified": item.last_modified.isoformat() if item.last_modified else None,
    }


def item_from_dict(data: dict[str, Any]) -> ScanItem:
    """Build a ScanItem from a dict produced by :func:`item_to_dict`.

    A missing ``can_delete`` defaults to ``False``.

    Raises:
        KeyError, ValueError: If ``path``, ``size`` or ``category`` is
            missing or invalid.
    """
    modified = data.get("last_modified")
    return ScanItem(
        path=Path(data["path"]),
        size=int(data["size"]),
        category=Category(data["category"]),
        can_delete=bool(data.get("can_delete", False)),
        last_modified=datetime.fromisoformat(modified) if modified else None,
    )


def summary_to_dict(summary: ScanSummary) -> dict[str, Any]:
    return {
        "total_space": summary.total_space,
        "item_count": summary.item_count,
        "scan_time_ms": summary.scan_time_ms,
        "free_space": summary.free_space,
        "total_disk_space": summary.total_disk_space,
        "categories": [
            {
                "id": cat.id,
                "name": cat.name,
                "description": cat.description,
                "category": cat.category.value,
                "size": cat.size,
                "item_count": cat.item_count,
                "items": [item_to_dict(i) for i in cat.items],
            }
            for cat in summary.categories
        ],
    }


def mtime_to_datetime(mtime: float) -> datetime:
    """Convert an ``st_mtime`` value to an aware UTC datetime."""
    return datetime.fromtimestamp(mtime, tz=timezone.utc)
