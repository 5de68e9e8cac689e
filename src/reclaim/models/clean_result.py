"""Cleanup result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from reclaim.models.scan_result import ScanItem, item_to_dict

PROTECTED_PATH = "protected path"


@dataclass(frozen=True, slots=True)
class CleanupError:
    """Why a single item ended up in ``failed``."""

    item: ScanItem
    reason: str


@dataclass(slots=True)
class CleanupResult:
    """Result of a cleanup invocation.

    Every input item lands in exactly one of ``cleaned`` or ``failed``,
    and every failed item has a matching entry in ``errors``.
    """

    cleaned: list[ScanItem] = field(default_factory=list)
    failed: list[ScanItem] = field(default_factory=list)
    errors: list[CleanupError] = field(default_factory=list)
    total_size_freed: int = 0
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return not self.failed

    def add_cleaned(self, item: ScanItem) -> None:
        self.cleaned.append(item)
        self.total_size_freed += item.size

    def add_failed(self, item: ScanItem, reason: str) -> None:
        self.failed.append(item)
        self.errors.append(CleanupError(item=item, reason=reason))


def cleanup_to_dict(result: CleanupResult) -> dict[str, Any]:
    return {
        "success": result.success,
        "dry_run": result.dry_run,
        "total_size_freed": result.total_size_freed,
        "cleaned": [item_to_dict(i) for i in result.cleaned],
        "failed": [item_to_dict(i) for i in result.failed],
        "errors": [{"path": str(e.item.path), "error": e.reason} for e in result.errors],
    }
