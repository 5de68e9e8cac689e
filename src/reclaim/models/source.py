"""Base category source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from reclaim.models.scan_result import Category


class CategorySource(ABC):
    """Where one category's candidates live and which entries count.

    Every built-in category has exactly one source; the scanner lists each
    of ``source_paths()`` one level deep and keeps the entries
    ``accepts()`` lets through.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique identifier, e.g. 'user_cache'."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name, e.g. 'User Cache'."""

    @property
    @abstractmethod
    def description(self) -> str:
        """What this source holds and why it is reclaimable."""

    @property
    @abstractmethod
    def category(self) -> Category:
        """Category this source scans for."""

    @property
    def sort_order(self) -> int:
        """Display order (lower = first). Default 50."""
        return 50

    @abstractmethod
    def source_paths(self) -> tuple[Path, ...]:
        """Root directories to list. Missing ones are skipped by the scanner."""

    def accepts(self, path: Path) -> bool:
        """Whether a top-level entry belongs to this category."""
        return True

    @property
    def unavailable_reason(self) -> str | None:
        """Why this source has nothing to scan here, or None if supported."""
        if not any(p.is_dir() for p in self.source_paths()):
            return f"{self.name} directory not found"
        return None

    def is_available(self) -> bool:
        """Check if any of this source's roots exist on the current system."""
        return self.unavailable_reason is None
