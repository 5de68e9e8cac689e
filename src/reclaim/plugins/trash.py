"""The user's trash."""

from __future__ import annotations

from pathlib import Path

from reclaim.models.scan_result import Category
from reclaim.models.source import CategorySource
from reclaim.utils import is_macos, xdg_data_home


class TrashSource(CategorySource):
    """Files already deleted by the user (~/.local/share/Trash, ~/.Trash)."""

    @property
    def id(self) -> str:
        return "trash"

    @property
    def name(self) -> str:
        return "Trash"

    @property
    def description(self) -> str:
        return "Permanently deletes files in the trash. These files were already deleted by the user."

    @property
    def category(self) -> Category:
        return Category.TRASH

    @property
    def sort_order(self) -> int:
        return 40

    def source_paths(self) -> tuple[Path, ...]:
        if is_macos():
            return (Path.home() / ".Trash",)
        trash_dir = xdg_data_home() / "Trash"
        return (trash_dir / "files", trash_dir / "info")
