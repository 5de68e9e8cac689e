"""Application and system log files."""

from __future__ import annotations

from pathlib import Path

from reclaim.models.scan_result import Category
from reclaim.models.source import CategorySource
from reclaim.utils import is_macos, xdg_data_home

# Live logs and login accounting that must survive a cleanup.
_SKIP_NAMES = frozenset({
    "syslog", "messages", "kern.log", "auth.log",
    "wtmp", "btmp", "lastlog", "faillog",
    "journal", "boot", ".keep",
})


class LogsSource(CategorySource):
    """Log directories of the user and the system."""

    id = "logs"
    name = "Log Files"
    description = "Old system and application logs."
    category = Category.LOGS
    sort_order = 20

    def source_paths(self) -> tuple[Path, ...]:
        if is_macos():
            return (
                Path.home() / "Library" / "Logs",
                Path("/private/var/log"),
            )
        return (xdg_data_home() / "xorg", Path("/var/log"))

    def accepts(self, path: Path) -> bool:
        return path.name not in _SKIP_NAMES
