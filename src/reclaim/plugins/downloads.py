"""Installer images left behind in the Downloads directory."""

from __future__ import annotations

import logging
from pathlib import Path

from reclaim.models.scan_result import Category
from reclaim.models.source import CategorySource
from reclaim.settings import Settings
from reclaim.utils import xdg_download_dir

log = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    ".dmg", ".pkg", ".deb", ".rpm", ".appimage", ".iso", ".msi", ".exe",
)


class DownloadsSource(CategorySource):
    """Disk images and installer packages in ~/Downloads.

    Only regular files whose suffix matches ``downloads.extensions`` from
    settings are accepted; folders are always left alone.
    """

    id = "downloads"
    name = "Downloads Cleanup"
    description = "Old downloads, disk images and installers."
    category = Category.DOWNLOADS
    sort_order = 30

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    def _extensions(self) -> tuple[str, ...]:
        settings = self._settings or Settings.instance()
        configured = settings.get("downloads.extensions")
        if not configured:
            return DEFAULT_EXTENSIONS
        if not isinstance(configured, list):
            log.warning("Ignoring downloads.extensions: expected a list, got %r", configured)
            return DEFAULT_EXTENSIONS
        return tuple(str(ext).lower() for ext in configured)

    def source_paths(self) -> tuple[Path, ...]:
        return (xdg_download_dir(),)

    def accepts(self, path: Path) -> bool:
        if path.is_symlink() or not path.is_file():
            return False
        return path.suffix.lower() in self._extensions()
