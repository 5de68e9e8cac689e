"""User cache directories (~/.cache, ~/Library/Caches)."""

from __future__ import annotations

from pathlib import Path

from reclaim.models.scan_result import Category
from reclaim.models.source import CategorySource
from reclaim.utils import is_macos, xdg_cache_home

# Caches held open by running desktop components; removing them mid-session
# breaks font rendering or forces a slow rebuild.
_EXCLUDE_DIRS = frozenset({
    "fontconfig",
    "icon-cache.kcache",
    "gstreamer-1.0",
    "babl",
    "gegl-0.4",
    "mesa_shader_cache",
    "mesa_shader_cache_db",
    "nvidia",
})


class UserCacheSource(CategorySource):
    """Per-application caches in the user's cache directory."""

    @property
    def id(self) -> str:
        return "user_cache"

    @property
    def name(self) -> str:
        return "User Cache"

    @property
    def description(self) -> str:
        return (
            "Application caches and temporary files. Applications will "
            "regenerate these files as needed."
        )

    @property
    def category(self) -> Category:
        return Category.CACHE

    @property
    def sort_order(self) -> int:
        return 10

    def source_paths(self) -> tuple[Path, ...]:
        paths = [xdg_cache_home()]
        if is_macos():
            paths.append(Path.home() / "Library" / "Caches")
        return tuple(paths)

    def accepts(self, path: Path) -> bool:
        return path.name not in _EXCLUDE_DIRS
