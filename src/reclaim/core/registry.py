"""Category to source dispatch."""

from __future__ import annotations

import logging
from typing import Iterator, assert_never

from reclaim.models.scan_result import Category
from reclaim.models.source import CategorySource
from reclaim.plugins.downloads import DownloadsSource
from reclaim.plugins.logs import LogsSource
from reclaim.plugins.trash import TrashSource
from reclaim.plugins.user_cache import UserCacheSource
from reclaim.settings import Settings

log = logging.getLogger(__name__)


def build_source(category: Category, settings: Settings | None = None) -> CategorySource:
    """Return the source that scans *category*."""
    match category:
        case Category.CACHE:
            return UserCacheSource()
        case Category.LOGS:
            return LogsSource()
        case Category.DOWNLOADS:
            return DownloadsSource(settings)
        case Category.TRASH:
            return TrashSource()
        case _:
            assert_never(category)


class SourceRegistry:
    """One source per category, with room to substitute them in tests."""

    def __init__(
        self,
        sources: dict[Category, CategorySource] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._sources: dict[Category, CategorySource] = {}
        for category in Category:
            source = (sources or {}).get(category) or build_source(category, settings)
            if source.category is not category:
                raise ValueError(f"Source '{source.id}' scans {source.category.value}, not {category.value}")
            self._sources[category] = source
            log.debug("Registered source: %s (%s)", source.id, source.name)

    def get(self, category: Category) -> CategorySource:
        """Get the source for a category."""
        return self._sources[category]

    def get_available(self) -> list[CategorySource]:
        """Get all sources with at least one existing root on this system."""
        available = []
        for source in self._sources.values():
            try:
                if source.is_available():
                    available.append(source)
            except OSError:
                log.exception("Error checking availability for source '%s'", source.id)
        return available

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[CategorySource]:
        return iter(self._sources.values())
