"""Engine facade used by the CLI and the D-Bus service."""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, Iterable

from reclaim.core import cleaner
from reclaim.core.orchestrator import CancelToken, ProgressCallback, ScanOrchestrator
from reclaim.core.probe import system_info
from reclaim.core.registry import SourceRegistry
from reclaim.core.scanner import scan_category
from reclaim.core.sizing import SizeAggregator, get_aggregator
from reclaim.models.clean_result import CleanupResult
from reclaim.models.scan_result import Category, ScanItem, ScanSummary
from reclaim.models.tier import Tier, tier_config
from reclaim.settings import Settings

log = logging.getLogger(__name__)


class ReclaimEngine:
    """Scans, cancels, cleans and reports system facts.

    Each :meth:`scan` builds a fresh orchestrator for its tier; the engine
    only remembers the cancel token of the run in flight (for
    :meth:`cancel_scan`) and the last completed full-tier summary (for
    :meth:`items_for_paths`).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        registry: SourceRegistry | None = None,
        aggregator: SizeAggregator | None = None,
    ) -> None:
        self.settings = settings or Settings.instance()
        self.registry = registry or SourceRegistry(settings=self.settings)
        self._aggregator = aggregator
        self._lock = threading.Lock()
        self._active: CancelToken | None = None
        self._last_full: ScanSummary | None = None

    def scan(
        self,
        tier: Tier | str = Tier.RESTRICTED,
        plan: str = "free",
        on_progress: ProgressCallback | None = None,
    ) -> ScanSummary:
        """Run a complete scan for *tier*.

        Raises:
            ScanCancelled: If :meth:`cancel_scan` was called mid-run.
        """
        config = tier_config(tier, plan, self.settings)
        orchestrator = ScanOrchestrator(
            config,
            registry=self.registry,
            aggregator=self._aggregator,
            settings=self.settings,
        )
        token = CancelToken()
        with self._lock:
            self._active = token
        try:
            summary = orchestrator.start(on_progress, cancel_token=token)
        finally:
            with self._lock:
                if self._active is token:
                    self._active = None

        if config.tier is Tier.FULL:
            self._last_full = summary
        return summary

    def cancel_scan(self) -> None:
        """Ask the in-flight scan to stop. No-op when nothing is running."""
        with self._lock:
            active = self._active
        if active is None:
            log.debug("Cancel requested with no scan running")
            return
        active.cancel()

    def clean(self, items: Iterable[ScanItem], dry_run: bool = False) -> CleanupResult:
        """Delete the given items; see :func:`reclaim.core.cleaner.clean`."""
        return cleaner.clean(items, dry_run=dry_run)

    def cleanable_items(self, category: Category) -> list[ScanItem]:
        """Every deletable top-level item of *category*, uncapped, largest first."""
        aggregator = self._aggregator or get_aggregator(self.settings.sizing_method())
        result = scan_category(
            self.registry.get(category),
            aggregator,
            item_cap=sys.maxsize,
            expose_items=True,
        )
        return [item for item in result.items if item.can_delete]

    def clean_category(self, category: Category, dry_run: bool = False) -> CleanupResult:
        """Rescan *category* and clean everything deletable in it."""
        log.info("Cleaning entire category: %s", category.value)
        return self.clean(self.cleanable_items(category), dry_run=dry_run)

    def items_for_paths(self, paths: Iterable[str]) -> tuple[list[ScanItem], list[str]]:
        """Resolve paths against the last full scan.

        Returns:
            (items, unknown) where *items* keeps the order of *paths* and
            *unknown* lists paths the last full scan did not report.
        """
        known = {str(i.path): i for i in self._last_full.items()} if self._last_full else {}
        items: list[ScanItem] = []
        unknown: list[str] = []
        for path in paths:
            item = known.get(path)
            if item is None:
                unknown.append(path)
            else:
                items.append(item)
        return items, unknown

    def get_last_full_scan(self) -> ScanSummary | None:
        return self._last_full

    def system_info(self) -> dict[str, Any]:
        return system_info()
