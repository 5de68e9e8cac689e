"""Phased, cancellable scan orchestration."""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable

from reclaim.core.probe import DiskUsage, disk_usage
from reclaim.core.registry import SourceRegistry
from reclaim.core.scanner import scan_category
from reclaim.core.sizing import SizeAggregator, get_aggregator
from reclaim.models.scan_result import Category, ScanCategory, ScanProgress, ScanSummary
from reclaim.models.tier import TierConfig
from reclaim.settings import Settings

log = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanProgress], None]
DiskProbe = Callable[[str], DiskUsage]

_PHASE_LABELS = {
    Category.CACHE: "Analyzing cache...",
    Category.LOGS: "Scanning log files...",
    Category.DOWNLOADS: "Checking downloads...",
    Category.TRASH: "Analyzing trash...",
}
_FINALIZE_LABEL = "Calculating space..."
_COMPLETE_LABEL = "Scan complete!"


class ReclaimError(Exception):
    """Base class for engine errors."""


class ScanCancelled(ReclaimError):
    """Raised when a scan is cancelled before it could finish."""


class ScanInProgressError(ReclaimError):
    """Raised when a scan is started while another run is still going."""


class ScanState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CancelToken:
    """Opaque handle that lets another thread cancel one orchestrator's scan."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def _reset(self) -> None:
        self._event.clear()


class ScanOrchestrator:
    """Runs one weighted phase per category, strictly in order.

    Cancellation is cooperative and checked before every phase, including
    finalization. A cancelled run raises :class:`ScanCancelled`; it never
    returns a partial summary. The orchestrator is reusable: each
    :meth:`start` resets the cancel flag and begins again at phase 0.
    """

    def __init__(
        self,
        config: TierConfig,
        *,
        registry: SourceRegistry | None = None,
        aggregator: SizeAggregator | None = None,
        settings: Settings | None = None,
        disk_probe: DiskProbe = disk_usage,
        disk_path: str = "/",
    ) -> None:
        settings = settings or Settings.instance()
        self.config = config
        self.registry = registry or SourceRegistry(settings=settings)
        self.aggregator = aggregator or get_aggregator(settings.sizing_method(), estimate=config.estimate_sizes)
        self._disk_probe = disk_probe
        self._disk_path = disk_path
        self._token = CancelToken()
        self._run_token = self._token
        self._lock = threading.Lock()
        self._state = ScanState.IDLE

    @property
    def state(self) -> ScanState:
        with self._lock:
            return self._state

    @property
    def cancel_token(self) -> CancelToken:
        return self._token

    def cancel(self) -> None:
        """Request cancellation; the running scan stops at the next phase boundary."""
        with self._lock:
            token = self._run_token
        token.cancel()

    def start(
        self,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancelToken | None = None,
    ) -> ScanSummary:
        """Run all phases and return the summary.

        Args:
            on_progress: Called synchronously after each phase. Must return
                quickly; exceptions it raises are logged and ignored.
            cancel_token: Caller-owned token for this run. It is not reset,
                so a cancel issued before the run starts is honored. By
                default the orchestrator's own token is reset and used.

        Raises:
            ScanCancelled: If :meth:`cancel` was called before the last phase.
            ScanInProgressError: If this orchestrator is already running.
        """
        with self._lock:
            if self._state is ScanState.RUNNING:
                raise ScanInProgressError("A scan is already running")
            self._state = ScanState.RUNNING
            if cancel_token is None:
                self._token._reset()
                cancel_token = self._token
            self._run_token = cancel_token

        log.info("Starting %s scan", self.config.tier.value)
        try:
            summary = self._run(on_progress)
        except ScanCancelled:
            self._set_state(ScanState.CANCELLED)
            log.info("%s scan cancelled", self.config.tier.value.capitalize())
            raise
        except BaseException:
            self._set_state(ScanState.IDLE)
            raise

        self._set_state(ScanState.COMPLETED)
        log.info(
            "Scan completed: %d bytes in %d items (%d ms)",
            summary.total_space, summary.item_count, summary.scan_time_ms,
        )
        return summary

    def _run(self, on_progress: ProgressCallback | None) -> ScanSummary:
        started = time.monotonic()
        weights = self.config.weights()
        categories: list[ScanCategory] = []
        percentage = 0
        items_scanned = 0

        phases = self.config.categories
        _emit(on_progress, ScanProgress(0, _PHASE_LABELS[phases[0]] if phases else _FINALIZE_LABEL, 0))

        for index, category in enumerate(phases):
            self._check_cancelled()
            source = self.registry.get(category)
            result = scan_category(
                source,
                self.aggregator,
                item_cap=self.config.item_cap,
                expose_items=self.config.expose_items,
            )
            categories.append(result)
            items_scanned += result.item_count
            percentage += weights[index]
            _emit(on_progress, ScanProgress(percentage, _PHASE_LABELS[category], items_scanned))

        self._check_cancelled()
        _emit(on_progress, ScanProgress(percentage, _FINALIZE_LABEL, items_scanned))
        disk = self._disk_probe(self._disk_path)
        summary = ScanSummary(
            total_space=sum(c.size for c in categories),
            categories=tuple(categories),
            item_count=sum(c.item_count for c in categories),
            scan_time_ms=int((time.monotonic() - started) * 1000),
            free_space=disk.free,
            total_disk_space=disk.total,
        )
        _emit(on_progress, ScanProgress(100, _COMPLETE_LABEL, summary.item_count))
        return summary

    def _check_cancelled(self) -> None:
        if self._run_token.cancelled:
            raise ScanCancelled("Scan cancelled")

    def _set_state(self, state: ScanState) -> None:
        with self._lock:
            self._state = state


def _emit(on_progress: ProgressCallback | None, progress: ScanProgress) -> None:
    if on_progress is None:
        return
    try:
        on_progress(progress)
    except Exception:
        log.exception("Progress callback failed at %d%%", progress.percentage)
