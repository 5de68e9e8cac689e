"""D-Bus service for GUI communication.

D-Bus methods use PascalCase per D-Bus convention, and type signatures
like "as" and "(usu)" are D-Bus protocol types, not Python syntax.
"""

from __future__ import annotations

import asyncio
import json
import logging

from dbus_next.aio import MessageBus
from dbus_next.service import ServiceInterface, method, signal
from dbus_next import BusType

from reclaim.core.engine import ReclaimEngine
from reclaim.core.orchestrator import ScanCancelled, ScanInProgressError
from reclaim.models.clean_result import cleanup_to_dict
from reclaim.models.scan_result import ScanProgress, summary_to_dict
from reclaim.models.tier import Tier

log = logging.getLogger(__name__)

_BUS_NAME = "io.github.reclaim"
_OBJECT_PATH = "/io/github/reclaim"
_INTERFACE = "io.github.reclaim.Engine"


# noinspection PyPep8Naming
class ReclaimDBusService(ServiceInterface):
    """D-Bus service interface for Reclaim.

    Scans run on a worker thread so the event loop keeps serving
    ``CancelScan`` while a scan is in flight.
    """

    def __init__(self, engine: ReclaimEngine | None = None) -> None:
        super().__init__(_INTERFACE)
        self._engine = engine or ReclaimEngine()

    @method()
    async def Scan(self, tier: "s", plan: "s") -> "s":  # type: ignore[override]
        """Run a scan, emitting ScanProgress signals, and return the summary as JSON."""
        try:
            tier_value = Tier(tier)
        except ValueError:
            return json.dumps({"error": f"Unknown tier '{tier}'"})

        loop = asyncio.get_running_loop()

        def progress(p: ScanProgress) -> None:
            loop.call_soon_threadsafe(self.ScanProgress, p.percentage, p.phase, p.items_scanned)

        try:
            summary = await loop.run_in_executor(
                None, lambda: self._engine.scan(tier=tier_value, plan=plan or "free", on_progress=progress)
            )
        except ScanCancelled:
            return json.dumps({"cancelled": True})
        except ScanInProgressError as exc:
            return json.dumps({"error": str(exc)})
        return json.dumps(summary_to_dict(summary))

    @method()
    def CancelScan(self):  # type: ignore[override]
        """Request cancellation of the running scan."""
        self._engine.cancel_scan()

    @method()
    def CleanItems(self, paths: "as", dry_run: "b") -> "s":  # type: ignore[override]
        """Clean items from the last full scan, identified by path."""
        items, unknown = self._engine.items_for_paths(list(paths))
        result = self._engine.clean(items, dry_run=dry_run)
        for error in result.errors:
            self.CleanError(str(error.item.path), error.reason)
        data = cleanup_to_dict(result)
        data["unknown"] = unknown
        return json.dumps(data)

    @method()
    def GetSystemInfo(self) -> "s":  # type: ignore[override]
        """Get platform, CPU and memory facts as JSON."""
        return json.dumps(self._engine.system_info())

    @signal()
    def ScanProgress(self, percentage: int, phase: str, items: int) -> "(usu)":  # type: ignore[override]
        return [percentage, phase, items]

    @signal()
    def CleanError(self, path: str, reason: str) -> "(ss)":  # type: ignore[override]
        return [path, reason]


async def run_service() -> None:
    """Start the D-Bus service."""
    bus = await MessageBus(bus_type=BusType.SESSION).connect()
    service = ReclaimDBusService()
    bus.export(_OBJECT_PATH, service)
    await bus.request_name(_BUS_NAME)
    log.info("D-Bus service started on %s", _BUS_NAME)
    await bus.wait_for_disconnect()


def start_service() -> None:
    """Entry point to start the D-Bus service."""
    asyncio.run(run_service())
