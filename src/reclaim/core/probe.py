"""Static machine facts for summaries and the system-info endpoint."""

from __future__ import annotations

import logging
import os
import platform
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import psutil

log = logging.getLogger(__name__)

_CPUINFO = Path("/proc/cpuinfo")


@dataclass(frozen=True, slots=True)
class DiskUsage:
    """Capacity of the filesystem holding a path, in bytes."""

    total: int = 0
    free: int = 0


def disk_usage(path: str | os.PathLike[str] = "/") -> DiskUsage:
    """Capacity facts for *path*; zeros when the filesystem can't be queried."""
    try:
        usage = psutil.disk_usage(os.fspath(path))
    except OSError as e:
        log.debug("Cannot query disk usage for %s: %s", path, e)
        return DiskUsage()
    return DiskUsage(total=usage.total, free=usage.free)


def _cpu_model() -> str:
    """Best-effort CPU model name."""
    try:
        for line in _CPUINFO.read_text().splitlines():
            if line.startswith("model name"):
                return line.split(":", 1)[1].strip()
    except OSError:
        pass
    return platform.processor() or "Unknown"


def system_info() -> dict[str, Any]:
    """Platform, CPU, memory totals and home/tmp paths.

    Side-effect free; memory figures are a point-in-time snapshot.
    """
    memory = psutil.virtual_memory()
    return {
        "platform": platform.system().lower(),
        "release": platform.release(),
        "arch": platform.machine(),
        "cpu_model": _cpu_model(),
        "cpu_cores": psutil.cpu_count(logical=True) or 1,
        "total_memory": memory.total,
        "free_memory": memory.available,
        "memory_usage": round(memory.percent, 1),
        "home_directory": str(Path.home()),
        "tmp_directory": tempfile.gettempdir(),
    }

