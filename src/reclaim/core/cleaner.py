"""Safe, per-item deletion of scan results."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Callable, Iterable

from reclaim.core.safety import is_safe
from reclaim.models.clean_result import PROTECTED_PATH, CleanupResult
from reclaim.models.scan_result import ScanItem

log = logging.getLogger(__name__)

ItemCallback = Callable[[ScanItem, bool], None]  # (item, cleaned)


def delete_path(path: Path) -> None:
    """Remove a file, symlink or directory tree.

    Symlinks are unlinked, never followed. Raises ``OSError`` on failure,
    including when the path no longer exists.
    """
    st = os.lstat(path)
    if stat.S_ISDIR(st.st_mode):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def clean(
    items: Iterable[ScanItem],
    dry_run: bool = False,
    on_item: ItemCallback | None = None,
) -> CleanupResult:
    """Delete (or, with *dry_run*, pretend to delete) each item in order.

    An item is refused as ``"protected path"`` when its stored
    ``can_delete`` is false or when the safety check disagrees with it
    now. Dry runs go through the same checks, so their result forecasts
    a real run. A failing item never stops the batch.

    Args:
        items: Items to remove, typically a subset of a scan summary.
        dry_run: Report without touching the filesystem.
        on_item: Optional callback fired after each item is settled.

    Returns:
        CleanupResult partitioning every input item into cleaned or failed.
    """
    result = CleanupResult(dry_run=dry_run)

    for item in items:
        cleaned = _clean_item(item, dry_run, result)
        if on_item:
            on_item(item, cleaned)

    log.info(
        "Cleanup %scompleted: %d cleaned, %d failed, %d bytes freed",
        "(dry run) " if dry_run else "",
        len(result.cleaned),
        len(result.failed),
        result.total_size_freed,
    )
    return result


def _clean_item(item: ScanItem, dry_run: bool, result: CleanupResult) -> bool:
    if not item.can_delete:
        log.warning("Skipping protected item: %s", item.path)
        result.add_failed(item, PROTECTED_PATH)
        return False

    if not is_safe(item.path):
        log.error("Refusing to delete protected path: %s", item.path)
        result.add_failed(item, PROTECTED_PATH)
        return False

    if dry_run:
        log.debug("Dry run: would delete %s", item.path)
        result.add_cleaned(item)
        return True

    try:
        delete_path(item.path)
    except OSError as e:
        log.warning("Failed to delete %s: %s", item.path, e)
        result.add_failed(item, str(e))
        return False

    log.info("Deleted %s (%d bytes)", item.path, item.size)
    result.add_cleaned(item)
    return True
