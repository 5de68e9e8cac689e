"""Single-category scanning."""

from __future__ import annotations

import logging
import stat

from reclaim.core.safety import is_safe
from reclaim.core.sizing import SizeAggregator
from reclaim.models.scan_result import ScanCategory, ScanItem, mtime_to_datetime
from reclaim.models.source import CategorySource

log = logging.getLogger(__name__)


def scan_category(
    source: CategorySource,
    aggregator: SizeAggregator,
    *,
    item_cap: int,
    expose_items: bool,
    skip_empty_dirs: bool = True,
) -> ScanCategory:
    """Scan every root of *source* one level deep.

    Each top-level entry is sized as a unit. Once *item_cap* items have
    been kept for a root, further entries of that root still add to the
    category's size and count but are not listed, so ``item_count`` can
    exceed ``len(items)``. With *expose_items* off no items are listed at
    all. Missing or unreadable roots contribute nothing, and roots that
    resolve to an already scanned directory are skipped.

    Args:
        source: Where to look and which entries to accept.
        aggregator: Size strategy for directories.
        item_cap: Max items kept per root.
        expose_items: Whether to list individual items.
        skip_empty_dirs: Leave out directories holding zero bytes.

    Returns:
        ScanCategory with items sorted largest first.
    """
    items: list[ScanItem] = []
    total = 0
    count = 0

    seen_roots: set[tuple[int, int]] = set()

    for root in source.source_paths():
        try:
            root_st = root.stat()
            if (root_st.st_dev, root_st.st_ino) in seen_roots:
                log.debug("Skipping %s: same directory as an earlier %s root", root, source.id)
                continue
            seen_roots.add((root_st.st_dev, root_st.st_ino))
            entries = sorted(root.iterdir())
        except (FileNotFoundError, NotADirectoryError):
            log.debug("Skipping missing source %s for %s", root, source.id)
            continue
        except OSError as e:
            log.debug("Cannot read %s source %s: %s", source.id, root, e)
            continue

        kept = 0
        for entry in entries:
            try:
                if not source.accepts(entry):
                    continue
                st = entry.lstat()
            except OSError:
                log.debug("Cannot access: %s", entry)
                continue

            is_dir = stat.S_ISDIR(st.st_mode)
            size = aggregator.size_of(entry)
            if is_dir and size == 0 and skip_empty_dirs:
                continue

            total += size
            count += 1
            if not expose_items or kept >= item_cap:
                continue

            items.append(
                ScanItem(
                    path=entry,
                    size=size,
                    category=source.category,
                    can_delete=is_safe(entry),
                    last_modified=mtime_to_datetime(st.st_mtime) if stat.S_ISREG(st.st_mode) else None,
                )
            )
            kept += 1

    items.sort(key=lambda i: i.size, reverse=True)
    log.debug(
        "%s: %d entries, %d bytes, %d listed",
        source.id, count, total, len(items),
    )

    return ScanCategory(
        id=source.id,
        name=source.name,
        description=source.description,
        category=source.category,
        size=total,
        item_count=count,
        items=tuple(items),
    )
