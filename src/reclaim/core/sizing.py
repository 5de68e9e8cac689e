"""Byte size of files and directory trees.

All aggregators share one contract: ``size_of(path)`` never raises and
degrades to ``0`` on a missing path, a permission error or anything else
that goes wrong, so one unreadable entry cannot abort a scan phase.
Symlinks are never followed.
"""

from __future__ import annotations

import logging
import os
import stat
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from reclaim.utils import has_command

log = logging.getLogger(__name__)

# Timeout for native size utilities (seconds).
_COMMAND_TIMEOUT = 60


class SizeAggregator(ABC):
    """Computes the total byte size of a file or directory subtree."""

    name: str = "abstract"

    def size_of(self, path: Path | str) -> int:
        """Return the size of *path* in bytes, or 0 if it cannot be measured."""
        try:
            st = os.lstat(path)
        except OSError as e:
            log.debug("Cannot stat %s: %s", path, e)
            return 0

        if stat.S_ISREG(st.st_mode):
            return st.st_size
        if not stat.S_ISDIR(st.st_mode):
            # symlinks, sockets, devices
            return 0

        try:
            return max(0, self._dir_size(os.fspath(path)))
        except Exception as e:
            log.debug("%s sizing failed for %s: %s", self.name, path, e)
            return 0

    @abstractmethod
    def _dir_size(self, path: str) -> int:
        """Size of a directory tree. May raise; the caller degrades to 0."""


class WalkSizeAggregator(SizeAggregator):
    """Pure in-process walk using ``os.scandir``.

    Each directory and each multiply-linked file is counted once, keyed by
    ``(st_dev, st_ino)``, so bind mounts and hard links don't double count.
    """

    name = "walk"

    def _dir_size(self, path: str) -> int:
        total = 0
        seen_dirs: set[tuple[int, int]] = set()
        seen_links: set[tuple[int, int]] = set()
        stack: list[str] = [path]
        while stack:
            current = stack.pop()
            try:
                st = os.stat(current, follow_symlinks=False)
            except OSError:
                continue
            key = (st.st_dev, st.st_ino)
            if key in seen_dirs:
                continue
            seen_dirs.add(key)

            try:
                with os.scandir(current) as it:
                    for entry in it:
                        try:
                            if entry.is_file(follow_symlinks=False):
                                est = entry.stat(follow_symlinks=False)
                                if est.st_nlink > 1:
                                    link_key = (est.st_dev, est.st_ino)
                                    if link_key in seen_links:
                                        continue
                                    seen_links.add(link_key)
                                total += est.st_size
                            elif entry.is_dir(follow_symlinks=False):
                                stack.append(entry.path)
                        except OSError:
                            continue
            except OSError as e:
                log.debug("Cannot read %s: %s", current, e)
        return total


class FindSizeAggregator(SizeAggregator):
    """Exact sizes via GNU ``find`` (C-speed walk), falling back to a walk."""

    name = "find"

    def __init__(self, fallback: SizeAggregator | None = None) -> None:
        self._fallback = fallback or WalkSizeAggregator()

    def _dir_size(self, path: str) -> int:
        try:
            proc = subprocess.run(
                ["find", path, "-type", "f", "-printf", "%s\n"],
                capture_output=True,
                timeout=_COMMAND_TIMEOUT,
            )
            # find exits 1 on partial permission errors but still prints what it saw
            if proc.returncode not in (0, 1):
                raise OSError(f"find exited with {proc.returncode}")
            return sum(int(line) for line in proc.stdout.split(b"\n") if line)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            log.debug("find failed for %s (%s), walking instead", path, e)
            return self._fallback._dir_size(path)


class DuSizeAggregator(SizeAggregator):
    """Disk-usage estimate via ``du -sk``, falling back to a walk.

    Reports allocated blocks rather than apparent size, which is good
    enough for the aggregate-only restricted scan.
    """

    name = "du"

    def __init__(self, fallback: SizeAggregator | None = None) -> None:
        self._fallback = fallback or WalkSizeAggregator()

    def _dir_size(self, path: str) -> int:
        try:
            proc = subprocess.run(
                ["du", "-sk", path],
                capture_output=True,
                text=True,
                timeout=_COMMAND_TIMEOUT,
            )
            first = proc.stdout.split("\t", 1)[0].strip()
            if not first:
                raise OSError(f"du produced no output (exit {proc.returncode})")
            return int(first) * 1024
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            log.debug("du failed for %s (%s), walking instead", path, e)
            return self._fallback._dir_size(path)


def get_aggregator(method: str = "auto", *, estimate: bool = False) -> SizeAggregator:
    """Pick a size aggregator.

    Args:
        method: ``walk``, ``find``, ``du`` or ``auto``.
        estimate: With ``auto``, prefer the ``du`` estimate over exact sizes.
    """
    match method:
        case "walk":
            return WalkSizeAggregator()
        case "find":
            return FindSizeAggregator()
        case "du":
            return DuSizeAggregator()
        case "auto":
            if estimate and has_command("du"):
                return DuSizeAggregator()
            # BSD find has no -printf
            if sys.platform.startswith("linux") and has_command("find"):
                return FindSizeAggregator()
            return WalkSizeAggregator()
        case _:
            raise ValueError(f"Unknown sizing method: {method!r}")
