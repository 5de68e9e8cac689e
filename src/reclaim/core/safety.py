"""Deletion eligibility of filesystem paths.

Pure string inspection: nothing here touches the disk, so the verdict at
scan time and the re-check right before deletion always agree for the
same path.
"""

from __future__ import annotations

import os
from typing import Callable

from reclaim.utils import is_macos

# Path prefixes that are never deletable, nor is anything beneath them.
PROTECTED_ROOTS: tuple[str, ...] = (
    # Linux
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/lib",
    "/lib32",
    "/lib64",
    "/media",
    "/mnt",
    "/opt",
    "/proc",
    "/root",
    "/run",
    "/sbin",
    "/snap",
    "/srv",
    "/sys",
    "/usr",
    "/var/db",
    "/var/lib",
    "/var/spool",
    # macOS
    "/Applications",
    "/Library",
    "/System",
    "/Volumes",
    "/cores",
    "/private/etc",
    "/private/var",
    "/var/folders",
    "/var/root",
)

# Fragments that mark identity bundles or vendor-reserved data anywhere in a path.
PROTECTED_FRAGMENTS: tuple[str, ...] = (
    "com.apple.",
    "MobileBackups",
    ".DS_Store",
    "Keychains",
    ".ssh",
    ".gnupg",
    "keyrings",
)

# Directories whose contents may go but which themselves must stay.
_PROTECTED_EXACT = frozenset({"/", "/home", "/Users", "/tmp", "/var", "/var/log", "/private"})


def is_safe(path: str | os.PathLike[str]) -> bool:
    """Return True if *path* may be deleted.

    Conservative: relative paths, paths containing ``..`` segments and
    anything that cannot be read as text are refused. On macOS, whose
    default filesystem ignores case, comparisons ignore case too.
    """
    try:
        raw = os.fspath(path)
    except TypeError:
        return False
    if not isinstance(raw, str) or not raw or "\x00" in raw:
        return False
    if not os.path.isabs(raw):
        return False

    parts = raw.split(os.sep)
    if ".." in parts:
        return False

    fold = str.casefold if is_macos() else str
    normalized = fold(os.path.normpath(raw))
    if normalized in {fold(p) for p in _PROTECTED_EXACT}:
        return False
    if _home_or_above(normalized, fold):
        return False

    for root in map(fold, PROTECTED_ROOTS):
        if normalized == root or normalized.startswith(root + os.sep):
            return False

    return not any(fold(fragment) in normalized for fragment in PROTECTED_FRAGMENTS)


def _home_or_above(normalized: str, fold: Callable[[str], str]) -> bool:
    """True for the user's home directory itself or any of its ancestors."""
    home = fold(os.path.normpath(os.path.expanduser("~")))
    return home == normalized or home.startswith(normalized.rstrip(os.sep) + os.sep)
