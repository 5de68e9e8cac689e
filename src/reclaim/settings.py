"""JSON-backed configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from reclaim.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "reclaim"
_SETTINGS_FILE = "settings.json"

_SIZING_METHODS = ("auto", "walk", "find", "du")

# Top-level sections the engine reads; anything else is kept but reported.
_KNOWN_SECTIONS = frozenset({"tiers", "downloads", "sizing"})


class Settings:
    """Engine configuration backed by a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("tiers.full.item_cap")  # reads data["tiers"]["full"]["item_cap"]
        settings.set("sizing.method", "walk")  # writes + saves

    Recognized keys:
        tiers.<restricted|full>.item_cap       int
        tiers.<restricted|full>.phase_weights  list of 5 ints
        downloads.extensions                   list of suffixes, e.g. [".iso"]
        sizing.method                          auto | walk | find | du
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None, *, persist: bool = True) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._persist = persist
        self._data: dict[str, Any] = {}
        if persist:
            self._load()

    @classmethod
    def instance(cls) -> Settings:
        """Return the singleton settings instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def in_memory(cls, data: dict[str, Any] | None = None) -> Settings:
        """Build settings that never touch the disk."""
        settings = cls(persist=False)
        settings._data = dict(data or {})
        return settings

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key and persist to disk."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    def sizing_method(self) -> str:
        """Configured size aggregator, ``auto`` when unset or invalid."""
        method = self.get("sizing.method", "auto")
        if method not in _SIZING_METHODS:
            log.warning("Unknown sizing.method %r in %s, using auto", method, self._path)
            return "auto"
        return method

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return

        if not isinstance(data, dict):
            log.warning("Ignoring settings in %s: top level is not an object", self._path)
            return
        for section in data.keys() - _KNOWN_SECTIONS:
            log.info("Unrecognized settings section '%s' in %s", section, self._path)
        self._data = data

    def _save(self) -> None:
        """Persist settings to disk."""
        if not self._persist:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)
