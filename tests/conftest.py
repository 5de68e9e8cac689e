"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from reclaim.core.registry import SourceRegistry
from reclaim.core.sizing import WalkSizeAggregator
from reclaim.models.scan_result import Category
from reclaim.models.source import CategorySource
from reclaim.settings import Settings


class DirSource(CategorySource):
    """Test source that lists arbitrary directories."""

    def __init__(self, category: Category, *roots: Path) -> None:
        self._category = category
        self._roots = roots

    @property
    def id(self) -> str:
        return f"test_{self._category.value}"

    @property
    def name(self) -> str:
        return f"Test {self._category.value}"

    @property
    def description(self) -> str:
        return "Directories under tmp_path"

    @property
    def category(self) -> Category:
        return self._category

    def source_paths(self) -> tuple[Path, ...]:
        return self._roots


def write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Point the settings singleton at an empty temp config directory."""
    config = tmp_path / "config"
    config.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config))
    monkeypatch.setattr(Settings, "_instance", None)
    return config


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Redirect HOME and the XDG data/cache dirs into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    return home


@pytest.fixture
def sources(tmp_path):
    """One empty root directory per category."""
    roots = {}
    for category in Category:
        root = tmp_path / "sources" / category.value
        root.mkdir(parents=True)
        roots[category] = root
    return roots


@pytest.fixture
def registry(sources):
    return SourceRegistry({c: DirSource(c, root) for c, root in sources.items()})


@pytest.fixture
def aggregator():
    return WalkSizeAggregator()
