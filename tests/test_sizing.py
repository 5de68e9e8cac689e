"""Tests for the size aggregators."""

from __future__ import annotations

import os
import subprocess

import pytest

from reclaim.core.sizing import (
    DuSizeAggregator,
    FindSizeAggregator,
    WalkSizeAggregator,
    get_aggregator,
)
from conftest import write_file


@pytest.fixture
def tree(tmp_path):
    root = tmp_path / "tree"
    write_file(root / "a.bin", 1000)
    write_file(root / "sub" / "b.bin", 2000)
    write_file(root / "sub" / "deeper" / "c.bin", 3000)
    return root


class TestWalkSizeAggregator:
    def test_regular_file(self, tree):
        assert WalkSizeAggregator().size_of(tree / "a.bin") == 1000

    def test_directory_is_recursive_sum(self, tree):
        assert WalkSizeAggregator().size_of(tree) == 6000

    def test_empty_directory(self, tmp_path):
        (tmp_path / "empty").mkdir()
        assert WalkSizeAggregator().size_of(tmp_path / "empty") == 0

    def test_missing_path_is_zero(self, tmp_path):
        assert WalkSizeAggregator().size_of(tmp_path / "nope") == 0

    def test_symlinks_not_followed(self, tree, tmp_path):
        outside = tmp_path / "outside"
        write_file(outside / "big.bin", 50_000)
        os.symlink(outside, tree / "link_dir")
        os.symlink(outside / "big.bin", tree / "link_file")
        assert WalkSizeAggregator().size_of(tree) == 6000

    def test_symlink_cycle(self, tree):
        os.symlink(tree, tree / "sub" / "loop")
        assert WalkSizeAggregator().size_of(tree) == 6000

    def test_top_level_symlink_is_zero(self, tree, tmp_path):
        os.symlink(tree, tmp_path / "alias")
        assert WalkSizeAggregator().size_of(tmp_path / "alias") == 0

    def test_hard_links_counted_once(self, tree):
        os.link(tree / "a.bin", tree / "sub" / "a_again.bin")
        assert WalkSizeAggregator().size_of(tree) == 6000

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_unreadable_subdirectory(self, tree):
        locked = tree / "sub" / "deeper"
        locked.chmod(0)
        try:
            assert WalkSizeAggregator().size_of(tree) == 3000
        finally:
            locked.chmod(0o755)


class TestNativeAggregators:
    def test_find_falls_back_to_walk(self, tree, monkeypatch):
        def broken(*args, **kwargs):
            raise FileNotFoundError("find")

        monkeypatch.setattr(subprocess, "run", broken)
        assert FindSizeAggregator().size_of(tree) == 6000

    def test_find_parses_output(self, tree, monkeypatch):
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda *a, **kw: subprocess.CompletedProcess(args=a, returncode=0, stdout=b"10\n20\n", stderr=b""),
        )
        assert FindSizeAggregator().size_of(tree) == 30

    def test_du_reports_kilobytes(self, tree, monkeypatch):
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda *a, **kw: subprocess.CompletedProcess(args=a, returncode=0, stdout=f"8\t{tree}\n", stderr=""),
        )
        assert DuSizeAggregator().size_of(tree) == 8 * 1024

    def test_du_empty_output_falls_back(self, tree, monkeypatch):
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda *a, **kw: subprocess.CompletedProcess(args=a, returncode=1, stdout="", stderr="denied"),
        )
        assert DuSizeAggregator().size_of(tree) == 6000

    def test_files_skip_native_tools(self, tree, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("should not shell out for a file")

        monkeypatch.setattr(subprocess, "run", fail)
        assert DuSizeAggregator().size_of(tree / "a.bin") == 1000


class TestGetAggregator:
    def test_explicit_methods(self):
        assert isinstance(get_aggregator("walk"), WalkSizeAggregator)
        assert isinstance(get_aggregator("find"), FindSizeAggregator)
        assert isinstance(get_aggregator("du"), DuSizeAggregator)

    def test_auto_estimate_prefers_du(self, monkeypatch):
        monkeypatch.setattr("reclaim.core.sizing.has_command", lambda name: True)
        assert isinstance(get_aggregator("auto", estimate=True), DuSizeAggregator)

    def test_auto_without_tools_walks(self, monkeypatch):
        monkeypatch.setattr("reclaim.core.sizing.has_command", lambda name: False)
        assert isinstance(get_aggregator("auto"), WalkSizeAggregator)

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            get_aggregator("magic")
