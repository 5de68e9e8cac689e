"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from reclaim import cli
from reclaim.core.engine import ReclaimEngine
from reclaim.core.orchestrator import ScanCancelled
from reclaim.models.scan_result import Category
from reclaim.settings import Settings
from conftest import write_file

runner = CliRunner()


@pytest.fixture
def engine(sources, registry, aggregator, monkeypatch):
    write_file(sources[Category.CACHE] / "app" / "blob.bin", 4000)
    write_file(sources[Category.LOGS] / "old.log.1", 500)
    write_file(sources[Category.TRASH] / "deleted.txt", 200)
    engine = ReclaimEngine(settings=Settings.in_memory(), registry=registry, aggregator=aggregator)
    monkeypatch.setattr(cli, "_build_engine", lambda: engine)
    return engine


class TestScanCommand:
    def test_json_output(self, engine):
        result = runner.invoke(cli.main, ["scan", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_space"] == 4700
        assert data["item_count"] == 3
        assert [c["category"] for c in data["categories"]] == ["cache", "logs", "downloads", "trash"]
        assert data["categories"][0]["items"][0]["size"] == 4000

    def test_restricted_json_has_no_items(self, engine):
        result = runner.invoke(cli.main, ["scan", "--tier", "restricted", "--json"])

        data = json.loads(result.output)
        assert data["total_space"] == 4700
        assert all(c["items"] == [] for c in data["categories"])

    def test_human_output(self, engine):
        result = runner.invoke(cli.main, ["scan"])

        assert result.exit_code == 0
        assert "100%" in result.output
        assert "Total reclaimable" in result.output
        assert "nothing to clean" in result.output

    def test_cancelled_scan_exits_130(self, engine, monkeypatch):
        def cancelled(**kwargs):
            raise ScanCancelled("Scan cancelled")

        monkeypatch.setattr(engine, "scan", cancelled)
        result = runner.invoke(cli.main, ["scan", "--json"])

        assert result.exit_code == 130


class TestCleanCommand:
    def test_dry_run_keeps_files(self, engine, sources):
        result = runner.invoke(cli.main, ["clean", "logs", "--dry-run", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "dry_run"
        assert data["result"]["total_size_freed"] == 500
        assert (sources[Category.LOGS] / "old.log.1").exists()

    def test_clean_selected_category(self, engine, sources):
        result = runner.invoke(cli.main, ["clean", "trash", "--yes"])

        assert result.exit_code == 0, result.output
        assert "1 of 1 cleaned" in result.output
        assert not (sources[Category.TRASH] / "deleted.txt").exists()
        assert (sources[Category.CACHE] / "app").exists()

    def test_confirmation_declined(self, engine, sources):
        result = runner.invoke(cli.main, ["clean"], input="n\n")

        assert "Aborted." in result.output
        assert (sources[Category.TRASH] / "deleted.txt").exists()

    def test_nothing_to_clean(self, engine):
        result = runner.invoke(cli.main, ["clean", "downloads", "--json"])

        assert json.loads(result.output) == {"status": "nothing_to_clean", "result": None}

    def test_unknown_category_rejected(self, engine):
        result = runner.invoke(cli.main, ["clean", "everything"])
        assert result.exit_code == 2


class TestListCommand:
    def test_json(self, engine, sources):
        result = runner.invoke(cli.main, ["list", "--json"])

        data = json.loads(result.output)
        assert [s["category"] for s in data] == ["cache", "logs", "downloads", "trash"]
        assert data[0]["paths"] == [str(sources[Category.CACHE])]
        assert all(s["available"] for s in data)


class TestInfoCommand:
    def test_json(self, engine):
        result = runner.invoke(cli.main, ["info", "--json"])

        assert result.exit_code == 0
        assert "cpu_model" in json.loads(result.output)
