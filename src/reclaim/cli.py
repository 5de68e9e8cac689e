"""CLI interface for Reclaim."""

from __future__ import annotations

import json
import logging
import sys

import click

from reclaim.core.engine import ReclaimEngine
from reclaim.core.orchestrator import ScanCancelled
from reclaim.models.clean_result import CleanupResult, cleanup_to_dict
from reclaim.models.scan_result import Category, ScanItem, ScanProgress, ScanSummary, summary_to_dict
from reclaim.models.tier import Tier
from reclaim.utils import bytes_to_human, format_elapsed

_CATEGORY_CHOICES = [c.value for c in Category]


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _build_engine() -> ReclaimEngine:
    return ReclaimEngine()


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Reclaim — find and safely remove caches, logs, stale downloads and trash."""
    _setup_logging(verbose)


# ── list ─────────────────────────────────────────────────────────────────

@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(as_json: bool) -> None:
    """List scan categories and where they look."""
    engine = _build_engine()
    sources = sorted(engine.registry, key=lambda s: s.sort_order)

    if as_json:
        data = [
            {
                "id": s.id,
                "name": s.name,
                "description": s.description,
                "category": s.category.value,
                "paths": [str(p) for p in s.source_paths()],
                "available": s.is_available(),
            }
            for s in sources
        ]
        click.echo(json.dumps(data, indent=2))
        return

    for source in sources:
        status = "" if source.is_available() else click.style(" [not found]", fg="bright_black")
        click.echo(f"  {click.style(source.category.value, fg='cyan', bold=True):20s}  {source.name}{status}")
        click.echo(f"    {source.description}")
        for path in source.source_paths():
            click.echo(f"    {click.style(str(path), fg='bright_black')}")


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.option("--tier", "-t", type=click.Choice([t.value for t in Tier]), default=Tier.FULL.value,
              show_default=True, help="Restricted scans report totals only")
@click.option("--plan", type=click.Choice(["free", "pro"]), default="free", help="Plan for full-tier item caps")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(tier: str, plan: str, as_json: bool) -> None:
    """Scan for reclaimable space (preview only, never deletes)."""
    engine = _build_engine()

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Scanning ({tier})...\n")

    summary = _run_scan(engine, tier, plan, as_json)

    if as_json:
        click.echo(json.dumps(summary_to_dict(summary), indent=2))
        return

    _print_summary(summary, show_items=Tier(tier) is Tier.FULL)


def _run_scan(engine: ReclaimEngine, tier: str, plan: str, quiet: bool) -> ScanSummary:
    def on_progress(progress: ScanProgress) -> None:
        if quiet:
            return
        click.echo(
            f"  {progress.percentage:3d}%  {progress.phase:28s} "
            f"{click.style(f'{progress.items_scanned:,} items', fg='bright_black')}"
        )

    try:
        return engine.scan(tier=tier, plan=plan, on_progress=on_progress)
    except ScanCancelled as exc:
        click.echo(f"{exc}.", err=True)
        sys.exit(130)


def _print_summary(summary: ScanSummary, show_items: bool) -> None:
    click.echo()
    for cat in summary.categories:
        if cat.size > 0:
            click.echo(
                f"  {click.style('✓', fg='green')} {cat.name:25s} — "
                f"{click.style(bytes_to_human(cat.size), fg='green', bold=True)} ({cat.item_count:,} items)"
            )
        else:
            click.echo(f"  {click.style('·', fg='bright_black')} {cat.name:25s} — nothing to clean")
        if show_items:
            shown = cat.items[:5]
            for item in shown:
                lock = "" if item.can_delete else click.style(" [protected]", fg="yellow")
                click.echo(f"      {bytes_to_human(item.size):>10s}  {item.path}{lock}")
            if cat.item_count > len(shown):
                click.echo(click.style(f"      … {cat.item_count - len(shown):,} more", fg="bright_black"))

    click.echo(f"\nTotal reclaimable: {click.style(bytes_to_human(summary.total_space), fg='green', bold=True)}")
    if summary.total_disk_space:
        click.echo(
            f"Disk: {bytes_to_human(summary.free_space)} free of {bytes_to_human(summary.total_disk_space)}"
        )
    click.echo(f"Scanned in {format_elapsed(summary.scan_time_ms / 1000)}\n")


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("categories", nargs=-1, type=click.Choice(_CATEGORY_CHOICES))
@click.option("--plan", type=click.Choice(["free", "pro"]), default="free", help="Plan for full-tier item caps")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--dry-run", is_flag=True, help="Show what would be cleaned without doing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def clean(categories: tuple[str, ...], plan: str, yes: bool, dry_run: bool, as_json: bool) -> None:
    """Scan, then clean deletable items in the selected categories (all by default)."""
    engine = _build_engine()
    selected = {Category(c) for c in categories} if categories else set(Category)

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Scanning...\n")

    summary = _run_scan(engine, Tier.FULL.value, plan, quiet=True)
    items: list[ScanItem] = [
        item for cat in summary.categories if cat.category in selected for item in cat.items if item.can_delete
    ]

    if not items:
        if as_json:
            click.echo(json.dumps({"status": "nothing_to_clean", "result": None}))
        else:
            click.echo("Nothing to clean.")
        return

    if not as_json:
        total = sum(i.size for i in items)
        click.echo(f"  {len(items):,} items, {click.style(bytes_to_human(total), fg='green', bold=True)}\n")

    if not yes and not dry_run and not as_json:
        if not click.confirm("Delete these items?", default=False):
            click.echo("Aborted.")
            return

    if not as_json:
        verb = "Checking" if dry_run else "Cleaning"
        click.echo(f"\n{click.style('🧹', bold=True)} {verb}...\n")

    result = engine.clean(items, dry_run=dry_run)

    if as_json:
        status = "dry_run" if dry_run else "cleaned"
        click.echo(json.dumps({"status": status, "result": cleanup_to_dict(result)}, indent=2))
        return

    _print_cleanup(result, total=len(items))


def _print_cleanup(result: CleanupResult, total: int) -> None:
    for error in result.errors:
        click.echo(f"  {click.style('!', fg='yellow')} {error.item.path} — {error.reason}")

    verb = "Would free" if result.dry_run else "Freed"
    click.echo(
        f"\n{len(result.cleaned)} of {total} cleaned. "
        f"{verb} {click.style(bytes_to_human(result.total_size_freed), fg='green', bold=True)}"
    )
    if result.dry_run:
        click.echo("(dry run — no files were deleted)")
    click.echo()


# ── info ─────────────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def info(as_json: bool) -> None:
    """Show platform, CPU and memory facts."""
    data = _build_engine().system_info()

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"\n  {click.style('Platform:', bold=True)}  {data['platform']} {data['release']} ({data['arch']})")
    click.echo(f"  {click.style('CPU:', bold=True)}       {data['cpu_model']} × {data['cpu_cores']}")
    click.echo(
        f"  {click.style('Memory:', bold=True)}    {bytes_to_human(data['free_memory'])} free of "
        f"{bytes_to_human(data['total_memory'])} ({data['memory_usage']}% used)"
    )
    click.echo(f"  {click.style('Home:', bold=True)}      {data['home_directory']}")
    click.echo(f"  {click.style('Temp:', bold=True)}      {data['tmp_directory']}\n")


# ── service ──────────────────────────────────────────────────────────────

@main.group()
def service() -> None:
    """D-Bus service management."""


@service.command("start")
def service_start() -> None:
    """Start the D-Bus service in foreground."""
    from reclaim.dbus_service import start_service

    click.echo("Starting Reclaim D-Bus service...")
    start_service()
