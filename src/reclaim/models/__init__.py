"""Reclaim data models."""

from reclaim.models.clean_result import CleanupError, CleanupResult
from reclaim.models.scan_result import Category, ScanCategory, ScanItem, ScanProgress, ScanSummary
from reclaim.models.source import CategorySource
from reclaim.models.tier import Tier, TierConfig, tier_config

__all__ = [
    "Category",
    "CategorySource",
    "CleanupError",
    "CleanupResult",
    "ScanCategory",
    "ScanItem",
    "ScanProgress",
    "ScanSummary",
    "Tier",
    "TierConfig",
    "tier_config",
]
