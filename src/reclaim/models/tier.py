"""Per-tier scan configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from reclaim.models.scan_result import Category

if TYPE_CHECKING:
    from reclaim.settings import Settings


class Tier(Enum):
    """Trust tier of the caller."""

    RESTRICTED = "restricted"
    FULL = "full"


# Phase order: one phase per category, then finalization.
PHASE_ORDER: tuple[Category, ...] = (
    Category.CACHE,
    Category.LOGS,
    Category.DOWNLOADS,
    Category.TRASH,
)

DEFAULT_WEIGHTS: tuple[int, ...] = (35, 15, 20, 10, 20)

_FULL_ITEM_CAPS = {"free": 100, "pro": 1000}


@dataclass(frozen=True, slots=True)
class TierConfig:
    """Everything that differs between the restricted and full scans.

    Attributes:
        tier: Which tier this config describes.
        item_cap: Max items kept per source path (ignored when items are withheld).
        expose_items: Whether ScanCategory.items is populated.
        phase_weights: One weight per category phase, then finalization.
        estimate_sizes: Use the ``du`` estimate instead of exact per-file sizing.
        categories: Phases to run, in order.
    """

    tier: Tier
    item_cap: int
    expose_items: bool
    phase_weights: tuple[int, ...] = DEFAULT_WEIGHTS
    estimate_sizes: bool = False
    categories: tuple[Category, ...] = PHASE_ORDER

    def __post_init__(self) -> None:
        if len(self.phase_weights) != len(PHASE_ORDER) + 1:
            raise ValueError(
                f"phase_weights needs {len(PHASE_ORDER) + 1} values, got {len(self.phase_weights)}"
            )
        if any(w < 0 for w in self.phase_weights):
            raise ValueError("phase_weights must be non-negative")
        if self.item_cap < 0:
            raise ValueError("item_cap must be non-negative")
        if list(self.categories) != sorted(self.categories, key=PHASE_ORDER.index):
            raise ValueError("categories must follow the fixed phase order")

    def weights(self) -> list[int]:
        """Weights for the phases that actually run, normalized to sum to 100.

        The last value belongs to finalization.
        """
        raw = [self.phase_weights[PHASE_ORDER.index(c)] for c in self.categories]
        raw.append(self.phase_weights[-1])
        return normalize_weights(raw)


def normalize_weights(weights: list[int]) -> list[int]:
    """Rescale *weights* to integers summing to exactly 100.

    Uses largest-remainder rounding. All-zero input is spread evenly.
    """
    if not weights:
        return []
    total = sum(weights)
    if total == 0:
        weights = [1] * len(weights)
        total = len(weights)

    exact = [w * 100 / total for w in weights]
    result = [int(x) for x in exact]
    shortfall = 100 - sum(result)
    by_remainder = sorted(range(len(weights)), key=lambda i: exact[i] - result[i], reverse=True)
    for i in by_remainder[:shortfall]:
        result[i] += 1
    return result


def tier_config(tier: Tier | str, plan: str = "free", settings: Settings | None = None) -> TierConfig:
    """Build the config for *tier*, applying overrides from *settings*.

    Recognized settings keys are ``tiers.<tier>.item_cap`` and
    ``tiers.<tier>.phase_weights``.
    """
    tier = Tier(tier)
    match tier:
        case Tier.RESTRICTED:
            item_cap, expose, estimate = 0, False, True
        case Tier.FULL:
            item_cap, expose, estimate = _FULL_ITEM_CAPS.get(plan, _FULL_ITEM_CAPS["free"]), True, False

    weights = DEFAULT_WEIGHTS
    if settings is not None:
        item_cap = int(settings.get(f"tiers.{tier.value}.item_cap", item_cap))
        weights = tuple(int(w) for w in settings.get(f"tiers.{tier.value}.phase_weights", weights))

    return TierConfig(
        tier=tier,
        item_cap=item_cap,
        expose_items=expose,
        phase_weights=weights,
        estimate_sizes=estimate,
    )
