"""Tests for tier configuration and phase weights."""

from __future__ import annotations

import pytest

from reclaim.models.scan_result import Category
from reclaim.models.tier import Tier, TierConfig, normalize_weights, tier_config
from reclaim.settings import Settings


class TestNormalizeWeights:
    def test_already_normalized(self):
        assert normalize_weights([35, 15, 20, 10, 20]) == [35, 15, 20, 10, 20]

    @pytest.mark.parametrize(
        "weights",
        [[20, 15, 15, 20, 10, 20], [1, 1, 1], [3, 3, 3, 3, 3, 3, 3], [0, 5], [7], [0, 0, 0]],
    )
    def test_always_sums_to_100(self, weights):
        result = normalize_weights(weights)
        assert sum(result) == 100
        assert len(result) == len(weights)
        assert all(w >= 0 for w in result)

    def test_proportional(self):
        assert normalize_weights([1, 1, 2]) == [25, 25, 50]

    def test_zero_weights_spread_evenly(self):
        assert normalize_weights([0, 0, 0, 0]) == [25, 25, 25, 25]

    def test_empty(self):
        assert normalize_weights([]) == []


class TestTierConfig:
    def test_skipped_phases_do_not_lose_weight(self):
        config = TierConfig(
            tier=Tier.FULL,
            item_cap=10,
            expose_items=True,
            categories=(Category.CACHE, Category.TRASH),
        )
        weights = config.weights()
        assert len(weights) == 3
        assert sum(weights) == 100

    def test_rejects_wrong_weight_count(self):
        with pytest.raises(ValueError):
            TierConfig(tier=Tier.FULL, item_cap=1, expose_items=True, phase_weights=(50, 50))

    def test_rejects_negative_weights(self):
        with pytest.raises(ValueError):
            TierConfig(tier=Tier.FULL, item_cap=1, expose_items=True, phase_weights=(-1, 30, 30, 21, 20))

    def test_rejects_out_of_order_categories(self):
        with pytest.raises(ValueError):
            TierConfig(tier=Tier.FULL, item_cap=1, expose_items=True, categories=(Category.TRASH, Category.CACHE))


class TestBuiltinTiers:
    def test_restricted(self):
        config = tier_config("restricted")
        assert config.tier is Tier.RESTRICTED
        assert config.expose_items is False
        assert config.estimate_sizes is True

    def test_full_caps_depend_on_plan(self):
        assert tier_config(Tier.FULL).item_cap == 100
        assert tier_config(Tier.FULL, plan="pro").item_cap == 1000
        assert tier_config(Tier.FULL, plan="unknown").item_cap == 100
        assert tier_config(Tier.FULL).expose_items is True

    def test_unknown_tier(self):
        with pytest.raises(ValueError):
            tier_config("admin")

    def test_settings_overrides(self):
        settings = Settings.in_memory(
            {"tiers": {"full": {"item_cap": 7, "phase_weights": [10, 10, 10, 10, 60]}}}
        )
        config = tier_config(Tier.FULL, settings=settings)
        assert config.item_cap == 7
        assert config.phase_weights == (10, 10, 10, 10, 60)
