"""Tests for the per-trade calculator used by the entry form."""

import math

import pytest

from backend.services.calculator import (
    DerivedTradeMetrics,
    compute_realized_pnl,
    compute_risk_reward,
    derive_metrics,
)


# ---------------------------------------------------------------------------
# 1. Risk:reward
# ---------------------------------------------------------------------------

class TestRiskReward:
    def test_basic_ratio(self):
        assert compute_risk_reward(100, 90, 120) == 2.0

    def test_entry_equal_to_stop_is_absent(self):
        assert compute_risk_reward(100, 100, 120) is None

    def test_short_setup_uses_absolute_distances(self):
        # Short: stop above entry, target below
        assert compute_risk_reward(100, 105, 85) == 3.0

    def test_rounded_to_two_decimals(self):
        assert compute_risk_reward(100, 97, 110) == 3.33

    @pytest.mark.parametrize("entry,stop,target", [
        (None, 90, 120),
        (100, None, 120),
        (100, 90, None),
        (math.nan, 90, 120),
        (100, math.inf, 120),
    ])
    def test_missing_or_non_finite_inputs(self, entry, stop, target):
        assert compute_risk_reward(entry, stop, target) is None


# ---------------------------------------------------------------------------
# 2. Realized PnL
# ---------------------------------------------------------------------------

class TestRealizedPnl:
    def test_long(self):
        assert compute_realized_pnl(100, 110, 2, 1, "long") == 19

    def test_short(self):
        assert compute_realized_pnl(100, 110, 2, 1, "short") == -21

    def test_fees_default_to_zero(self):
        assert compute_realized_pnl(100, 90, 3, None, "short") == 30

    def test_rounded_to_two_decimals(self):
        assert compute_realized_pnl(1.1, 1.2345, 1000, 0.5, "long") == 134.0

    def test_zero_move_is_a_number_not_absent(self):
        assert compute_realized_pnl(100, 100, 1) == 0

    @pytest.mark.parametrize("entry,exit,qty", [
        (None, 110, 2),
        (100, None, 2),
        (100, 110, None),
        (100, math.nan, 2),
    ])
    def test_missing_required_inputs(self, entry, exit, qty):
        assert compute_realized_pnl(entry, exit, qty, 1, "long") is None


def test_derive_metrics_bundles_both_values():
    metrics = derive_metrics(
        entry_price=100, exit_price=110, quantity=2, fees=1,
        stop_loss=90, take_profit=120, direction="long",
    )
    assert metrics == DerivedTradeMetrics(risk_reward_ratio=2.0, realized_pnl=19)


def test_derive_metrics_with_empty_form():
    metrics = derive_metrics()
    assert metrics.risk_reward_ratio is None
    assert metrics.realized_pnl is None
