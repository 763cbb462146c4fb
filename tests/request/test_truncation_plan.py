"""
Tests for the per-request truncated normal plans.
"""

import math

import numpy as np
import pytest

from ssm_rvs.request.truncation import (
    PLAN_A,
    PLAN_B,
    PLAN_MIRROR,
    PLAN_REGIME,
    PLAN_WIDTH,
    Regime,
    TruncationPlan,
    pack_plans,
)


class TestRegimes:
    def test_untruncated_is_normal(self):
        plan = TruncationPlan.from_bounds(0.0, 1.0)
        assert plan.regime is Regime.NORMAL
        assert not plan.mirror

    def test_wide_window_around_mean_is_normal(self):
        plan = TruncationPlan.from_bounds(0.0, 1.0, -2.0, 2.0)
        assert plan.regime is Regime.NORMAL

    def test_narrow_window_around_mean_is_uniform(self):
        plan = TruncationPlan.from_bounds(0.0, 1.0, -0.5, 0.5)
        assert plan.regime is Regime.UNIFORM

    def test_upper_tail_is_exponential(self):
        plan = TruncationPlan.from_bounds(0.0, 1.0, 3.0, np.inf)
        assert plan.regime is Regime.EXPONENTIAL
        assert plan.rate == pytest.approx((3.0 + math.sqrt(13.0)) / 2.0)

    def test_narrow_tail_window_is_uniform(self):
        plan = TruncationPlan.from_bounds(0.0, 1.0, 3.0, 3.1)
        assert plan.regime is Regime.UNIFORM

    def test_lower_tail_is_mirrored(self):
        plan = TruncationPlan.from_bounds(0.0, 1.0, -np.inf, -3.0)
        assert plan.mirror
        assert plan.a == pytest.approx(3.0)
        assert plan.b == np.inf
        assert plan.regime is Regime.EXPONENTIAL

    def test_standardization(self):
        plan = TruncationPlan.from_bounds(1.0, 2.0, 5.0, np.inf)
        assert plan.a == pytest.approx(2.0)

    def test_zero_sd_is_degenerate(self):
        plan = TruncationPlan.from_bounds(0.5, 0.0, 0.0, 1.0)
        assert plan.regime is Regime.DEGENERATE
        assert plan.admits_mean

    def test_positive_drift_plan(self):
        plan = TruncationPlan.from_bounds(2.4, 1.0, 0.0, np.inf)
        assert plan.regime is Regime.NORMAL
        assert plan.a == pytest.approx(-2.4)


def test_pack_plans_layout():
    plans = [
        TruncationPlan.from_bounds(0.0, 1.0, -np.inf, -3.0),
        TruncationPlan.from_bounds(0.0, 1.0, -0.5, 0.5),
    ]
    table = pack_plans(plans)
    assert table.shape == (2, PLAN_WIDTH)
    assert table.dtype == np.float64
    assert not table.flags.writeable
    assert table[0, PLAN_MIRROR] == 1.0
    assert table[1, PLAN_REGIME] == float(Regime.UNIFORM)
    assert table[0, PLAN_A] == pytest.approx(3.0)
    assert table[1, PLAN_B] == pytest.approx(0.5)
