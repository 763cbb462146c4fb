"""
Tests for the request transforms (constraints and kernel-input derivations).
"""

import numpy as np
import pytest

from ssm_rvs.exceptions import DomainError
from ssm_rvs.request.timing import StageTiming, SwitchOrder
from ssm_rvs.request.truncation import PLAN_LOWER, PLAN_WIDTH
from ssm_rvs.transforms import (
    BroadcastToAccumulators,
    CopyParameter,
    PlanDrift,
    PlanStageTiming,
    PlanTruncation,
    RequireMeanInWindow,
    RequireOrdered,
    RequirePositiveDrift,
    SumParameters,
)


class TestConstraints:
    def test_require_ordered_strict(self):
        transform = RequireOrdered("min", "max")
        assert transform.apply({"min": 0.0, "max": 1.0}) == {"min": 0.0, "max": 1.0}
        with pytest.raises(DomainError) as excinfo:
            transform.apply({"min": 1.0, "max": 1.0})
        assert excinfo.value.param == "max"

    def test_require_ordered_allows_equal(self):
        transform = RequireOrdered("A", "b", strict=False)
        transform.apply({"A": 1.0, "b": 1.0})
        with pytest.raises(DomainError):
            transform.apply({"A": np.array([1.0, 2.0]), "b": np.array([1.5, 1.5])})

    def test_require_mean_in_window(self):
        transform = RequireMeanInWindow("mean", "sd", "lower", "upper")
        transform.apply({"mean": 0.5, "sd": 0.0, "lower": 0.0, "upper": 1.0})
        transform.apply({"mean": 5.0, "sd": 1.0, "lower": 0.0, "upper": 1.0})
        with pytest.raises(DomainError):
            transform.apply({"mean": 1.0, "sd": 0.0, "lower": 0.0, "upper": 1.0})

    def test_require_positive_drift(self):
        transform = RequirePositiveDrift("mean_v", "sd_v")
        transform.apply({"mean_v": np.array([1.0, -1.0]), "sd_v": np.array([0.0, 1.0])})
        with pytest.raises(DomainError, match="element 1"):
            transform.apply(
                {"mean_v": np.array([1.0, 0.0]), "sd_v": np.array([1.0, 0.0])}
            )


class TestDerivations:
    def test_broadcast_to_accumulators(self):
        theta = BroadcastToAccumulators(["A", "b"]).apply({"A": 1.5, "b": 2.7})
        np.testing.assert_array_equal(theta["A"], [1.5, 1.5])
        np.testing.assert_array_equal(theta["b"], [2.7, 2.7])
        assert not theta["b"].flags.writeable

    def test_sum_parameters(self):
        theta = {"A": np.array([1.5, 1.0]), "B": np.array([1.2, 0.5])}
        theta = SumParameters(["A", "B"], "b").apply(theta)
        np.testing.assert_allclose(theta["b"], [2.7, 1.5])

    def test_copy_parameter(self):
        theta = CopyParameter("sd_v", "sd_w").apply({"sd_v": np.array([1.0, 2.0])})
        np.testing.assert_array_equal(theta["sd_w"], [1.0, 2.0])

    def test_plan_truncation(self):
        theta = {"mean": 0.0, "sd": 1.0, "lower": 1.0, "upper": np.inf}
        theta = PlanTruncation().apply(theta)
        assert theta["plan"].shape == (1, PLAN_WIDTH)

    @pytest.mark.parametrize("positive, lower", [(True, 0.0), (False, -np.inf)])
    def test_plan_drift(self, positive, lower):
        theta = {"mean_v": np.array([2.4, 1.6]), "sd_v": np.array([1.0, 1.0])}
        theta = PlanDrift("mean_v", "sd_v", "plan_v", positive=positive).apply(theta)
        assert theta["plan_v"].shape == (2, PLAN_WIDTH)
        assert np.all(theta["plan_v"][:, PLAN_LOWER] == lower)

    def test_plan_stage_timing(self):
        theta = PlanStageTiming().apply({"swt": 0.5, "rD": 0.3})
        assert theta["timing"] == StageTiming.single_switch(0.5, 0.3)

        theta = PlanStageTiming(tD="tD").apply({"swt": 0.5, "rD": 0.3, "tD": 0.1})
        assert theta["timing"].order is SwitchOrder.THRESHOLD_FIRST


def test_repr_lists_public_attributes():
    assert repr(RequireOrdered("min", "max")) == (
        "RequireOrdered(lower='min', upper='max', strict=True)"
    )
