"""
Tests for the segment layout of the piecewise samplers.
"""

import pytest

from ssm_rvs.request.timing import NEVER, StageTiming, SwitchOrder


class TestFromDelays:
    def test_simultaneous(self):
        timing = StageTiming.from_delays(swt=0.5, rD=0.3, tD=0.3)
        assert timing.order is SwitchOrder.SIMULTANEOUS
        assert timing.edges == pytest.approx((0.8, 0.8))
        assert timing.swt_d == 0.0
        assert (timing.drift_segment, timing.threshold_segment) == (1, 1)

    def test_threshold_first(self):
        timing = StageTiming.from_delays(swt=0.5, rD=0.4, tD=0.1)
        assert timing.order is SwitchOrder.THRESHOLD_FIRST
        assert timing.edges == pytest.approx((0.6, 0.9))
        assert timing.swt_d == pytest.approx(0.3)
        assert (timing.drift_segment, timing.threshold_segment) == (2, 1)

    def test_drift_first(self):
        timing = StageTiming.from_delays(swt=0.5, rD=0.1, tD=0.4)
        assert timing.order is SwitchOrder.DRIFT_FIRST
        assert timing.edges == pytest.approx((0.6, 0.9))
        assert (timing.drift_segment, timing.threshold_segment) == (1, 2)

    def test_edges_are_ordered(self):
        for rD, tD in [(0.0, 1.0), (1.0, 0.0), (0.2, 0.2)]:
            swt1, swt2 = StageTiming.from_delays(0.1, rD, tD).edges
            assert swt1 <= swt2


def test_single_switch():
    timing = StageTiming.single_switch(swt=0.5, rD=0.3)
    assert timing.edges == pytest.approx((0.8, 0.8))
    assert timing.order is None
    assert timing.drift_segment == 1
    assert timing.threshold_segment == NEVER


def test_timing_is_frozen():
    timing = StageTiming.single_switch(0.5, 0.3)
    with pytest.raises(AttributeError):
        timing.swt1 = 0.0
