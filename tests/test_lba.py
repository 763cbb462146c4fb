"""
Tests for the LBA samplers rlba and rlba_n1.
"""

import numpy as np
import pandas as pd
import pytest

import ssm_rvs
from ssm_rvs.exceptions import ArityError, DomainError, LengthMismatchError
from ssm_rvs.likelihoods import choice_probability

N = 20000


class TestRlba:
    def test_result_table(self, seed):
        df = ssm_rvs.rlba(1000, random_state=seed)
        assert isinstance(df, pd.DataFrame)
        assert df.columns.tolist() == ["RT", "R"]
        assert len(df) == 1000
        assert df["RT"].dtype == np.float32
        assert df["R"].dtype == np.int32

    def test_choices_and_rt_floor(self, seed):
        df = ssm_rvs.rlba(N, t0=0.3, random_state=seed)
        assert set(np.unique(df["R"])) <= {1, 2}
        assert np.all(df["RT"] >= np.float32(0.3))

    def test_double_precision(self, seed):
        df = ssm_rvs.rlba(100, dp=True, random_state=seed)
        assert df["RT"].dtype == np.float64

    def test_zero_draws(self):
        df = ssm_rvs.rlba(0)
        assert df.columns.tolist() == ["RT", "R"]
        assert len(df) == 0

    def test_no_start_variability(self, seed):
        # With A = 0 and sd_v = 0 every trial is deterministic.
        df = ssm_rvs.rlba(
            50, b=1.0, A=0.0, mean_v=[2.0, 1.0], sd_v=0.0, t0=0.5, dp=True, random_state=seed
        )
        np.testing.assert_allclose(df["RT"], 1.0)
        assert np.all(df["R"] == 1)

    def test_tie_goes_to_first_accumulator(self, seed):
        df = ssm_rvs.rlba(
            50, b=1.0, A=0.0, mean_v=[1.0, 1.0], sd_v=0.0, t0=0.0, random_state=seed
        )
        assert np.all(df["R"] == 1)

    def test_faster_accumulator_wins_more_often(self, seed):
        df = ssm_rvs.rlba(N, mean_v=[3.0, 1.0], random_state=seed)
        assert (df["R"] == 1).mean() > 0.8

    def test_negative_mean_drift_still_positive(self, seed):
        df = ssm_rvs.rlba(1000, mean_v=[-1.0, -2.0], sd_v=1.0, random_state=seed)
        assert np.all(np.isfinite(df["RT"]))

    @pytest.mark.parametrize("dp", [False, True])
    def test_choice_probability_matches_closed_form(self, dp, seed):
        theta = dict(b=1.0, A=0.5, mean_v=[2.4, 1.6], sd_v=[1.0, 1.0])
        df = ssm_rvs.rlba(N, t0=0.2, dp=dp, random_state=seed, **theta)
        expected = choice_probability(theta["A"], theta["b"], theta["mean_v"], theta["sd_v"])
        assert abs((df["R"] == 1).mean() - expected) < 0.02

    def test_scalar_sd_broadcasts(self, seed):
        a = ssm_rvs.rlba(200, sd_v=0.7, random_state=seed)
        b = ssm_rvs.rlba(200, sd_v=[0.7, 0.7], random_state=seed)
        pd.testing.assert_frame_equal(a, b)

    def test_three_accumulators_rejected(self):
        with pytest.raises(ArityError):
            ssm_rvs.rlba(10, mean_v=[1.0, 2.0, 3.0], sd_v=1.0)

    def test_sd_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            ssm_rvs.rlba(10, sd_v=[1.0, 1.0, 1.0])

    def test_threshold_below_start_range(self):
        with pytest.raises(DomainError):
            ssm_rvs.rlba(10, A=1.0, b=0.5)

    def test_negative_t0(self):
        with pytest.raises(DomainError):
            ssm_rvs.rlba(10, t0=-0.1)


class TestRlbaN1:
    def test_result_table(self, seed):
        df = ssm_rvs.rlba_n1(1000, random_state=seed)
        assert df.columns.tolist() == ["RT1", "R"]
        assert np.all(df["RT1"] >= np.float32(0.5))

    def test_shares_streams_with_rlba(self, seed):
        race = ssm_rvs.rlba(2000, random_state=seed)
        n1 = ssm_rvs.rlba_n1(2000, random_state=seed)
        np.testing.assert_array_equal(race["R"], n1["R"])
        first_won = race["R"] == 1
        np.testing.assert_array_equal(race["RT"][first_won], n1["RT1"][first_won])
        assert np.all(n1["RT1"][~first_won] >= race["RT"][~first_won])

    def test_deterministic_finishing_time(self, seed):
        df = ssm_rvs.rlba_n1(
            20, b=1.0, A=0.0, mean_v=[0.5, 4.0], sd_v=0.0, t0=0.1, dp=True, random_state=seed
        )
        np.testing.assert_allclose(df["RT1"], 2.1)
        assert np.all(df["R"] == 2)
