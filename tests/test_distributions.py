"""
Tests for the plain distribution samplers: runif, rnorm and rtnorm.
"""

import numpy as np
import pytest
from scipy import stats

import ssm_rvs
from ssm_rvs.exceptions import DomainError, SamplingError

N = 20000


class TestRunif:
    @pytest.mark.parametrize("dp, dtype", [(False, np.float32), (True, np.float64)])
    def test_shape_dtype_and_range(self, dp, dtype, seed):
        x = ssm_rvs.runif(N, min=-2.0, max=3.0, dp=dp, random_state=seed)
        assert x.shape == (N,)
        assert x.dtype == dtype
        assert np.all(x >= -2.0)
        assert np.all(x < 3.0)

    @pytest.mark.parametrize("dp", [False, True])
    def test_defaults(self, dp, seed):
        x = ssm_rvs.runif(N, dp=dp, random_state=seed)
        assert np.all((x >= 0.0) & (x < 1.0))
        assert abs(x.mean() - 0.5) < 0.01
        assert abs(x.var(dtype=np.float64) - 1.0 / 12.0) < 0.003

    @pytest.mark.slow
    @pytest.mark.parametrize("dp", [False, True])
    def test_million_draws_moments(self, dp, seed):
        x = ssm_rvs.runif(2**20, min=0.0, max=1.0, dp=dp, random_state=seed)
        assert x.shape == (2**20,)
        assert np.all((x >= 0.0) & (x < 1.0))
        assert abs(x.mean() - 0.5) < 0.002
        assert abs(x.var(dtype=np.float64) - 1.0 / 12.0) < 0.001

    def test_scaled_moments(self, seed):
        x = ssm_rvs.runif(N, min=-2.0, max=3.0, dp=True, random_state=seed)
        assert abs(x.mean() - 0.5) < 0.05
        assert abs(x.var() - 25.0 / 12.0) < 0.08

    def test_zero_draws(self):
        x = ssm_rvs.runif(0)
        assert x.shape == (0,)
        assert x.dtype == np.float32

    def test_reproducible(self, seed):
        a = ssm_rvs.runif(100, random_state=seed)
        b = ssm_rvs.runif(100, random_state=seed)
        np.testing.assert_array_equal(a, b)

    def test_fresh_seed_per_call(self):
        a = ssm_rvs.runif(100)
        b = ssm_rvs.runif(100)
        assert not np.array_equal(a, b)

    def test_empty_interval_rejected(self):
        with pytest.raises(DomainError):
            ssm_rvs.runif(10, min=1.0, max=0.0)

    def test_unrepresentable_interval_exhausts_retries(self):
        # No float32 value lies in [1 + 1e-12, 1 + 2e-12).
        with pytest.raises(SamplingError):
            ssm_rvs.runif(10, min=1.0 + 1e-12, max=1.0 + 2e-12)

    def test_unrepresentable_interval_fine_in_double(self, seed):
        x = ssm_rvs.runif(10, min=1.0 + 1e-12, max=1.0 + 2e-12, dp=True, random_state=seed)
        assert np.all((x >= 1.0 + 1e-12) & (x < 1.0 + 2e-12))


class TestRnorm:
    @pytest.mark.parametrize("dp", [False, True])
    def test_moments(self, dp, seed):
        x = ssm_rvs.rnorm(N, mean=1.5, sd=2.0, dp=dp, random_state=seed)
        assert abs(x.mean() - 1.5) < 0.06
        assert abs(x.std() - 2.0) < 0.06

    def test_zero_sd(self, seed):
        x = ssm_rvs.rnorm(10, mean=3.0, sd=0.0, random_state=seed)
        np.testing.assert_array_equal(x, np.float32(3.0))

    def test_negative_sd_rejected(self):
        with pytest.raises(DomainError):
            ssm_rvs.rnorm(10, sd=-1.0)

    def test_vector_mean_rejected(self):
        with pytest.raises(ssm_rvs.ArityError):
            ssm_rvs.rnorm(10, mean=[0.0, 1.0])


class TestRtnorm:
    @pytest.mark.parametrize(
        "lower, upper",
        [
            (-1.0, 1.0),  # wide window around the mean
            (-0.2, 0.3),  # narrow window around the mean
            (2.0, np.inf),  # upper tail
            (4.0, 4.5),  # narrow window in the tail
            (-np.inf, -3.0),  # lower tail, mirrored
            (-6.0, -5.5),  # narrow lower window, mirrored
            (0.0, np.inf),  # positive half
            (40.0, np.inf),  # far tail
        ],
    )
    @pytest.mark.parametrize("dp", [False, True])
    def test_strictly_inside_window(self, lower, upper, dp, seed):
        x = ssm_rvs.rtnorm(5000, lower=lower, upper=upper, dp=dp, random_state=seed)
        assert not np.any(np.isnan(x))
        assert np.all(x > lower)
        assert np.all(x < upper)

    def test_shifted_and_scaled(self, seed):
        x = ssm_rvs.rtnorm(N, mean=10.0, sd=3.0, lower=12.0, upper=20.0, random_state=seed)
        expected = stats.truncnorm.mean((12.0 - 10.0) / 3.0, (20.0 - 10.0) / 3.0, 10.0, 3.0)
        assert np.all((x > 12.0) & (x < 20.0))
        assert abs(x.mean() - expected) < 0.05

    def test_zero_sd_returns_mean(self, seed):
        x = ssm_rvs.rtnorm(10, mean=0.5, sd=0.0, lower=0.0, upper=1.0, random_state=seed)
        np.testing.assert_array_equal(x, np.float32(0.5))

    def test_zero_sd_mean_outside_window(self):
        with pytest.raises(DomainError):
            ssm_rvs.rtnorm(10, mean=2.0, sd=0.0, lower=0.0, upper=1.0)

    def test_inverted_window_rejected(self):
        with pytest.raises(DomainError):
            ssm_rvs.rtnorm(10, lower=1.0, upper=1.0)

    def test_nan_bound_rejected(self):
        with pytest.raises(DomainError):
            ssm_rvs.rtnorm(10, lower=np.nan)


@pytest.mark.statistical
class TestRtnormDistribution:
    @pytest.mark.parametrize(
        "mean, sd, lower, upper",
        [
            (0.0, 1.0, -0.5, 0.5),
            (0.0, 1.0, 1.0, np.inf),
            (0.0, 1.0, 3.0, 3.2),
            (1.0, 0.5, -np.inf, -1.0),
            (2.4, 1.0, 0.0, np.inf),
        ],
    )
    def test_matches_scipy_truncnorm(self, mean, sd, lower, upper, seed):
        x = ssm_rvs.rtnorm(N, mean=mean, sd=sd, lower=lower, upper=upper, dp=True, random_state=seed)
        a, b = (lower - mean) / sd, (upper - mean) / sd
        result = stats.kstest(x, stats.truncnorm(a, b, loc=mean, scale=sd).cdf)
        assert result.pvalue > 0.001

    def test_wide_window_converges_to_normal(self, seed):
        x = ssm_rvs.rtnorm(N, mean=1.0, sd=2.0, lower=-100.0, upper=100.0, dp=True, random_state=seed)
        result = stats.kstest(x, stats.norm(1.0, 2.0).cdf)
        assert result.pvalue > 0.001

    def test_runif_is_uniform(self, seed):
        x = ssm_rvs.runif(N, min=2.0, max=5.0, random_state=seed)
        result = stats.kstest(x, stats.uniform(2.0, 3.0).cdf)
        assert result.pvalue > 0.001
