"""
Tests for the JAX engine. Skipped when JAX is not installed.
"""

import numpy as np
import pytest

pytest.importorskip("jax")

import ssm_rvs  # noqa: E402
from ssm_rvs.exceptions import DeviceError  # noqa: E402


@pytest.mark.parametrize("dp", [False, True])
class TestJaxSamplers:
    def test_runif(self, dp, seed):
        x = ssm_rvs.runif(2000, min=-2.0, max=3.0, dp=dp, backend="jax", random_state=seed)
        assert x.dtype == (np.float64 if dp else np.float32)
        assert x.shape == (2000,)
        assert x.min() >= -2.0 and x.max() < 3.0

    def test_rnorm_zero_sd(self, dp, seed):
        x = ssm_rvs.rnorm(10, mean=1.5, sd=0.0, dp=dp, backend="jax", random_state=seed)
        np.testing.assert_array_equal(x, 1.5)

    @pytest.mark.parametrize(
        "lower, upper", [(0.0, np.inf), (-np.inf, -3.0), (4.0, 4.5), (-0.5, 0.5)]
    )
    def test_rtnorm_bounds(self, dp, seed, lower, upper):
        x = ssm_rvs.rtnorm(
            1000, lower=lower, upper=upper, dp=dp, backend="jax", random_state=seed
        )
        assert np.all(x > lower) and np.all(x < upper)

    def test_rlba_deterministic(self, dp, seed):
        df = ssm_rvs.rlba(
            20,
            A=0.0,
            b=1.0,
            mean_v=[2.0, 1.0],
            sd_v=0.0,
            t0=0.2,
            dp=dp,
            backend="jax",
            random_state=seed,
        )
        np.testing.assert_allclose(df["RT"], 0.7, rtol=1e-6)
        assert (df["R"] == 1).all()

    def test_rplba3_layout(self, dp, seed):
        # threshold rises at 0.6, drift switches at 0.9; accumulator 2 wins
        # in segment 3 at 0.9 + (2.0 - 0.9 * 1.0) / 2.0
        df = ssm_rvs.rplba3(
            10,
            A=[0.0, 0.0],
            B=[1.5, 1.5],
            C=[0.5, 0.5],
            mean_v=[0.5, 1.0],
            mean_w=[0.5, 2.0],
            sd_v=0.0,
            sd_w=0.0,
            rD=0.4,
            tD=0.1,
            swt=0.5,
            t0=0.0,
            dp=dp,
            backend="jax",
            random_state=seed,
        )
        np.testing.assert_allclose(df["RT"], 0.9 + 1.1 / 2.0, rtol=1e-5)
        assert (df["R"] == 2).all()

    @pytest.mark.parametrize("name", ["rlba_n1", "rplba0", "rplba1", "rplba2"])
    def test_race_defaults(self, dp, seed, name):
        df = ssm_rvs.sample(name, n=500, dp=dp, backend="jax", random_state=seed)
        assert len(df) == 500
        assert np.isfinite(df.iloc[:, 0]).all()
        assert set(df["R"].unique()) <= {1, 2}


def test_reproducible(seed):
    a = ssm_rvs.rplba1(300, backend="jax", random_state=seed)
    b = ssm_rvs.rplba1(300, backend="jax", random_state=seed)
    assert a.equals(b)


def test_prefix_property(seed):
    short = ssm_rvs.rnorm(10, backend="jax", random_state=seed)
    long = ssm_rvs.rnorm(100, backend="jax", random_state=seed)
    np.testing.assert_array_equal(short, long[:10])


def test_nthread_is_ignored(seed, caplog):
    a = ssm_rvs.runif(50, backend="jax", random_state=seed)
    b = ssm_rvs.runif(50, backend="jax", nthread=4, random_state=seed)
    np.testing.assert_array_equal(a, b)
    assert "ignored by the jax backend" in caplog.text


def test_unknown_device(seed):
    import jax

    with pytest.raises(DeviceError):
        ssm_rvs.runif(5, backend="jax", gpuid=len(jax.devices()), random_state=seed)


def test_device_info_includes_jax():
    info = ssm_rvs.engines.get_device_info()
    assert "jax" in info
    assert len(info["jax"]) >= 1


def test_equal_stages_match_lba(seed):
    theta = dict(A=0.5, b=1.0, mean_v=[2.4, 1.6], sd_v=[1.0, 1.0], t0=0.2)
    lba = ssm_rvs.rlba(1000, dp=True, backend="jax", random_state=seed, **theta)
    plba = ssm_rvs.rplba1(
        1000,
        mean_w=[2.4, 1.6],
        rD=0.0,
        swt=0.3,
        dp=True,
        backend="jax",
        random_state=seed,
        **theta,
    )
    np.testing.assert_array_equal(plba["R"], lba["R"])
    np.testing.assert_allclose(plba["RT"], lba["RT"], rtol=1e-10)


def test_double_engine_announces_global_x64_switch(caplog):
    import logging

    import jax

    from ssm_rvs.engines.jax_parallel.engine import JaxDoubleEngine

    jax.config.update("jax_enable_x64", False)
    try:
        with caplog.at_level(logging.INFO, logger="ssm_rvs.engines.jax_parallel.engine"):
            JaxDoubleEngine()
        assert jax.config.jax_enable_x64
        records = [r for r in caplog.records if "jax_enable_x64" in r.getMessage()]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO

        caplog.clear()
        with caplog.at_level(logging.INFO, logger="ssm_rvs.engines.jax_parallel.engine"):
            JaxDoubleEngine()
        assert "jax_enable_x64" not in caplog.text
    finally:
        # Cached double engines elsewhere in the session rely on x64 staying on.
        jax.config.update("jax_enable_x64", True)
